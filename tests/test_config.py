"""
Tests for settings loading and endpoint storage.
"""

import pytest
import yaml
from pydantic_settings import BaseSettings

from surveylink.config import Settings, load_settings
from surveylink.endpoint_store import MemoryEndpointStore, YamlEndpointStore

ENDPOINT = "https://script.example.com/exec"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("BASE_URL", "ENDPOINT_STORE_PATH", "SUBMIT_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv("SURVEYLINK_" + name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    def test_defaults_without_file(self):
        settings = load_settings()
        assert settings == Settings()
        assert settings.submit_timeout is None

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            "base_url: https://forms.example.org/app\nsubmit_timeout: 12\nunknown: ignored\n",
            encoding="utf-8",
        )
        settings = load_settings(str(path))
        assert settings.base_url == "https://forms.example.org/app"
        assert settings.submit_timeout == 12.0

    def test_default_file_in_cwd(self, tmp_path):
        (tmp_path / "surveylink.yaml").write_text("log_level: DEBUG\n", encoding="utf-8")
        assert load_settings().log_level == "DEBUG"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "surveylink.yaml").write_text("base_url: https://a.example\n", encoding="utf-8")
        monkeypatch.setenv("SURVEYLINK_BASE_URL", "https://b.example")
        monkeypatch.setenv("SURVEYLINK_SUBMIT_TIMEOUT", "2.5")
        settings = load_settings()
        assert settings.base_url == "https://b.example"
        assert settings.submit_timeout == 2.5

    def test_null_timeout(self, tmp_path, monkeypatch):
        (tmp_path / "surveylink.yaml").write_text("submit_timeout: 3\n", encoding="utf-8")
        monkeypatch.setenv("SURVEYLINK_SUBMIT_TIMEOUT", "none")
        assert load_settings().submit_timeout is None

    def test_yaml_null_timeout(self, tmp_path):
        (tmp_path / "surveylink.yaml").write_text("submit_timeout: null\n", encoding="utf-8")
        assert load_settings().submit_timeout is None

    def test_empty_env_value_is_unset(self, tmp_path, monkeypatch):
        (tmp_path / "surveylink.yaml").write_text("base_url: https://a.example\n", encoding="utf-8")
        monkeypatch.setenv("SURVEYLINK_BASE_URL", "")
        assert load_settings().base_url == "https://a.example"

    def test_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("SURVEYLINK_SUBMIT_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            load_settings()

    def test_is_base_settings(self):
        assert issubclass(Settings, BaseSettings)

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "nope.yaml"))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(str(path))

    def test_endpoint_store_file_expands_home(self):
        assert "~" not in Settings().endpoint_store_file


class TestEndpointStores:
    def test_memory_store(self):
        store = MemoryEndpointStore()
        assert store.load() is None
        store.save(ENDPOINT)
        assert store.load() == ENDPOINT

    def test_yaml_store_missing_file(self, tmp_path):
        assert YamlEndpointStore(str(tmp_path / "none.yaml")).load() is None

    def test_yaml_store_roundtrip(self, tmp_path):
        path = tmp_path / "nested" / "endpoint.yaml"
        YamlEndpointStore(str(path)).save(ENDPOINT)
        assert YamlEndpointStore(str(path)).load() == ENDPOINT
        assert yaml.safe_load(path.read_text(encoding="utf-8")) == {"webAppUrl": ENDPOINT}

    def test_yaml_store_keeps_other_keys(self, tmp_path):
        path = tmp_path / "endpoint.yaml"
        path.write_text("theme: dark\n", encoding="utf-8")
        YamlEndpointStore(str(path)).save(ENDPOINT)
        assert yaml.safe_load(path.read_text(encoding="utf-8")) == {"theme": "dark", "webAppUrl": ENDPOINT}

    def test_yaml_store_empty_value(self, tmp_path):
        path = tmp_path / "endpoint.yaml"
        path.write_text("webAppUrl: ''\n", encoding="utf-8")
        assert YamlEndpointStore(str(path)).load() is None
