"""
Tests for the surveylink command line.
"""

import csv
import io
import json

import pytest

from surveylink.cli import main
from surveylink.endpoint_store import YamlEndpointStore
from surveylink.serialization import survey_to_json, survey_to_yaml
from surveylink.share_link import decode_share_link

ENDPOINT = "https://script.example.com/exec"
BASE = "https://forms.example.org/app"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SURVEYLINK_ENDPOINT_STORE_PATH", str(tmp_path / "endpoint.yaml"))
    monkeypatch.delenv("SURVEYLINK_BASE_URL", raising=False)
    return tmp_path


@pytest.fixture
def survey_file(workdir, survey):
    path = workdir / "survey.yaml"
    path.write_text(survey_to_yaml(survey), encoding="utf-8")
    return path


class TestShare:
    def test_prints_decodable_link(self, survey_file, survey, capsys):
        assert main(["share", str(survey_file), "--endpoint", ENDPOINT, "--base-url", BASE]) == 0
        link = capsys.readouterr().out.strip()
        assert link.startswith(BASE + "?survey=")
        assert decode_share_link(link) == (survey, ENDPOINT)

    def test_uses_saved_endpoint(self, workdir, survey_file, survey, capsys):
        main(["share", str(survey_file), "--endpoint", ENDPOINT, "--save-endpoint"])
        assert YamlEndpointStore(str(workdir / "endpoint.yaml")).load() == ENDPOINT
        capsys.readouterr()
        assert main(["share", str(survey_file)]) == 0
        assert decode_share_link(capsys.readouterr().out.strip())[1] == ENDPOINT

    def test_no_endpoint(self, survey_file, capsys):
        assert main(["share", str(survey_file)]) == 2
        assert "--endpoint" in capsys.readouterr().err

    def test_invalid_survey_file(self, workdir, capsys):
        path = workdir / "bad.json"
        path.write_text('{"title": "x"}', encoding="utf-8")
        assert main(["share", str(path), "--endpoint", ENDPOINT]) == 1
        assert "Invalid survey" in capsys.readouterr().err

    def test_malformed_survey_file(self, workdir, capsys):
        path = workdir / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["share", str(path), "--endpoint", ENDPOINT]) == 1
        assert "Invalid survey" in capsys.readouterr().err


class TestOpen:
    def test_open_link(self, survey_file, survey, capsys):
        main(["share", str(survey_file), "--endpoint", ENDPOINT, "--base-url", BASE])
        link = capsys.readouterr().out.strip()
        assert main(["open", link]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == f"Endpoint: {ENDPOINT}"
        assert out[1] == survey_to_json(survey)

    def test_open_broken_link(self, workdir, capsys):
        assert main(["open", BASE + "?survey=not-base64&endpoint=abc"]) == 1
        assert "Could not open link" in capsys.readouterr().err


class TestExport:
    def test_export_default_name(self, workdir, survey_file, complete_response, capsys):
        responses = workdir / "responses.json"
        responses.write_text(json.dumps([complete_response]), encoding="utf-8")
        assert main(["export", str(survey_file), str(responses)]) == 0
        out_path = workdir / "Khảo_sát_môi_trường_2024.csv"
        rows = list(csv.reader(io.StringIO(out_path.read_text(encoding="utf-8"))))
        assert rows[1][0] == "Công ty ABC"
        assert "1 response(s)" in capsys.readouterr().out

    def test_export_explicit_output(self, workdir, survey_file, complete_response):
        responses = workdir / "responses.json"
        responses.write_text(json.dumps([complete_response]), encoding="utf-8")
        assert main(["export", str(survey_file), str(responses), "-o", str(workdir / "x.csv")]) == 0
        assert (workdir / "x.csv").exists()

    def test_export_nothing(self, workdir, survey_file, capsys):
        responses = workdir / "responses.json"
        responses.write_text("[]", encoding="utf-8")
        assert main(["export", str(survey_file), str(responses)]) == 1
        assert "No responses" in capsys.readouterr().err
