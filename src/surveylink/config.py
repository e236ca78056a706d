"""
Settings for the command line tools.

Read from a YAML file, then overridden by SURVEYLINK_* environment
variables:

    base_url: https://forms.example.org/app     # location share links point at
    endpoint_store_path: ~/.surveylink/endpoint.yaml
    submit_timeout: null                        # seconds, null = no timeout
    log_level: WARNING
"""

import os
from typing import Optional

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_FILE = "surveylink.yaml"
ENV_PREFIX = "SURVEYLINK_"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        env_parse_none_str="none",
        extra="ignore",
    )

    base_url: str = "http://localhost/"
    endpoint_store_path: str = os.path.join("~", ".surveylink", "endpoint.yaml")
    submit_timeout: Optional[float] = None
    log_level: str = "WARNING"

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        # Environment first so it wins over values read from the YAML file.
        return env_settings, init_settings

    @property
    def endpoint_store_file(self) -> str:
        return os.path.expanduser(self.endpoint_store_path)


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from `path` (or ./surveylink.yaml if it exists).

    Raises:
        FileNotFoundError: If an explicit `path` does not exist
        ValueError: If the file is not a mapping or a value has the wrong type
    """
    data = {}
    if path is None and os.path.exists(DEFAULT_CONFIG_FILE):
        path = DEFAULT_CONFIG_FILE
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: settings must be a mapping")
    return Settings(**data)
