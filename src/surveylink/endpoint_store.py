"""
Storage for the saved submission endpoint URL.

The endpoint URL is the only value that outlives a session. It is read
once when an authoring session starts and written only when the author
explicitly saves it.
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

import yaml

ENDPOINT_KEY = "webAppUrl"


class EndpointStore(ABC):
    """Key-value storage for a single endpoint URL."""

    @abstractmethod
    def load(self) -> Optional[str]:
        ...

    @abstractmethod
    def save(self, url: str) -> None:
        ...


class MemoryEndpointStore(EndpointStore):
    def __init__(self, url: Optional[str] = None):
        self._url = url

    def load(self) -> Optional[str]:
        return self._url

    def save(self, url: str) -> None:
        self._url = url


class YamlEndpointStore(EndpointStore):
    """
    Keeps the endpoint in a small YAML file.

    Other keys in the file are preserved on save.
    """

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}

    def load(self) -> Optional[str]:
        url = self._read().get(ENDPOINT_KEY)
        return url if isinstance(url, str) and url else None

    def save(self, url: str) -> None:
        data = self._read()
        data[ENDPOINT_KEY] = url
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True)
