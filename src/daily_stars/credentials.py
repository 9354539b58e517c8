from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .errors import MissingCredentialError

logger = logging.getLogger(__name__)

API_KEY_NAME = "openrouter_api_key"
API_KEY_ENV = "OPENROUTER_API_KEY"


class KeyValueStore:
    """String-to-string store persisted as a JSON object on disk.

    Every mutation is written through immediately.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._values: dict[str, str] = self._read()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as file_handle:
                data = json.load(file_handle)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable state file %s", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as file_handle:
            json.dump(self._values, file_handle, indent=2)

    def get(self, key: str, default: str = "") -> str:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._write()

    def delete(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._write()

    def __contains__(self, key: str) -> bool:
        return key in self._values


class CredentialStore:
    """OpenRouter API key held under a fixed name in a `KeyValueStore`."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._api_key = store.get(API_KEY_NAME) or os.getenv(API_KEY_ENV, "")

    @property
    def api_key(self) -> str:
        return self._api_key

    def set_api_key(self, value: str) -> None:
        self._api_key = value.strip()
        self.store.set(API_KEY_NAME, self._api_key)

    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def require_api_key(self) -> str:
        """Return the key, failing before any network call if none is set.

        Raises:
            MissingCredentialError: If no key is stored or exported.
        """
        if not self._api_key:
            raise MissingCredentialError()
        return self._api_key
