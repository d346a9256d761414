# shopfront/storage/token_store.py

"""Small key-value stores used to keep the session tokens on disk."""

import json
import logging
from pathlib import Path
from typing import Protocol

from shopfront.config.settings import Settings

logger = logging.getLogger("shopfront.storage")


class KeyValueStore(Protocol):
    """String key-value persistence used for session tokens."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class JsonFileStore:
    """Keeps all keys in a single JSON object on disk.

    Every write rewrites the whole file. A missing or unreadable file
    is treated as an empty store.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.TOKEN_STORE_PATH
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("JsonFileStore initialised, path=%s", self.path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "Ignoring unreadable store %s: %s", self.path, exc
            )
            return {}
        if not isinstance(data, dict):
            logger.warning(
                "Ignoring store %s: top level is not an object", self.path
            )
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
        logger.debug("Stored key '%s' in %s", key, self.path)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is None:
            return
        self._write(data)
        logger.debug("Removed key '%s' from %s", key, self.path)


class MemoryStore:
    """Dict-backed store for tests and ``--ephemeral`` runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
