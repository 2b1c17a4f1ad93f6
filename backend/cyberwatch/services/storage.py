"""
Key-value blob storage standing in for browser localStorage.

Values are JSON-serializable dicts. ``read`` raises ``StorageError`` when a
stored blob cannot be decoded; callers decide how to recover.
"""

import json
import os
from pathlib import Path
from typing import Protocol

import structlog

from cyberwatch.errors import StorageError

logger = structlog.get_logger()


class KeyValueStorage(Protocol):
    def read(self, key: str) -> dict | None: ...

    def write(self, key: str, value: dict) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStorage:
    """Holds raw JSON strings so decode failures behave like the file store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> dict | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return _decode(key, raw)

    def write(self, key: str, value: dict) -> None:
        self._data[key] = json.dumps(value, default=str)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def raw(self, key: str) -> str | None:
        return self._data.get(key)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage:
    """All keys in one JSON object on disk, rewritten atomically on change."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Unreadable storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} is not a JSON object")
        return data

    def _save(self, data: dict[str, str]) -> None:
        os.makedirs(self.path.parent, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w") as f:
            json.dump(data, f, indent=2)
        tmp.replace(self.path)

    def read(self, key: str) -> dict | None:
        raw = self._load().get(key)
        if raw is None:
            return None
        return _decode(key, raw)

    def write(self, key: str, value: dict) -> None:
        try:
            data = self._load()
        except StorageError:
            logger.warning("Discarding unreadable storage file", path=str(self.path))
            data = {}
        data[key] = json.dumps(value, default=str)
        self._save(data)

    def remove(self, key: str) -> None:
        try:
            data = self._load()
        except StorageError:
            logger.warning("Discarding unreadable storage file", path=str(self.path))
            self._save({})
            return
        if data.pop(key, None) is not None:
            self._save(data)


def _decode(key: str, raw: str) -> dict:
    try:
        value = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise StorageError(f"Corrupt blob under {key!r}: {e}") from e
    if not isinstance(value, dict):
        raise StorageError(f"Blob under {key!r} is not an object")
    return value
