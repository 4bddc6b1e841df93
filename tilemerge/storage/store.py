"""
Key-value stores - the durable slots the game writes to.

A store holds string values under string keys, the same shape as a
browser's localStorage. Two backends:
- MemoryStore: process-local, for tests and throwaway sessions
- JsonFileStore: one file per key under a data directory

Design decisions:
- Values are opaque strings; callers own the encoding
- Writes are synchronous and replace the whole value
- No locking, there is exactly one writer
"""

from __future__ import annotations
import json
import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path


logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class KeyValueStore(ABC):
    """Abstract durable key-value slot."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        pass

    @abstractmethod
    def delete(self, key: str):
        """Remove a key. Missing keys are ignored."""
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryStore(KeyValueStore):
    """In-memory store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str):
        self._data[key] = value

    def delete(self, key: str):
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    File-backed store. Each value is written as a JSON string document.

    Usage:
        store = JsonFileStore("~/.tilemerge")
        store.set("2048-best-score", '{"score": 0, "name": "Player"}')
    """

    def __init__(self, data_dir: str | Path | None = None):
        if data_dir is None:
            data_dir = Path.home() / ".tilemerge"
        self.data_dir = Path(data_dir).expanduser()

        # Ensure data directory exists
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> str | None:
        path = self._get_path(key)
        if not path.exists():
            return None
        try:
            value = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            # Invalid UTF-8 or invalid JSON
            value = None

        if not isinstance(value, str):
            logger.warning("Unreadable store file %s", path)
            return None
        return value

    def set(self, key: str, value: str):
        path = self._get_path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(value), encoding="utf-8")
        os.replace(tmp_path, path)
        logger.debug("Wrote %s (%d bytes)", path, len(value))

    def delete(self, key: str):
        self._get_path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return [f.stem for f in self.data_dir.glob("*.json")]

    def _get_path(self, key: str) -> Path:
        """File path for a key. Unsafe characters become underscores."""
        return self.data_dir / f"{_SAFE_KEY.sub('_', key)}.json"
