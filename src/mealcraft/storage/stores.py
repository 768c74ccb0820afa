"""
Synchronous key/value stores -- the on-device substrate.

The local backend and the backend selector both write plain strings
into one of these. MemoryStore lives for the session only;
JsonFileStore keeps everything in one JSON file on disk.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, Optional

from .errors import MalformedStore

logger = logging.getLogger("mealcraft.storage.stores")


class KeyValueStore(ABC):
    """Synchronous string-to-string store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored text, or None if the key is unset."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``. Missing keys are ignored."""

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over the stored keys."""


class MemoryStore(KeyValueStore):
    """In-memory store scoped to the running process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object file.

    Every write rewrites the file through a temporary sibling so a
    crash mid-write leaves the previous contents intact. A file that
    cannot be read raises MalformedStore and is never overwritten.

    Args:
        path: Location of the JSON file. Parent directories are created.
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._data = self._read()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Unreadable store %s: %s", self.path, exc)
            raise MalformedStore(f"Cannot read store {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise MalformedStore(f"Store {self.path} is not a JSON object")
        bad = [k for k, v in data.items() if not isinstance(v, str)]
        if bad:
            raise MalformedStore(
                f"Store {self.path} has non-text values for: {', '.join(bad)}"
            )
        return data

    def _flush(self) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(
            json.dumps(self._data, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        tmp.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))
