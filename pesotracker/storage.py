"""Key-value storage backends for the entry store.

A backend holds string blobs under string keys. The entry store only ever
uses one key (:data:`STORAGE_KEY`).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol

from pesotracker.errors import PersistenceError
from pesotracker.fileio import read_text, write_text_atomic

STORAGE_KEY = "weightEntries"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(Protocol):
    """Interface for reading and writing raw persisted blobs."""

    def read_raw(self, key: str) -> str | None:
        """Return the blob stored under key, or None if never written."""
        ...

    def write_raw(self, key: str, value: str) -> None:
        """Replace the blob stored under key."""
        ...


class FileStorage:
    """One file per key inside a directory. Writes are atomic."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def read_raw(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e

    def write_raw(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            write_text_atomic(path, value)
        except OSError as e:
            raise PersistenceError(f"Cannot write {path}: {e}") from e


class MemoryStorage:
    """Dict-backed storage, mainly for tests.

    ``fail_writes`` simulates a backend that rejects writes (quota exceeded).
    """

    def __init__(self, data: dict[str, str] | None = None, fail_writes: bool = False) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.fail_writes = fail_writes
        self.writes = 0

    def read_raw(self, key: str) -> str | None:
        return self.data.get(key)

    def write_raw(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("Storage quota exceeded")
        self.data[key] = value
        self.writes += 1
