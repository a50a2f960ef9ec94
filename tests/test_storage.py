"""Tests for pesotracker/storage.py: file and in-memory backends."""

import pytest

from pesotracker.errors import PersistenceError
from pesotracker.storage import FileStorage, MemoryStorage


def test_file_storage_missing_key(tmp_path):
    assert FileStorage(tmp_path / "storage").read_raw("weightEntries") is None


def test_file_storage_round_trip(tmp_path):
    storage = FileStorage(tmp_path / "storage")
    storage.write_raw("weightEntries", "[]")
    assert (tmp_path / "storage" / "weightEntries.json").read_text(encoding="utf-8") == "[]"
    assert storage.read_raw("weightEntries") == "[]"
    storage.write_raw("weightEntries", '[{"date":"2024-01-01","weight":70.0}]')
    assert storage.read_raw("weightEntries") == '[{"date":"2024-01-01","weight":70.0}]'


def test_file_storage_leaves_no_temp_files(tmp_path):
    storage = FileStorage(tmp_path / "storage")
    storage.write_raw("weightEntries", "[]")
    assert [p.name for p in (tmp_path / "storage").iterdir()] == ["weightEntries.json"]


def test_file_storage_write_failure_is_persistence_error(tmp_path):
    blocker = tmp_path / "storage"
    blocker.write_text("not a directory", encoding="utf-8")
    storage = FileStorage(blocker)
    with pytest.raises(PersistenceError):
        storage.write_raw("weightEntries", "[]")


def test_file_storage_read_failure_is_persistence_error(tmp_path):
    storage = FileStorage(tmp_path / "storage")
    storage.path_for("weightEntries").mkdir(parents=True)
    with pytest.raises(PersistenceError):
        storage.read_raw("weightEntries")


def test_file_storage_rejects_path_like_keys(tmp_path):
    storage = FileStorage(tmp_path)
    with pytest.raises(ValueError):
        storage.read_raw("../elsewhere")


def test_memory_storage():
    storage = MemoryStorage()
    assert storage.read_raw("k") is None
    storage.write_raw("k", "v")
    assert storage.read_raw("k") == "v"
    assert storage.writes == 1


def test_memory_storage_fail_writes():
    storage = MemoryStorage(data={"k": "old"}, fail_writes=True)
    with pytest.raises(PersistenceError):
        storage.write_raw("k", "new")
    assert storage.read_raw("k") == "old"
