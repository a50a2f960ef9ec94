"""Shared test fixtures for Peso Tracker tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml

from pesotracker.storage import MemoryStorage, STORAGE_KEY
from pesotracker.store import EntryStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings and three stored entries."""
    root = tmp_path / "workspace"
    (root / "storage").mkdir(parents=True)

    settings = {
        "timezone": "UTC",
        "export_dir": "exports",
    }
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    # Out of order, one weight stored as a string by an older client
    entries = [
        {"date": "2024-01-12", "weight": "81.80"},
        {"date": "2024-01-05", "weight": 82.3},
        {"date": "2024-01-19", "weight": 81.2},
    ]
    (root / "storage" / f"{STORAGE_KEY}.json").write_text(
        json.dumps(entries), encoding="utf-8"
    )

    # Set env var
    os.environ["PESO_TRACKER_ROOT"] = str(root)
    yield root
    # Cleanup
    if "PESO_TRACKER_ROOT" in os.environ:
        del os.environ["PESO_TRACKER_ROOT"]


@pytest.fixture
def memory() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(memory: MemoryStorage) -> EntryStore:
    """Entry store over an empty in-memory slot."""
    return EntryStore(memory)
