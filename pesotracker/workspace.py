"""Workspace root, settings, timezone and path helpers for Peso Tracker."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from pesotracker.fileio import read_yaml

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "timezone": "UTC",
    "export_dir": "exports",
}


def workspace_root() -> Path:
    """Get the workspace root directory (holds settings.yaml and storage/)."""
    return Path(
        os.environ.get("PESO_TRACKER_ROOT", str(Path.home() / "peso-tracker"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def storage_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "storage"


def export_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / str(load_settings(root)["export_dir"])


# ── Settings ──────────────────────────────────────────────────

def load_settings(root: Path | None = None) -> dict[str, Any]:
    """Load settings.yaml merged over the defaults.

    A missing, unreadable or malformed file yields the defaults.
    """
    settings = dict(DEFAULT_SETTINGS)
    try:
        data = read_yaml(settings_path(root))
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable settings file: {e}")
        return settings
    for key in DEFAULT_SETTINGS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            settings[key] = value.strip()
    return settings


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from settings.yaml, defaulting to UTC."""
    name = load_settings(root)["timezone"]
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, falling back to UTC")
        return ZoneInfo("UTC")


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in user's timezone."""
    return now_local(root).date().isoformat()


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


def log_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "peso-tracker.log"


def configure_logging(filename: Path | None = None) -> None:
    """Root logging setup for entry points; level from PESO_TRACKER_LOG_LEVEL.

    The terminal UI passes a *filename* so log lines do not draw over the screen.
    """
    level = os.environ.get("PESO_TRACKER_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level, logging.INFO),
        filename=str(filename) if filename else None,
    )
