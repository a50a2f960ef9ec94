"""Tests for pesotracker/workspace.py: root, settings and timezone."""

from zoneinfo import ZoneInfo

from pesotracker.workspace import (
    export_dir,
    get_user_timezone,
    load_settings,
    log_path,
    settings_path,
    storage_dir,
    today_str,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()


def test_paths(workspace):
    assert settings_path(workspace) == workspace / "settings.yaml"
    assert storage_dir(workspace) == workspace / "storage"
    assert export_dir(workspace) == workspace / "exports"
    assert log_path(workspace) == workspace / "peso-tracker.log"


def test_load_settings(workspace):
    (workspace / "settings.yaml").write_text(
        "timezone: Europe/Madrid\nexport_dir: backups\n", encoding="utf-8"
    )
    settings = load_settings(workspace)
    assert settings == {"timezone": "Europe/Madrid", "export_dir": "backups"}
    assert get_user_timezone(workspace) == ZoneInfo("Europe/Madrid")
    assert export_dir(workspace) == workspace / "backups"


def test_load_settings_missing_file(tmp_path):
    assert load_settings(tmp_path) == {"timezone": "UTC", "export_dir": "exports"}


def test_load_settings_malformed_yaml(tmp_path):
    (tmp_path / "settings.yaml").write_text("timezone: [unclosed\n", encoding="utf-8")
    assert load_settings(tmp_path)["timezone"] == "UTC"


def test_unknown_timezone_falls_back_to_utc(tmp_path):
    (tmp_path / "settings.yaml").write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    assert get_user_timezone(tmp_path) == ZoneInfo("UTC")


def test_today_str_format(workspace):
    today = today_str(workspace)
    assert len(today) == 10
    assert today[4] == "-" and today[7] == "-"
