"""Tests for ui/app.py: web API over the entry store."""

import json

import pytest
from fastapi.testclient import TestClient

import ui.app as app_module
from pesotracker.storage import MemoryStorage
from pesotracker.store import EntryStore


@pytest.fixture
def client(workspace):
    return TestClient(app_module.app)


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_index_lists_entries(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "2024-01-05" in r.text
    assert "82.30" in r.text


def test_list_entries_sorted(client):
    data = client.get("/api/entries").json()
    assert data["count"] == 3
    assert [e["date"] for e in data["entries"]] == ["2024-01-05", "2024-01-12", "2024-01-19"]


def test_list_entries_invalid_period(client):
    assert client.get("/api/entries", params={"period": "decade"}).status_code == 400


def test_get_entry(client):
    assert client.get("/api/entries/2024-01-12").json() == {"date": "2024-01-12", "weight": 81.8}
    assert client.get("/api/entries/2000-01-01").status_code == 404


def test_save_entry_with_comma_decimal(client):
    r = client.post("/api/entries", json={"date": "2024-01-26", "weight": "80,94"})
    assert r.status_code == 200
    assert r.json()["entry"] == {"date": "2024-01-26", "weight": 80.94}
    assert client.get("/api/entries").json()["count"] == 4


def test_save_entry_overwrites_date(client):
    client.post("/api/entries", json={"date": "2024-01-05", "weight": 80.0})
    client.post("/api/entries", json={"date": "2024-01-05", "weight": 79.5})
    assert client.get("/api/entries/2024-01-05").json()["weight"] == 79.5
    assert client.get("/api/entries").json()["count"] == 3


@pytest.mark.parametrize("payload", [
    {"date": "2024-01-26", "weight": "abc"},
    {"date": "2024-01-26", "weight": -1},
    {"date": "2024-01-26", "weight": 0},
    {"date": "2024-01-26", "weight": 10 ** 400},
    {"date": "2024-13-01", "weight": 80},
    {"date": "2999-01-01", "weight": 80},
    {"weight": 80},
    {"date": "2024-01-26"},
])
def test_save_entry_rejects_invalid_input(client, payload):
    assert client.post("/api/entries", json=payload).status_code == 400
    assert client.get("/api/entries").json()["count"] == 3


def test_save_entry_storage_failure(client, monkeypatch):
    monkeypatch.setattr(app_module, "_store", lambda: EntryStore(MemoryStorage(fail_writes=True)))
    r = client.post("/api/entries", json={"date": "2024-01-26", "weight": 80})
    assert r.status_code == 507


def test_delete_entry_idempotent(client):
    assert client.delete("/api/entries/2024-01-05").status_code == 200
    assert client.delete("/api/entries/2024-01-05").status_code == 200
    data = client.get("/api/entries").json()
    assert [e["date"] for e in data["entries"]] == ["2024-01-12", "2024-01-19"]


def test_stats(client):
    data = client.get("/api/stats").json()
    assert data["count"] == 3
    assert data["change"] == -1.1
    assert data["min_weight"] == 81.2
    assert data["forecast"] is not None


def test_export_json(client):
    r = client.get("/api/export")
    assert r.status_code == 200
    disposition = r.headers["content-disposition"]
    assert "Peso_Tracker_" in disposition and disposition.endswith('.json"')
    assert [e["date"] for e in json.loads(r.text)] == ["2024-01-05", "2024-01-12", "2024-01-19"]


def test_export_csv(client):
    r = client.get("/api/export", params={"fmt": "csv"})
    assert r.status_code == 200
    assert r.text.splitlines()[0] == "date,weight"
    assert r.headers["content-disposition"].endswith('.csv"')


def test_export_empty(client):
    client.post("/api/reset")
    assert client.get("/api/export").status_code == 404


def test_import_merges(client):
    content = json.dumps([
        {"date": "2024-01-19", "weight": 81.0},
        {"date": "2024-01-26", "weight": 80.5},
        {"date": "2024-02-02", "weight": "NaN"},
    ])
    r = client.post("/api/import", json={"content": content, "filename": "backup.json"})
    assert r.status_code == 200
    assert r.json() == {"ok": True, "received": 3, "accepted": 2, "skipped": 1, "total": 4}
    assert client.get("/api/entries/2024-01-19").json()["weight"] == 81.0


def test_import_csv(client):
    r = client.post("/api/import", json={"content": "date,weight\n2024-01-26,80.5\n", "format": "csv"})
    assert r.json()["accepted"] == 1


def test_import_format_error_leaves_data(client):
    before = client.get("/api/entries").json()
    r = client.post("/api/import", json={"content": '{"date": "2024-01-26", "weight": 80}'})
    assert r.status_code == 400
    assert client.get("/api/entries").json() == before


def test_import_missing_content(client):
    assert client.post("/api/import", json={}).status_code == 400
