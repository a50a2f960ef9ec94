from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Body
from fastapi.responses import HTMLResponse, Response

from pesotracker import (
    EntryStore,
    FilterPeriod,
    ImportFormatError,
    PersistenceError,
    WeightEntry,
    configure_logging,
    export_filename,
    filter_by_period,
    import_backup,
    now_local,
    open_store,
    parse_weight_input,
    render_export,
    summarize,
    today_str as _today_str,
    validate_entry_input,
)

configure_logging()
logger = logging.getLogger(__name__)

MEDIA_TYPES = {"json": "application/json", "csv": "text/csv"}


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _store() -> EntryStore:
    return open_store()


def _period(value: str) -> FilterPeriod:
    try:
        return FilterPeriod(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid period: {value}")


def _persistence_failed(e: PersistenceError) -> HTTPException:
    logger.error(f"Storage failure: {e}")
    return HTTPException(status_code=507, detail=f"Could not save data: {e}")


app = FastAPI(title="Peso Tracker", version="0.1.0")


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(period: str = "all") -> HTMLResponse:
    entries = filter_by_period(_store().read_all(), _period(period), _today_str())
    summary = summarize(entries)

    rows = [
        f"<tr><td>{_escape(e.date)}</td><td>{e.weight:.2f}</td></tr>"
        for e in reversed(entries)
    ]
    table = "".join(rows) if rows else '<tr><td colspan="2" class="muted">No entries yet.</td></tr>'

    change_txt = ""
    if summary.change is not None:
        arrow = "▲" if summary.change > 0 else "▼"
        change_txt = f"{arrow} {abs(summary.change):.1f} kg"
    forecast_txt = ""
    if summary.forecast is not None:
        forecast_txt = f"Trend: {summary.forecast:.1f} kg by {summary.forecast_date}"

    html = f"""<!doctype html>
<html>
<head><meta charset="utf-8"><title>Peso Tracker</title></head>
<body>
<h1>Peso Tracker</h1>
<p>{_escape(change_txt)}</p>
<p>{_escape(forecast_txt)}</p>
<table>
<thead><tr><th>Date</th><th>Weight (kg)</th></tr></thead>
<tbody>{table}</tbody>
</table>
</body>
</html>"""
    return HTMLResponse(html)


# ── Entries ───────────────────────────────────────────────────

@app.get("/api/entries")
def api_list_entries(period: str = "all") -> dict[str, Any]:
    entries = filter_by_period(_store().read_all(), _period(period), _today_str())
    return {"count": len(entries), "entries": [e.to_dict() for e in entries]}


@app.get("/api/entries/{entry_date}")
def api_get_entry(entry_date: str) -> dict[str, Any]:
    entry = _store().get(entry_date)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No entry for {entry_date}")
    return entry.to_dict()


@app.post("/api/entries")
def api_save_entry(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Add or overwrite the entry for a date."""
    entry_date = payload.get("date", "")
    raw_weight = payload.get("weight")
    weight: Any = raw_weight
    if raw_weight not in (None, ""):
        try:
            weight = parse_weight_input(raw_weight)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid weight: {raw_weight}")

    errors = validate_entry_input(entry_date, weight, _today_str())
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))

    try:
        stored = _store().upsert(WeightEntry(date=entry_date, weight=weight))
    except PersistenceError as e:
        raise _persistence_failed(e)
    return {"ok": True, "entry": stored.to_dict() if stored else None}


@app.delete("/api/entries/{entry_date}")
def api_delete_entry(entry_date: str) -> dict[str, Any]:
    try:
        _store().remove(entry_date)
    except PersistenceError as e:
        raise _persistence_failed(e)
    return {"ok": True, "date": entry_date}


@app.get("/api/stats")
def api_stats(period: str = "all", forecast_days: int = 30) -> dict[str, Any]:
    entries = filter_by_period(_store().read_all(), _period(period), _today_str())
    return summarize(entries, forecast_days=forecast_days).to_dict()


# ── Backup ────────────────────────────────────────────────────

@app.get("/api/export")
def api_export(fmt: str = "json") -> Response:
    if fmt not in MEDIA_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported format: {fmt}")
    entries = _store().read_all()
    if not entries:
        raise HTTPException(status_code=404, detail="No data to export")
    filename = export_filename(now_local(), fmt)
    return Response(
        content=render_export(entries, fmt),
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/api/import")
def api_import(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Merge a backup document (JSON array or date,weight CSV) into the store."""
    content = payload.get("content")
    if not isinstance(content, str):
        raise HTTPException(status_code=400, detail="Missing content")
    fmt = payload.get("format") or None
    filename = payload.get("filename") or None
    try:
        report = import_backup(_store(), content, fmt=fmt, filename=filename)
    except ImportFormatError as e:
        raise HTTPException(status_code=400, detail=f"Import failed: {e}")
    except PersistenceError as e:
        raise _persistence_failed(e)
    return {"ok": True, **report.to_dict()}


@app.post("/api/reset")
def api_reset() -> dict[str, Any]:
    try:
        _store().clear()
    except PersistenceError as e:
        raise _persistence_failed(e)
    return {"ok": True}
