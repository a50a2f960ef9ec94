"""Backup export and import for Peso Tracker.

Exports are a pretty-printed JSON array (or a ``date,weight`` CSV). Imports
accept either format and are merged into the store, never replacing it.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from pesotracker.errors import ImportFormatError
from pesotracker.fileio import write_text_atomic
from pesotracker.merge import count_valid
from pesotracker.models import ImportReport, WeightEntry
from pesotracker.store import EntryStore
from pesotracker.workspace import now_local

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "Peso_Tracker"
FORMATS = {"json", "csv"}


# ── Export ────────────────────────────────────────────────────


def export_json(entries: Sequence[WeightEntry]) -> str:
    return json.dumps(
        [e.to_dict() for e in entries], indent=2, ensure_ascii=False, allow_nan=False
    ) + "\n"


def export_csv(entries: Sequence[WeightEntry]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["date", "weight"])
    for e in entries:
        writer.writerow([e.date, f"{e.weight:.2f}"])
    return buf.getvalue()


def export_filename(now: datetime, ext: str = "json") -> str:
    """'Peso_Tracker_2024_01_05_08_30.json' for 2024-01-05 08:30."""
    return (
        f"{EXPORT_PREFIX}_{now.year}_{now.month:02d}_{now.day:02d}"
        f"_{now.hour:02d}_{now.minute:02d}.{ext}"
    )


def render_export(entries: Sequence[WeightEntry], fmt: str = "json") -> str:
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    return export_csv(entries) if fmt == "csv" else export_json(entries)


def write_export(
    store: EntryStore,
    directory: Path,
    fmt: str = "json",
    now: datetime | None = None,
) -> Path:
    """Write a timestamped backup file into *directory* and return its path."""
    entries = store.read_all()
    if not entries:
        raise ValueError("No entries to export")
    content = render_export(entries, fmt)
    if now is None:
        now = now_local()
    path = Path(directory) / export_filename(now, fmt)
    write_text_atomic(path, content)
    logger.info(f"Exported {len(entries)} entries to {path}")
    return path


# ── Import ────────────────────────────────────────────────────


def parse_json_import(text: str) -> list[Any]:
    """Parse a JSON backup. Anything but a top-level array is a format error."""
    try:
        data = json.loads(text.lstrip("\ufeff"))
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise ImportFormatError(
            f"Expected a JSON array of entries, got {type(data).__name__}"
        )
    return data


def _parse_csv_weight(cell: str) -> float | None:
    try:
        return float(cell.replace(",", "."))
    except ValueError:
        return None


def parse_csv_import(text: str) -> list[dict[str, Any]]:
    """Parse ``date,weight`` rows with an optional header row.

    The first non-blank row is a header when its weight column is not
    numeric. Blank lines are ignored. Malformed rows come back with
    ``weight`` None so the merge step drops them and the import report
    counts them.
    """
    records: list[dict[str, Any]] = []
    seen_first = False
    for row in csv.reader(io.StringIO(text.lstrip("\ufeff"))):
        cells = [c.strip() for c in row]
        while cells and cells[-1] == "":
            cells.pop()
        if not cells:
            continue
        if not seen_first:
            seen_first = True
            if len(cells) == 2 and _parse_csv_weight(cells[1]) is None:
                continue
        if len(cells) != 2:
            records.append({"date": cells[0], "weight": None})
            continue
        records.append({"date": cells[0], "weight": _parse_csv_weight(cells[1])})
    return records


def detect_format(filename: str | None, text: str) -> str:
    if filename:
        suffix = Path(filename).suffix.lower().lstrip(".")
        if suffix in FORMATS:
            return suffix
    head = text.lstrip("\ufeff \t\r\n")[:1]
    return "json" if head in ("[", "{") else "csv"


def parse_import(text: str, fmt: str) -> list[Any]:
    if fmt == "json":
        return parse_json_import(text)
    if fmt == "csv":
        return parse_csv_import(text)
    raise ImportFormatError(f"Unsupported import format: {fmt}")


def import_backup(
    store: EntryStore,
    text: str,
    fmt: str | None = None,
    filename: str | None = None,
) -> ImportReport:
    """Parse a backup document and merge it into *store*.

    Raises ImportFormatError before any write if the document is not a
    record sequence; individual bad records are skipped and counted.
    """
    if fmt is None:
        fmt = detect_format(filename, text)
    records = parse_import(text, fmt)
    accepted = count_valid(records)
    merged = store.bulk_merge(records)
    report = ImportReport(received=len(records), accepted=accepted, total=len(merged))
    logger.info(
        f"Imported {report.accepted}/{report.received} records "
        f"({report.skipped} skipped), {report.total} entries total"
    )
    return report
