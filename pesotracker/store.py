"""Entry store: sole owner of the persisted weight collection.

Every mutation reads the whole collection, transforms it in memory and
writes it back in a single ``write_raw`` call, so an interrupted operation
leaves the previous value in place.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Sequence

from pesotracker.errors import ImportFormatError, PersistenceError
from pesotracker.merge import is_valid_record, merge_entries, sort_entries
from pesotracker.models import ReadOutcome, ReadResult, WeightEntry
from pesotracker.storage import STORAGE_KEY, FileStorage, KeyValueStorage
from pesotracker.validation import coerce_weight
from pesotracker.workspace import storage_dir

logger = logging.getLogger(__name__)


def serialize_entries(entries: Sequence[WeightEntry]) -> str:
    return json.dumps(
        [e.to_dict() for e in entries], ensure_ascii=False, separators=(",", ":"), allow_nan=False
    )


def coerce_records(records: list[Any]) -> ReadResult:
    """Turn raw persisted records into sorted entries, dropping unusable ones."""
    entries = []
    dropped = 0
    for record in records:
        if not isinstance(record, dict) or not isinstance(record.get("date"), str):
            dropped += 1
            continue
        weight = coerce_weight(record.get("weight"))
        if not math.isfinite(weight):
            dropped += 1
            continue
        entries.append(WeightEntry(date=record["date"], weight=weight))
    if dropped:
        logger.debug(f"Dropped {dropped} unusable persisted record(s)")
    return ReadResult(entries=sort_entries(entries), dropped=dropped)


class EntryStore:
    """Read, upsert, delete and bulk-merge weight entries over one storage slot."""

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    # ── Reads ─────────────────────────────────────────────────

    def _parse_raw(self, raw: str | None) -> tuple[list[Any] | None, ReadOutcome]:
        if raw is None or not raw.strip():
            return None, ReadOutcome.MISSING
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Persisted entries in {self.key!r} are not valid JSON: {e}")
            return None, ReadOutcome.CORRUPT
        if not isinstance(data, list):
            logger.warning(f"Persisted entries in {self.key!r} are not an array")
            return None, ReadOutcome.CORRUPT
        return data, ReadOutcome.OK

    def _load_current(self) -> list[WeightEntry]:
        """Read for a mutation: storage failures propagate, bad content counts as empty."""
        records, _outcome = self._parse_raw(self.storage.read_raw(self.key))
        if records is None:
            return []
        return coerce_records(records).entries

    def load(self) -> ReadResult:
        """Tolerant read: never raises, reports what happened instead."""
        try:
            raw = self.storage.read_raw(self.key)
        except PersistenceError as e:
            logger.error(f"Error reading weight entries: {e}")
            return ReadResult(outcome=ReadOutcome.CORRUPT)
        records, outcome = self._parse_raw(raw)
        if records is None:
            return ReadResult(outcome=outcome)
        return coerce_records(records)

    def read_all(self) -> list[WeightEntry]:
        """All entries sorted ascending by date; empty on missing or corrupt data."""
        return self.load().entries

    def get(self, entry_date: str) -> WeightEntry | None:
        for entry in self.read_all():
            if entry.date == entry_date:
                return entry
        return None

    # ── Writes ────────────────────────────────────────────────

    def _write(self, entries: Sequence[WeightEntry]) -> None:
        self.storage.write_raw(self.key, serialize_entries(entries))

    def upsert(self, entry: WeightEntry) -> WeightEntry | None:
        """Insert or replace the entry for ``entry.date``.

        Returns the stored (rounded) entry, or None if the entry was rejected
        by the merge rule. Raises PersistenceError if the write fails.
        """
        if not is_valid_record(entry):
            logger.warning(f"Rejected invalid entry: {entry!r}")
            return None
        merged = merge_entries(self._load_current(), [entry])
        self._write(merged)
        stored = next(e for e in merged if e.date == entry.date)
        logger.info(f"Saved weight {stored.weight} for {stored.date}")
        return stored

    def remove(self, entry_date: str) -> None:
        """Delete the entry for a date. Missing dates are a no-op.

        Works on the raw persisted records so that records the coerced view
        would hide are kept untouched.
        """
        records, outcome = self._parse_raw(self.storage.read_raw(self.key))
        if records is None:
            if outcome is ReadOutcome.CORRUPT:
                logger.error(f"Cannot delete {entry_date}: persisted entries are unreadable")
            return
        remaining = [
            r for r in records
            if not (isinstance(r, dict) and r.get("date") == entry_date)
        ]
        self.storage.write_raw(
            self.key, json.dumps(remaining, ensure_ascii=False, separators=(",", ":"))
        )
        if len(remaining) != len(records):
            logger.info(f"Deleted entry for {entry_date}")

    def bulk_merge(self, incoming: Sequence[Any]) -> list[WeightEntry]:
        """Merge an imported batch into the collection; incoming wins on conflicts.

        Raises ImportFormatError (before touching storage) when *incoming* is
        not a list of records. Invalid individual records are skipped.
        """
        if not isinstance(incoming, (list, tuple)):
            raise ImportFormatError(
                f"Expected a list of entries, got {type(incoming).__name__}"
            )
        merged = merge_entries(self._load_current(), incoming)
        self._write(merged)
        logger.info(f"Merged {len(incoming)} incoming record(s); {len(merged)} entries stored")
        return merged

    def clear(self) -> None:
        self._write([])
        logger.info("Cleared all weight entries")


def open_store(root: Path | None = None) -> EntryStore:
    """Entry store backed by files in the workspace's storage directory."""
    return EntryStore(FileStorage(storage_dir(root)))
