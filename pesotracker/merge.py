"""Reconciliation of two entry collections into one valid collection.

The same rule serves single-entry upserts and bulk imports: incoming records
overwrite current ones on the same date, and within an incoming batch the
later record for a date wins.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from pesotracker.models import WeightEntry
from pesotracker.validation import is_date_key, is_finite_number, round_weight

logger = logging.getLogger(__name__)


def sort_entries(entries: Iterable[WeightEntry]) -> list[WeightEntry]:
    """Sort entries ascending by date (stable)."""
    return sorted(entries, key=lambda e: e.date)


def _fields(record: Any) -> tuple[Any, Any]:
    if isinstance(record, WeightEntry):
        return record.date, record.weight
    if isinstance(record, Mapping):
        return record.get("date"), record.get("weight")
    return None, None


def is_valid_record(record: Any) -> bool:
    """Incoming record check: non-empty string date and finite numeric weight."""
    entry_date, weight = _fields(record)
    return is_date_key(entry_date) and is_finite_number(weight)


def merge_entries(
    current: Iterable[WeightEntry], incoming: Iterable[Any]
) -> list[WeightEntry]:
    """Merge *incoming* into *current*; incoming wins on conflicting dates.

    Invalid incoming records are skipped. Every weight is rounded to two
    decimals and the result is sorted ascending by date.
    """
    by_date: dict[str, float] = {e.date: e.weight for e in current}

    for record in incoming:
        if not is_valid_record(record):
            logger.debug(f"Skipping invalid record: {record!r}")
            continue
        entry_date, weight = _fields(record)
        by_date[entry_date] = weight

    merged = [WeightEntry(date=d, weight=round_weight(w)) for d, w in by_date.items()]
    return sort_entries(merged)


def count_valid(incoming: Iterable[Any]) -> int:
    return sum(1 for r in incoming if is_valid_record(r))
