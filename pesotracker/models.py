"""Typed dataclasses for the Peso Tracker data model.

All models use from_dict/to_dict for JSON serialization.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ── Entries ───────────────────────────────────────────────────


@dataclass
class WeightEntry:
    """One calendar-date/weight pair. ``date`` is the collection key."""

    date: str
    weight: float

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WeightEntry:
        return cls(date=d.get("date", ""), weight=d.get("weight", float("nan")))

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "weight": self.weight}


# ── Reads ─────────────────────────────────────────────────────


class ReadOutcome(str, Enum):
    OK = "ok"
    MISSING = "missing"  # slot never written
    CORRUPT = "corrupt"  # unparsable, wrong shape, or unreadable


@dataclass
class ReadResult:
    """Outcome of a tolerant read of the persisted collection."""

    entries: list[WeightEntry] = field(default_factory=list)
    outcome: ReadOutcome = ReadOutcome.OK
    dropped: int = 0

    @property
    def ok(self) -> bool:
        return self.outcome is ReadOutcome.OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [e.to_dict() for e in self.entries],
            "outcome": self.outcome.value,
            "dropped": self.dropped,
        }


# ── Import ────────────────────────────────────────────────────


@dataclass
class ImportReport:
    received: int = 0
    accepted: int = 0
    total: int = 0

    @property
    def skipped(self) -> int:
        return self.received - self.accepted

    def to_dict(self) -> dict[str, Any]:
        return {
            "received": self.received,
            "accepted": self.accepted,
            "skipped": self.skipped,
            "total": self.total,
        }


# ── Statistics ────────────────────────────────────────────────


class FilterPeriod(str, Enum):
    MONTH = "month"
    THREE_MONTHS = "three_months"
    YEAR = "year"
    ALL = "all"

    def next(self) -> FilterPeriod:
        members = list(FilterPeriod)
        return members[(members.index(self) + 1) % len(members)]


@dataclass
class TrendSummary:
    count: int = 0
    first: WeightEntry | None = None
    last: WeightEntry | None = None
    change: float | None = None
    min_weight: float | None = None
    max_weight: float | None = None
    slope_per_day: float | None = None
    forecast_date: str | None = None
    forecast: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "first": self.first.to_dict() if self.first else None,
            "last": self.last.to_dict() if self.last else None,
            "change": self.change,
            "min_weight": self.min_weight,
            "max_weight": self.max_weight,
            "slope_per_day": self.slope_per_day,
            "forecast_date": self.forecast_date,
            "forecast": self.forecast,
        }
