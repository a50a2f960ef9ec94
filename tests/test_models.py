"""Tests for pesotracker/models.py: dataclass serialization."""

import math

from pesotracker.models import (
    FilterPeriod,
    ImportReport,
    ReadOutcome,
    ReadResult,
    WeightEntry,
)


def test_weight_entry_round_trip():
    e = WeightEntry.from_dict({"date": "2024-01-05", "weight": 82.3, "extra": "ignored"})
    assert e == WeightEntry("2024-01-05", 82.3)
    assert e.to_dict() == {"date": "2024-01-05", "weight": 82.3}


def test_weight_entry_from_dict_defaults():
    e = WeightEntry.from_dict({})
    assert e.date == ""
    assert math.isnan(e.weight)


def test_read_result():
    r = ReadResult(entries=[WeightEntry("2024-01-05", 82.3)], dropped=1)
    assert r.ok
    assert r.to_dict() == {
        "entries": [{"date": "2024-01-05", "weight": 82.3}],
        "outcome": "ok",
        "dropped": 1,
    }
    assert not ReadResult(outcome=ReadOutcome.MISSING).ok


def test_import_report_skipped():
    assert ImportReport(received=5, accepted=3, total=10).skipped == 2


def test_filter_period_cycle():
    assert FilterPeriod.MONTH.next() is FilterPeriod.THREE_MONTHS
    assert FilterPeriod.ALL.next() is FilterPeriod.MONTH
    assert FilterPeriod("year") is FilterPeriod.YEAR
