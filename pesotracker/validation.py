"""Validation and normalization helpers shared by the store and its callers.

The store only needs a date key and a finite weight. Stricter checks
(real calendar dates, positive weights, no future dates) belong to the
input boundary and live in :func:`validate_entry_input`.
"""

from __future__ import annotations

import math
import re
from datetime import date
from typing import Any

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_date_key(value: Any) -> bool:
    """A usable collection key: any non-empty string."""
    return isinstance(value, str) and value != ""


def is_iso_date(value: Any) -> bool:
    """True for a ``YYYY-MM-DD`` string naming a real calendar day."""
    if not isinstance(value, str) or not ISO_DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def coerce_weight(value: Any) -> float:
    """Coerce a persisted weight to float; unusable values become NaN."""
    if isinstance(value, bool):
        return float("nan")
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return float("nan")
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return float("nan")
    return float("nan")


def round_weight(value: float) -> float:
    return round(float(value), 2)


def parse_weight_input(text: str | float | int) -> float:
    """Parse a user-typed weight such as ``"82,5"`` or ``"82.5"``.

    Raises ValueError if the text is not a finite number.
    """
    if isinstance(text, bool):
        raise ValueError(f"Invalid weight: {text!r}")
    try:
        if isinstance(text, (int, float)):
            value = float(text)
        else:
            value = float(str(text).strip().replace(",", "."))
    except OverflowError:
        raise ValueError(f"Invalid weight: {text!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"Invalid weight: {text!r}")
    return value


def validate_entry_input(
    entry_date: Any, weight: Any, today: str | None = None
) -> list[str]:
    """Validate a user-submitted entry and return list of errors (empty if valid)."""
    errors = []
    if not entry_date:
        errors.append("Missing required field: date")
    elif not is_iso_date(entry_date):
        errors.append(f"Invalid date: {entry_date}")
    elif today and entry_date > today:
        errors.append(f"Date is in the future: {entry_date}")

    if weight is None or weight == "":
        errors.append("Missing required field: weight")
    elif not is_finite_number(weight):
        errors.append("weight must be a finite number")
    elif weight <= 0:
        errors.append("weight must be positive")
    return errors
