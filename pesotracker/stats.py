"""Read-only statistics over weight entries: period filters, change, trend."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from pesotracker.models import FilterPeriod, TrendSummary, WeightEntry
from pesotracker.validation import round_weight


def period_start(period: FilterPeriod, today: date) -> date | None:
    """First day included by *period*, or None for ``all``."""
    if period is FilterPeriod.MONTH:
        return today - timedelta(days=30)
    if period is FilterPeriod.THREE_MONTHS:
        return today - timedelta(days=90)
    if period is FilterPeriod.YEAR:
        try:
            return today.replace(year=today.year - 1)
        except ValueError:
            # Feb 29
            return today.replace(year=today.year - 1, day=28)
    return None


def filter_by_period(
    entries: Sequence[WeightEntry], period: FilterPeriod | str, today: date | str
) -> list[WeightEntry]:
    period = FilterPeriod(period)
    if isinstance(today, str):
        today = date.fromisoformat(today)
    start = period_start(period, today)
    if start is None:
        return list(entries)
    start_str = start.isoformat()
    return [e for e in entries if e.date >= start_str]


def weight_change(entries: Sequence[WeightEntry]) -> float | None:
    """Last weight minus first weight; None with fewer than two entries."""
    if len(entries) < 2:
        return None
    return round_weight(entries[-1].weight - entries[0].weight)


def linear_trend(entries: Sequence[WeightEntry]) -> tuple[float, float, date] | None:
    """Least-squares fit of weight against days since the first entry.

    Returns (slope_per_day, intercept, origin) or None when fewer than two
    distinct parseable dates are available.
    """
    points = []
    for e in entries:
        try:
            points.append((date.fromisoformat(e.date), e.weight))
        except ValueError:
            continue
    if len(points) < 2:
        return None

    origin = min(d for d, _ in points)
    xs = [(d - origin).days for d, _ in points]
    ys = [w for _, w in points]
    mean_x = sum(xs) / len(xs)
    mean_y = sum(ys) / len(ys)
    denom = sum((x - mean_x) ** 2 for x in xs)
    if denom == 0:
        return None
    slope = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys)) / denom
    intercept = mean_y - slope * mean_x
    return slope, intercept, origin


def forecast(entries: Sequence[WeightEntry], target: date | str) -> float | None:
    """Projected weight on *target* from the linear trend."""
    trend = linear_trend(entries)
    if trend is None:
        return None
    if isinstance(target, str):
        target = date.fromisoformat(target)
    slope, intercept, origin = trend
    return round_weight(intercept + slope * (target - origin).days)


def summarize(entries: Sequence[WeightEntry], forecast_days: int = 30) -> TrendSummary:
    summary = TrendSummary(count=len(entries))
    if not entries:
        return summary

    weights = [e.weight for e in entries]
    summary.first = entries[0]
    summary.last = entries[-1]
    summary.change = weight_change(entries)
    summary.min_weight = min(weights)
    summary.max_weight = max(weights)

    trend = linear_trend(entries)
    if trend is not None:
        slope, _intercept, _origin = trend
        summary.slope_per_day = round(slope, 4)
        try:
            target = date.fromisoformat(entries[-1].date) + timedelta(days=forecast_days)
        except ValueError:
            return summary
        summary.forecast_date = target.isoformat()
        summary.forecast = forecast(entries, target)
    return summary
