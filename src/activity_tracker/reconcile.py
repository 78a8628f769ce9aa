"""Reconciliación de días: ventana continua, descendente y sin huecos."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta

import pandas as pd

from activity_tracker.model import Day

WINDOW_DAYS = 14


def reconcile(
    days: Mapping[date, Day] | Iterable[Day],
    reference: date | datetime,
) -> list[Day]:
    """Build the dense, descending window of days ending at ``reference``.

    The window covers ``reference`` and the 13 previous days. If older days
    exist it extends back to the oldest of them. Missing dates get an empty
    day.

    Args:
        days: Existing days, unordered. Entries of repeated dates are merged.
        reference: Last day of the window; time of day is discarded.

    Returns:
        Days ordered from ``reference`` backwards, one per calendar date.

    Raises:
        ValueError: If any existing day is later than ``reference``.
    """
    upto = _truncate(reference)
    by_date = _group(days.values() if isinstance(days, Mapping) else days)

    if by_date and max(by_date) > upto:
        raise ValueError(
            f"day {max(by_date).isoformat()} is after reference {upto.isoformat()}"
        )

    earliest = upto - timedelta(days=WINDOW_DAYS - 1)
    if by_date:
        earliest = min(earliest, min(by_date))

    calendar = build_calendar(earliest, upto)
    return [by_date.get(d) or Day(day=d) for d in reversed(calendar)]


def build_calendar(min_day: date, max_day: date) -> list[date]:
    """Inclusive ascending list of calendar days."""
    return list(pd.date_range(start=min_day, end=max_day, freq="D").date)


def _truncate(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _group(days: Iterable[Day]) -> dict[date, Day]:
    grouped: dict[date, Day] = {}
    for d in days:
        key = _truncate(d.day)
        prev = grouped.get(key)
        entries = d.entries if prev is None else prev.entries + d.entries
        grouped[key] = Day(day=key, entries=entries)
    return grouped
