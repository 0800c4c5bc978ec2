"""Expand weekly patterns into concrete dated windows.

Weekdays are numbered 0=Sunday .. 6=Saturday throughout the engine.
"""

import calendar
from collections.abc import Iterable
from datetime import date, time, timedelta

from coachplanner.scheduling.errors import InvalidRangeError, ValidationError
from coachplanner.scheduling.overlap import TimeWindow, validate_window


def day_index(d: date) -> int:
    """Weekday of `d` with Sunday as 0."""
    return (d.weekday() + 1) % 7


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be 1..12, got {month}")
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def expand(
    start_date: date,
    end_date: date,
    days_of_week: Iterable[int],
    start_time: time,
    end_time: time,
    limit: int | None = None,
) -> list[TimeWindow]:
    """Return one window per day in [start_date, end_date] whose weekday is selected.

    The result is ascending and never leaves the inclusive range. With `limit`
    set, the walk stops with a ValidationError as soon as it would exceed it.
    """
    days = set(days_of_week)
    if start_date > end_date:
        raise InvalidRangeError(f"start_date {start_date} is after end_date {end_date}")
    if not days:
        raise InvalidRangeError("days_of_week must not be empty")
    bad = sorted(d for d in days if not 0 <= d <= 6)
    if bad:
        raise InvalidRangeError(f"days_of_week values must be 0..6, got {bad}")
    validate_window(start_time, end_time)

    windows = []
    current = start_date
    while current <= end_date:
        if day_index(current) in days:
            if limit is not None and len(windows) >= limit:
                raise ValidationError(
                    f"Range from {start_date} to {end_date} exceeds the limit of {limit} sessions"
                )
            windows.append(TimeWindow(current, start_time, end_time))
        current += timedelta(days=1)
    return windows


def weekly(first_date: date, weeks: int, start_time: time, end_time: time) -> list[TimeWindow]:
    """`weeks` windows on the same weekday, seven days apart, starting at `first_date`."""
    if weeks < 1:
        raise ValidationError(f"weeks must be at least 1, got {weeks}")
    last = first_date + timedelta(weeks=weeks - 1)
    return expand(first_date, last, {day_index(first_date)}, start_time, end_time)
