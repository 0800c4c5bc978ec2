"""Time-window arithmetic shared by the detector and the expander."""

from dataclasses import dataclass
from datetime import date, time

from coachplanner.scheduling.errors import ValidationError


@dataclass(frozen=True)
class TimeWindow:
    """A wall-clock interval [start, end) on a single day."""

    day: date
    start: time
    end: time


def validate_window(start: time, end: time) -> None:
    """Reject windows that are empty, inverted, or finer than a minute."""
    for value in (start, end):
        if value.second or value.microsecond:
            raise ValidationError(f"Times must have minute precision, got {value.isoformat()}")
        if value.tzinfo is not None:
            raise ValidationError("Times must be wall-clock (no timezone)")
    if start >= end:
        raise ValidationError(
            f"start_time {start:%H:%M} must be before end_time {end:%H:%M}"
        )


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def duration_minutes(start: time, end: time) -> int:
    return to_minutes(end) - to_minutes(start)


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    """Half-open overlap: touching windows (10:00-11:00, 11:00-12:00) do not clash."""
    return a.day == b.day and a.start < b.end and b.start < a.end


def contains(outer: TimeWindow, inner: TimeWindow) -> bool:
    return outer.day == inner.day and outer.start <= inner.start and inner.end <= outer.end
