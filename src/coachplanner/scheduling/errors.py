"""Error taxonomy of the scheduling engine.

Conflicts found by the detector are not errors; they come back as a
`ConflictReport`. The classes here are raised only for requests the engine
refuses.
"""

from typing import Any


class SchedulingError(Exception):
    """Base class for every refusal raised by the engine."""


class ValidationError(SchedulingError):
    """Malformed input: bad time window, empty weekday set, oversized batch."""


class InvalidRangeError(ValidationError):
    """Date range with start after end, or no weekdays selected."""


class NotFoundError(SchedulingError):
    """Unknown (or inaccessible) session, slot or classroom id."""


class StateError(SchedulingError):
    """Illegal lifecycle transition."""

    def __init__(self, current: str, attempted: str, message: str | None = None) -> None:
        self.current = current
        self.attempted = attempted
        super().__init__(message or f"Cannot move session from {current} to {attempted}")


class DuplicateError(SchedulingError):
    """Candidate already signed attendance for this session."""


class ConflictOnCommitError(SchedulingError):
    """The write transaction was aborted; re-check and retry."""


class HardConflictError(SchedulingError):
    """Create refused because blocking policy is on and HARD conflicts exist."""

    def __init__(self, report: Any) -> None:
        self.report = report
        super().__init__(f"{len(report.hard)} hard conflict(s) found")
