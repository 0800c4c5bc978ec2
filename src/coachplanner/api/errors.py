"""Map engine refusals to HTTP responses."""

from fastapi import HTTPException

from coachplanner.scheduling.errors import (
    ConflictOnCommitError,
    DuplicateError,
    HardConflictError,
    NotFoundError,
    SchedulingError,
    StateError,
    ValidationError,
)


def http_error(exc: SchedulingError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, HardConflictError):
        return HTTPException(
            status_code=409,
            detail={
                "message": str(exc),
                "conflicts": [
                    {"date": e.date.isoformat(), "reason": e.reason, "severity": e.severity}
                    for e in exc.report.entries
                ],
            },
        )
    if isinstance(exc, StateError | DuplicateError | ConflictOnCommitError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
