"""Session API routes — plan, check, run and take attendance for course sessions."""

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coachplanner.api.deps import get_actor, get_notifier
from coachplanner.api.errors import http_error
from coachplanner.database import get_db
from coachplanner.models.session import Attendance, CourseSession
from coachplanner.scheduling.errors import SchedulingError
from coachplanner.scheduling.lifecycle import Actor, SessionLifecycle
from coachplanner.scheduling.notifications import (
    SESSION_CANCELLED,
    SESSION_OPENED,
    SessionNotifier,
    session_event,
)
from coachplanner.schemas.session import (
    AttendanceCreate,
    AttendanceRead,
    ConflictCheckRequest,
    ConflictEntryRead,
    ConflictReportRead,
    SessionCreate,
    SessionRangeCreate,
    SessionRead,
)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=list[SessionRead])
async def list_sessions(
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=1970, le=9999),
    coach_id: int | None = None,
    status: str | None = Query(default=None, pattern=r"^(SCHEDULED|OPEN|COMPLETED|CANCELLED)$"),
    session: AsyncSession = Depends(get_db),
) -> list[CourseSession]:
    """Sessions scheduled in a month, with coach, classroom and attendance summaries."""
    return await SessionLifecycle(session).list_month(year, month, coach_id=coach_id, status=status)


@router.post("", response_model=list[SessionRead], status_code=201)
async def create_sessions(
    body: SessionCreate,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> list[CourseSession]:
    """Create a session, repeated weekly when `weeks` > 1.

    Conflicts are advisory: run `/check-conflicts` first to show them.
    """
    try:
        result = await SessionLifecycle(session).create_weekly(
            coach_id=body.coach_id,
            title=body.title,
            scheduled_date=body.scheduled_date,
            start_time=body.start_time,
            end_time=body.end_time,
            weeks=body.weeks,
            type=body.type,
            description=body.description,
            classroom_id=body.classroom_id,
            actor=actor,
        )
    except SchedulingError as e:
        raise http_error(e) from None
    return result.sessions


@router.post("/range", response_model=list[SessionRead], status_code=201)
async def create_session_range(
    body: SessionRangeCreate,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> list[CourseSession]:
    """Create one session on each selected weekday between two dates."""
    try:
        result = await SessionLifecycle(session).create_range(
            coach_id=body.coach_id,
            title=body.title,
            start_date=body.start_date,
            end_date=body.end_date,
            days_of_week=body.days_of_week,
            start_time=body.start_time,
            end_time=body.end_time,
            type=body.type,
            description=body.description,
            classroom_id=body.classroom_id,
            actor=actor,
        )
    except SchedulingError as e:
        raise http_error(e) from None
    return result.sessions


@router.post("/check-conflicts", response_model=ConflictReportRead)
async def check_conflicts(
    body: ConflictCheckRequest,
    session: AsyncSession = Depends(get_db),
) -> ConflictReportRead:
    """Report what a range creation would clash with, without saving anything."""
    try:
        report = await SessionLifecycle(session).check_range(
            coach_id=body.coach_id,
            start_date=body.start_date,
            end_date=body.end_date,
            days_of_week=body.days_of_week,
            start_time=body.start_time,
            end_time=body.end_time,
            classroom_id=body.classroom_id,
        )
    except SchedulingError as e:
        raise http_error(e) from None
    return ConflictReportRead(
        total=report.total,
        conflicts=[ConflictEntryRead.model_validate(e) for e in report.entries],
    )


@router.get("/open", response_model=list[SessionRead])
async def list_open_sessions(
    classroom_id: int | None = None,
    session: AsyncSession = Depends(get_db),
) -> list[CourseSession]:
    """Sessions currently accepting attendance."""
    return await SessionLifecycle(session).list_open(classroom_id)


@router.get("/{session_id}", response_model=SessionRead)
async def get_session(
    session_id: int,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> CourseSession:
    try:
        return await SessionLifecycle(session).get(session_id, actor)
    except SchedulingError as e:
        raise http_error(e) from None


@router.post("/{session_id}/open", response_model=SessionRead)
async def open_session(
    session_id: int,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    notifier: SessionNotifier = Depends(get_notifier),
    session: AsyncSession = Depends(get_db),
) -> CourseSession:
    """Open a scheduled session for attendance."""
    try:
        row = await SessionLifecycle(session).open(session_id, actor)
    except SchedulingError as e:
        raise http_error(e) from None
    background_tasks.add_task(notifier.notify, session_event(SESSION_OPENED, row))
    return row


@router.post("/{session_id}/close", response_model=SessionRead)
async def close_session(
    session_id: int,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> CourseSession:
    """Close an open session; it becomes COMPLETED."""
    try:
        return await SessionLifecycle(session).close(session_id, actor)
    except SchedulingError as e:
        raise http_error(e) from None


@router.post("/{session_id}/cancel", response_model=SessionRead)
async def cancel_session(
    session_id: int,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    notifier: SessionNotifier = Depends(get_notifier),
    session: AsyncSession = Depends(get_db),
) -> CourseSession:
    """Cancel a scheduled or open session. The row is kept for audit."""
    try:
        row = await SessionLifecycle(session).cancel(session_id, actor)
    except SchedulingError as e:
        raise http_error(e) from None
    background_tasks.add_task(notifier.notify, session_event(SESSION_CANCELLED, row))
    return row


@router.post("/{session_id}/attendance", response_model=AttendanceRead, status_code=201)
async def sign_attendance(
    session_id: int,
    body: AttendanceCreate,
    session: AsyncSession = Depends(get_db),
) -> Attendance:
    """Record that a candidate is present. Only allowed while the session is OPEN."""
    try:
        return await SessionLifecycle(session).sign_attendance(session_id, body.candidate_id)
    except SchedulingError as e:
        raise http_error(e) from None


@router.get("/{session_id}/attendance", response_model=list[AttendanceRead])
async def list_attendance(
    session_id: int,
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_db),
) -> list[Attendance]:
    try:
        return await SessionLifecycle(session).attendees(session_id, actor)
    except SchedulingError as e:
        raise http_error(e) from None
