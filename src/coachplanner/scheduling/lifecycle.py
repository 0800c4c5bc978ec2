"""Session creation, state machine and attendance capture.

SCHEDULED -> OPEN -> COMPLETED, with CANCELLED reachable from SCHEDULED or
OPEN. COMPLETED and CANCELLED are terminal; sessions are never deleted.
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coachplanner.config import Settings, get_settings
from coachplanner.database import utcnow
from coachplanner.models.session import (
    CANCELLED,
    COMPLETED,
    COURSE,
    OPEN,
    SCHEDULED,
    SESSION_TYPES,
    Attendance,
    CourseSession,
)
from coachplanner.scheduling.conflicts import ConflictDetector, ConflictReport
from coachplanner.scheduling.errors import (
    ConflictOnCommitError,
    DuplicateError,
    HardConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)
from coachplanner.scheduling.overlap import TimeWindow, duration_minutes, validate_window
from coachplanner.scheduling.recurrence import expand, month_bounds, weekly
from coachplanner.scheduling.store import ResourceStore

logger = logging.getLogger(__name__)

# target status -> statuses it may be entered from
TRANSITIONS: dict[str, tuple[str, ...]] = {
    OPEN: (SCHEDULED,),
    COMPLETED: (OPEN,),
    CANCELLED: (SCHEDULED, OPEN),
}


@dataclass(frozen=True)
class Actor:
    """Who is calling. Authorization itself is decided upstream."""

    id: int
    role: str = "COACH"
    is_admin: bool = False


@dataclass
class SessionBatch:
    """Sessions to create for one coach, one per window."""

    coach_id: int
    title: str
    instances: Sequence[TimeWindow]
    type: str = COURSE
    description: str | None = None
    classroom_id: int | None = None


@dataclass
class BatchResult:
    sessions: list[CourseSession]
    report: ConflictReport


@dataclass
class PersonSummary:
    id: int
    name: str | None = None
    email: str | None = None


@dataclass
class ClassroomSummary:
    id: int
    name: str | None = None
    level: str | None = None


class SessionLifecycle:
    """Mutations and reads of course sessions for one database session."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.store = ResourceStore(db)
        self.detector = ConflictDetector(self.store)
        self.settings = settings or get_settings()
        self._clock = clock

    async def create(self, batch: SessionBatch, actor: Actor | None = None) -> BatchResult:
        """Persist one session per window in a single transaction.

        Conflicts are advisory unless `block_hard_conflicts` is set. HARD
        conflicts that appear between the check and the commit abort the
        whole batch with `ConflictOnCommitError`.
        """
        self._validate_batch(batch)
        if batch.classroom_id is not None and not await self.store.classroom_exists(
            batch.classroom_id
        ):
            raise NotFoundError(f"Classroom {batch.classroom_id} not found")

        report = await self.detector.check(batch.instances, batch.coach_id, batch.classroom_id)
        if report.hard and self.settings.block_hard_conflicts:
            raise HardConflictError(report)
        if not report.is_clean:
            logger.warning(
                "Creating %d session(s) for coach %s despite %d conflict(s): %s",
                len(batch.instances),
                batch.coach_id,
                len(report.entries),
                "; ".join(f"{e.date} {e.reason}" for e in report.entries),
            )

        group_id = uuid.uuid4().hex if len(batch.instances) > 1 else None
        rows = [
            CourseSession(
                coach_id=batch.coach_id,
                classroom_id=batch.classroom_id,
                title=batch.title,
                description=batch.description,
                scheduled_date=window.day,
                start_time=window.start,
                end_time=window.end,
                duration_minutes=duration_minutes(window.start, window.end),
                type=batch.type,
                status=SCHEDULED,
                recurrence_group_id=group_id,
            )
            for window in batch.instances
        ]

        try:
            await self.store.add_sessions(rows)
            # Anything still clashing once the new rows and the sessions the
            # caller was already told about are set aside appeared meanwhile
            recheck = await self.detector.check(
                batch.instances,
                batch.coach_id,
                batch.classroom_id,
                exclude_ids=[r.id for r in rows] + sorted(report.clashing_ids),
                include_availability=False,
            )
            fresh = recheck.hard
            if fresh:
                await self.db.rollback()
                logger.warning(
                    "Aborted batch for coach %s: %d new hard conflict(s) at commit",
                    batch.coach_id,
                    len(fresh),
                )
                raise ConflictOnCommitError(
                    f"Schedule changed while creating sessions ({fresh[0].date}: "
                    f"{fresh[0].reason}); re-check conflicts and retry"
                )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning("Session batch for coach %s rolled back: %s", batch.coach_id, e)
            raise ConflictOnCommitError("Could not save sessions; re-check and retry") from e

        logger.info(
            "Created %d session(s) for coach %s (group=%s, by=%s)",
            len(rows),
            batch.coach_id,
            group_id,
            actor.id if actor else None,
        )
        return BatchResult(sessions=rows, report=report)

    async def create_weekly(
        self,
        *,
        coach_id: int,
        title: str,
        scheduled_date: date,
        start_time: time,
        end_time: time,
        weeks: int = 1,
        type: str = COURSE,
        description: str | None = None,
        classroom_id: int | None = None,
        actor: Actor | None = None,
    ) -> BatchResult:
        """One session, repeated on the same weekday for `weeks` consecutive weeks."""
        if weeks > self.settings.max_repeat_weeks:
            raise ValidationError(
                f"weeks must be at most {self.settings.max_repeat_weeks}, got {weeks}"
            )
        batch = SessionBatch(
            coach_id=coach_id,
            title=title,
            instances=weekly(scheduled_date, weeks, start_time, end_time),
            type=type,
            description=description,
            classroom_id=classroom_id,
        )
        return await self.create(batch, actor)

    async def create_range(
        self,
        *,
        coach_id: int,
        title: str,
        start_date: date,
        end_date: date,
        days_of_week: Sequence[int],
        start_time: time,
        end_time: time,
        type: str = COURSE,
        description: str | None = None,
        classroom_id: int | None = None,
        actor: Actor | None = None,
    ) -> BatchResult:
        """One session on every selected weekday between two dates."""
        batch = SessionBatch(
            coach_id=coach_id,
            title=title,
            instances=expand(
                start_date,
                end_date,
                days_of_week,
                start_time,
                end_time,
                limit=self.settings.max_batch_instances,
            ),
            type=type,
            description=description,
            classroom_id=classroom_id,
        )
        return await self.create(batch, actor)

    def _validate_batch(self, batch: SessionBatch) -> None:
        if not batch.title or not batch.title.strip():
            raise ValidationError("title must not be empty")
        if batch.type not in SESSION_TYPES:
            raise ValidationError(f"type must be one of {', '.join(SESSION_TYPES)}")
        if not batch.instances:
            raise ValidationError("No session dates fall within the requested range")
        self._check_size(batch.instances)
        for window in batch.instances:
            validate_window(window.start, window.end)

    def _check_size(self, instances: Sequence[TimeWindow]) -> None:
        if len(instances) > self.settings.max_batch_instances:
            raise ValidationError(
                f"Batch of {len(instances)} sessions exceeds the limit of "
                f"{self.settings.max_batch_instances}"
            )

    async def check(
        self, instances: Sequence[TimeWindow], coach_id: int, classroom_id: int | None = None
    ) -> ConflictReport:
        self._check_size(instances)
        return await self.detector.check(instances, coach_id, classroom_id)

    async def check_range(
        self,
        *,
        coach_id: int,
        start_date: date,
        end_date: date,
        days_of_week: Sequence[int],
        start_time: time,
        end_time: time,
        classroom_id: int | None = None,
    ) -> ConflictReport:
        """What `create_range` would clash with, without saving anything."""
        instances = expand(
            start_date,
            end_date,
            days_of_week,
            start_time,
            end_time,
            limit=self.settings.max_batch_instances,
        )
        return await self.detector.check(instances, coach_id, classroom_id)

    # Reads

    async def get(self, session_id: int, actor: Actor | None = None) -> CourseSession:
        row = await self._load(session_id, actor)
        await self.attach_details([row])
        return row

    async def list_month(
        self,
        year: int,
        month: int,
        coach_id: int | None = None,
        status: str | None = None,
    ) -> list[CourseSession]:
        start, end = month_bounds(year, month)
        rows = await self.store.sessions_between(start, end, coach_id=coach_id, status=status)
        await self.attach_details(rows)
        return rows

    async def list_open(self, classroom_id: int | None = None) -> list[CourseSession]:
        rows = await self.store.open_sessions(classroom_id)
        await self.attach_details(rows)
        return rows

    async def attendees(self, session_id: int, actor: Actor | None = None) -> list[Attendance]:
        await self._load(session_id, actor)
        grouped = await self.store.attendances_for([session_id])
        rows = grouped.get(session_id, [])
        users = await self.store.users_by_id(a.candidate_id for a in rows)
        for a in rows:
            a.candidate = _person(a.candidate_id, users)  # type: ignore[attr-defined]
        return rows

    async def attach_details(self, rows: Sequence[CourseSession]) -> None:
        """Attach coach, classroom and attendance summaries for serialization."""
        if not rows:
            return
        attendance = await self.store.attendances_for(r.id for r in rows)
        classrooms = await self.store.classrooms_by_id(r.classroom_id for r in rows)
        people = {r.coach_id for r in rows} | {
            a.candidate_id for group in attendance.values() for a in group
        }
        users = await self.store.users_by_id(people)

        for row in rows:
            row.coach = _person(row.coach_id, users)  # type: ignore[attr-defined]
            room = classrooms.get(row.classroom_id) if row.classroom_id is not None else None
            row.classroom = (  # type: ignore[attr-defined]
                ClassroomSummary(room.id, room.name, room.level)
                if room is not None
                else (ClassroomSummary(row.classroom_id) if row.classroom_id is not None else None)
            )
            signed = attendance.get(row.id, [])
            for a in signed:
                a.candidate = _person(a.candidate_id, users)  # type: ignore[attr-defined]
            row.attendances = signed  # type: ignore[attr-defined]
            row.attendance_count = len(signed)  # type: ignore[attr-defined]

    # Transitions

    async def open(self, session_id: int, actor: Actor) -> CourseSession:
        return await self._transition(session_id, actor, OPEN, opened_at=self._clock())

    async def close(self, session_id: int, actor: Actor) -> CourseSession:
        return await self._transition(session_id, actor, COMPLETED, closed_at=self._clock())

    async def cancel(self, session_id: int, actor: Actor) -> CourseSession:
        return await self._transition(session_id, actor, CANCELLED)

    async def _transition(
        self, session_id: int, actor: Actor, target: str, **changes: object
    ) -> CourseSession:
        row = await self._load(session_id, actor)
        current = row.status
        if current not in TRANSITIONS[target]:
            raise StateError(current, target)

        # Only applies if nobody moved the session since it was read
        result = await self.db.execute(
            update(CourseSession)
            .where(CourseSession.id == session_id, CourseSession.status == current)
            .values(status=target, **changes)
        )
        if result.rowcount != 1:
            await self.db.rollback()
            raise ConflictOnCommitError(
                f"Session {session_id} changed concurrently; reload and retry"
            )
        await self.db.commit()
        await self.db.refresh(row)
        logger.info(
            "Session %s: %s -> %s (actor=%s role=%s)",
            session_id,
            current,
            target,
            actor.id,
            actor.role,
        )
        return row

    # Attendance

    async def sign_attendance(self, session_id: int, candidate_id: int) -> Attendance:
        """Record a candidate's presence. The unique constraint settles races."""
        row = await self.store.get_session(session_id)
        if row is None:
            raise NotFoundError(f"Session {session_id} not found")
        if row.status != OPEN:
            raise StateError(
                row.status,
                "ATTENDANCE",
                f"Session is not open for attendance (status {row.status})",
            )

        attendance = Attendance(
            session_id=session_id, candidate_id=candidate_id, signed_at=self._clock()
        )
        try:
            await self.store.add_attendance(attendance)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateError(
                f"Candidate {candidate_id} already signed for session {session_id}"
            ) from None
        logger.info("Candidate %s signed attendance for session %s", candidate_id, session_id)
        return attendance

    async def _load(self, session_id: int, actor: Actor | None) -> CourseSession:
        row = await self.store.get_session(session_id)
        if row is None:
            raise NotFoundError(f"Session {session_id} not found")
        if actor is not None and not actor.is_admin and row.coach_id != actor.id:
            raise NotFoundError("Session not found or access denied")
        return row


def _person(user_id: int, users: dict) -> PersonSummary:
    user = users.get(user_id)
    if user is None:
        return PersonSummary(user_id)
    return PersonSummary(user.id, user.name, user.email)
