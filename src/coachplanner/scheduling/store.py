"""Database queries over availability slots, sessions and attendance."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from coachplanner.models.availability import AvailabilitySlot
from coachplanner.models.classroom import Classroom
from coachplanner.models.session import CANCELLED, OPEN, Attendance, CourseSession
from coachplanner.models.user import User
from coachplanner.scheduling.recurrence import day_index


class ResourceStore:
    """Persistence for one request's `AsyncSession`.

    Read helpers never commit. Writers only add and flush; committing is
    left to the caller so that a batch lands in one transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # Sessions

    async def get_session(self, session_id: int) -> CourseSession | None:
        return await self.session.get(CourseSession, session_id)

    async def sessions_for_coach_on(
        self, coach_id: int, day: date, exclude_ids: Iterable[int] = ()
    ) -> list[CourseSession]:
        """Non-cancelled sessions of a coach on one date."""
        return await self._active_sessions_on(CourseSession.coach_id == coach_id, day, exclude_ids)

    async def sessions_for_classroom_on(
        self, classroom_id: int, day: date, exclude_ids: Iterable[int] = ()
    ) -> list[CourseSession]:
        """Non-cancelled sessions held in a classroom on one date."""
        return await self._active_sessions_on(
            CourseSession.classroom_id == classroom_id, day, exclude_ids
        )

    async def _active_sessions_on(
        self, scope, day: date, exclude_ids: Iterable[int]
    ) -> list[CourseSession]:
        stmt = (
            select(CourseSession)
            .where(
                scope,
                CourseSession.scheduled_date == day,
                CourseSession.status != CANCELLED,
            )
            .order_by(CourseSession.start_time, CourseSession.id)
        )
        excluded = list(exclude_ids)
        if excluded:
            stmt = stmt.where(CourseSession.id.not_in(excluded))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def sessions_between(
        self,
        start: date,
        end: date,
        coach_id: int | None = None,
        status: str | None = None,
        include_cancelled: bool = True,
    ) -> list[CourseSession]:
        """Sessions with scheduled_date in [start, end], newest first."""
        stmt = select(CourseSession).where(
            CourseSession.scheduled_date >= start,
            CourseSession.scheduled_date <= end,
        )
        if coach_id is not None:
            stmt = stmt.where(CourseSession.coach_id == coach_id)
        if status is not None:
            stmt = stmt.where(CourseSession.status == status)
        if not include_cancelled:
            stmt = stmt.where(CourseSession.status != CANCELLED)
        stmt = stmt.order_by(
            CourseSession.scheduled_date.desc(), CourseSession.start_time, CourseSession.id
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def open_sessions(self, classroom_id: int | None = None) -> list[CourseSession]:
        stmt = select(CourseSession).where(CourseSession.status == OPEN)
        if classroom_id is not None:
            stmt = stmt.where(CourseSession.classroom_id == classroom_id)
        stmt = stmt.order_by(CourseSession.scheduled_date.desc(), CourseSession.start_time)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_sessions(self, rows: Sequence[CourseSession]) -> None:
        self.session.add_all(rows)
        await self.session.flush()

    # Availability

    async def get_slot(self, coach_id: int, slot_id: int) -> AvailabilitySlot | None:
        stmt = select(AvailabilitySlot).where(
            AvailabilitySlot.id == slot_id,
            AvailabilitySlot.coach_id == coach_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def slots_covering(self, coach_id: int, day: date) -> list[AvailabilitySlot]:
        """Recurring slots valid on `day` for its weekday, plus slots dated `day`."""
        stmt = (
            select(AvailabilitySlot)
            .where(
                AvailabilitySlot.coach_id == coach_id,
                or_(
                    and_(
                        AvailabilitySlot.is_recurring.is_(True),
                        AvailabilitySlot.day_of_week == day_index(day),
                        AvailabilitySlot.valid_from <= day,
                        AvailabilitySlot.valid_to >= day,
                    ),
                    and_(
                        AvailabilitySlot.is_recurring.is_(False),
                        AvailabilitySlot.slot_date == day,
                    ),
                ),
            )
            .order_by(AvailabilitySlot.start_time, AvailabilitySlot.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def slots_between(self, coach_id: int, start: date, end: date) -> list[AvailabilitySlot]:
        """Slots that can produce at least one instance inside [start, end]."""
        stmt = (
            select(AvailabilitySlot)
            .where(
                AvailabilitySlot.coach_id == coach_id,
                or_(
                    and_(
                        AvailabilitySlot.is_recurring.is_(True),
                        AvailabilitySlot.valid_from <= end,
                        AvailabilitySlot.valid_to >= start,
                    ),
                    and_(
                        AvailabilitySlot.is_recurring.is_(False),
                        AvailabilitySlot.slot_date >= start,
                        AvailabilitySlot.slot_date <= end,
                    ),
                ),
            )
            .order_by(AvailabilitySlot.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_slots(self, rows: Sequence[AvailabilitySlot]) -> None:
        self.session.add_all(rows)
        await self.session.flush()

    async def delete_slot(self, slot: AvailabilitySlot) -> None:
        await self.session.delete(slot)
        await self.session.flush()

    # Attendance

    async def add_attendance(self, row: Attendance) -> None:
        self.session.add(row)
        await self.session.flush()

    async def attendances_for(self, session_ids: Iterable[int]) -> dict[int, list[Attendance]]:
        """Attendance rows grouped by session id, each list ordered by signed_at."""
        ids = list(session_ids)
        grouped: dict[int, list[Attendance]] = defaultdict(list)
        if not ids:
            return grouped
        stmt = (
            select(Attendance)
            .where(Attendance.session_id.in_(ids))
            .order_by(Attendance.signed_at, Attendance.id)
        )
        result = await self.session.execute(stmt)
        for row in result.scalars().all():
            grouped[row.session_id].append(row)
        return grouped

    # Registries

    async def classroom_exists(self, classroom_id: int) -> bool:
        return await self.session.get(Classroom, classroom_id) is not None

    async def classrooms_by_id(self, ids: Iterable[int | None]) -> dict[int, Classroom]:
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        result = await self.session.execute(select(Classroom).where(Classroom.id.in_(wanted)))
        return {c.id: c for c in result.scalars().all()}

    async def users_by_id(self, ids: Iterable[int]) -> dict[int, User]:
        wanted = set(ids)
        if not wanted:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(wanted)))
        return {u.id: u for u in result.scalars().all()}
