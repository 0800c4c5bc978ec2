"""Coach availability: declarative slots, expanded on read."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coachplanner.models.availability import AvailabilitySlot
from coachplanner.scheduling.errors import ConflictOnCommitError, NotFoundError
from coachplanner.scheduling.overlap import validate_window
from coachplanner.scheduling.recurrence import day_index, expand, month_bounds
from coachplanner.scheduling.store import ResourceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityInstance:
    """One concrete occurrence of a slot."""

    slot_id: int
    coach_id: int
    date: date
    day_of_week: int
    start_time: time
    end_time: time
    is_recurring: bool


def expand_slots(
    slots: Iterable[AvailabilitySlot], start: date, end: date
) -> list[AvailabilityInstance]:
    """Concrete occurrences of `slots` inside [start, end], ordered by date then time."""
    instances = []
    for slot in slots:
        if slot.is_recurring:
            if slot.valid_from is None or slot.valid_to is None:
                continue  # unbounded recurring slots are never expanded
            lo, hi = max(slot.valid_from, start), min(slot.valid_to, end)
            if lo > hi:
                continue
            days = [w.day for w in expand(lo, hi, {slot.day_of_week}, slot.start_time, slot.end_time)]
        else:
            days = [slot.slot_date] if slot.slot_date and start <= slot.slot_date <= end else []
        instances.extend(
            AvailabilityInstance(
                slot_id=slot.id,
                coach_id=slot.coach_id,
                date=d,
                day_of_week=day_index(d),
                start_time=slot.start_time,
                end_time=slot.end_time,
                is_recurring=slot.is_recurring,
            )
            for d in days
        )
    instances.sort(key=lambda i: (i.date, i.start_time, i.slot_id))
    return instances


class AvailabilityService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.store = ResourceStore(db)

    async def create_range(
        self,
        coach_id: int,
        start_date: date,
        end_date: date,
        days_of_week: Sequence[int],
        start_time: time,
        end_time: time,
    ) -> list[AvailabilitySlot]:
        """Declare weekly availability between two dates.

        Produces one recurring slot per weekday that actually occurs in the
        range, each bounded by [start_date, end_date].
        """
        windows = expand(start_date, end_date, days_of_week, start_time, end_time)
        weekdays = sorted({day_index(w.day) for w in windows})
        rows = [
            AvailabilitySlot(
                coach_id=coach_id,
                is_recurring=True,
                day_of_week=weekday,
                valid_from=start_date,
                valid_to=end_date,
                start_time=start_time,
                end_time=end_time,
            )
            for weekday in weekdays
        ]
        await self._commit(rows)
        logger.info(
            "Created %d recurring slot(s) for coach %s from %s to %s",
            len(rows),
            coach_id,
            start_date,
            end_date,
        )
        return rows

    async def create_dated(
        self, coach_id: int, on: date, start_time: time, end_time: time
    ) -> AvailabilitySlot:
        validate_window(start_time, end_time)
        row = AvailabilitySlot(
            coach_id=coach_id,
            is_recurring=False,
            day_of_week=day_index(on),
            slot_date=on,
            start_time=start_time,
            end_time=end_time,
        )
        await self._commit([row])
        logger.info("Created slot on %s for coach %s", on, coach_id)
        return row

    async def _commit(self, rows: list[AvailabilitySlot]) -> None:
        try:
            await self.store.add_slots(rows)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ConflictOnCommitError("Could not save availability; retry") from e

    async def list_month(self, coach_id: int, year: int, month: int) -> list[AvailabilityInstance]:
        start, end = month_bounds(year, month)
        slots = await self.store.slots_between(coach_id, start, end)
        return expand_slots(slots, start, end)

    async def delete(self, coach_id: int, slot_id: int) -> None:
        slot = await self.store.get_slot(coach_id, slot_id)
        if slot is None:
            raise NotFoundError("Slot not found")
        await self.store.delete_slot(slot)
        await self.db.commit()
        logger.info("Deleted slot %s of coach %s", slot_id, coach_id)
