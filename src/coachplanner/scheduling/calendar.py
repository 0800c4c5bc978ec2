"""Month view merging availability and booked sessions for one coach."""

from dataclasses import dataclass, field
from datetime import date, time

from coachplanner.scheduling.availability import expand_slots
from coachplanner.scheduling.recurrence import month_bounds
from coachplanner.scheduling.store import ResourceStore

AVAILABILITY = "AVAILABILITY"
SESSION = "SESSION"

_KIND_ORDER = {AVAILABILITY: 0, SESSION: 1}


@dataclass
class CalendarEntry:
    kind: str  # AVAILABILITY, SESSION
    date: date
    start_time: time
    end_time: time
    ref_id: int  # slot id or session id
    title: str | None = None
    status: str | None = None
    type: str | None = None
    classroom_id: int | None = None


@dataclass
class CalendarDay:
    date: date
    entries: list[CalendarEntry] = field(default_factory=list)


async def build_month(store: ResourceStore, coach_id: int, year: int, month: int) -> list[CalendarDay]:
    """Days of the month that carry anything, each sorted by start time.

    Cancelled sessions are left out.
    """
    start, end = month_bounds(year, month)

    entries = [
        CalendarEntry(AVAILABILITY, i.date, i.start_time, i.end_time, i.slot_id)
        for i in expand_slots(await store.slots_between(coach_id, start, end), start, end)
    ]
    sessions = await store.sessions_between(start, end, coach_id=coach_id, include_cancelled=False)
    entries.extend(
        CalendarEntry(
            SESSION,
            s.scheduled_date,
            s.start_time,
            s.end_time,
            s.id,
            title=s.title,
            status=s.status,
            type=s.type,
            classroom_id=s.classroom_id,
        )
        for s in sessions
    )

    entries.sort(key=lambda e: (e.date, e.start_time, _KIND_ORDER[e.kind], e.ref_id))
    days: dict[date, CalendarDay] = {}
    for entry in entries:
        days.setdefault(entry.date, CalendarDay(entry.date)).entries.append(entry)
    return list(days.values())
