"""Tests for the month calendar view."""

from datetime import date, time

from coachplanner.models.session import CANCELLED, COMPLETED
from coachplanner.scheduling.availability import AvailabilityService
from coachplanner.scheduling.calendar import AVAILABILITY, SESSION, build_month
from coachplanner.scheduling.store import ResourceStore
from tests.conftest import make_session, test_session

COACH = 7


async def test_merges_availability_and_sessions_by_start_time() -> None:
    async with test_session() as session:
        await AvailabilityService(session).create_range(
            COACH, date(2025, 2, 1), date(2025, 2, 28), [1], time(8, 0), time(12, 0)
        )
        session.add(make_session(COACH, date(2025, 2, 3), time(7, 0), time(8, 0), title="Early"))
        session.add(make_session(COACH, date(2025, 2, 3), time(9, 0), time(10, 0), title="Mid"))
        await session.commit()

        days = await build_month(ResourceStore(session), COACH, 2025, 2)

    assert [d.date for d in days] == [
        date(2025, 2, 3),
        date(2025, 2, 10),
        date(2025, 2, 17),
        date(2025, 2, 24),
    ]
    first = days[0].entries
    assert [(e.kind, e.start_time) for e in first] == [
        (SESSION, time(7, 0)),
        (AVAILABILITY, time(8, 0)),
        (SESSION, time(9, 0)),
    ]
    assert first[0].title == "Early"


async def test_cancelled_sessions_are_excluded() -> None:
    async with test_session() as session:
        session.add(make_session(COACH, date(2025, 2, 4), time(9, 0), time(10, 0), status=CANCELLED))
        session.add(make_session(COACH, date(2025, 2, 5), time(9, 0), time(10, 0), status=COMPLETED))
        await session.commit()

        days = await build_month(ResourceStore(session), COACH, 2025, 2)

    assert [d.date for d in days] == [date(2025, 2, 5)]
    assert days[0].entries[0].status == COMPLETED


async def test_other_months_and_coaches_left_out() -> None:
    async with test_session() as session:
        session.add(make_session(COACH, date(2025, 3, 3), time(9, 0), time(10, 0)))
        session.add(make_session(8, date(2025, 2, 3), time(9, 0), time(10, 0)))
        await session.commit()

        assert await build_month(ResourceStore(session), COACH, 2025, 2) == []
