"""Tests for the conflict detector against the resource store."""

from datetime import date, time

from coachplanner.models.availability import AvailabilitySlot
from coachplanner.models.classroom import Classroom
from coachplanner.models.session import CANCELLED
from coachplanner.scheduling.conflicts import (
    CLASSROOM_DOUBLE_BOOKING,
    COACH_DOUBLE_BOOKING,
    HARD,
    OUTSIDE_AVAILABILITY,
    SOFT,
    ConflictDetector,
)
from coachplanner.scheduling.overlap import TimeWindow
from coachplanner.scheduling.store import ResourceStore
from tests.conftest import make_session, test_session

COACH = 7
OTHER_COACH = 8
MONDAY = date(2025, 2, 3)
TUESDAY = date(2025, 2, 4)


def _monday_slot(coach_id: int = COACH) -> AvailabilitySlot:
    return AvailabilitySlot(
        coach_id=coach_id,
        is_recurring=True,
        day_of_week=1,
        valid_from=date(2025, 1, 1),
        valid_to=date(2025, 6, 30),
        start_time=time(8, 0),
        end_time=time(12, 0),
    )


class TestConflictDetector:
    async def test_clean_when_available_and_free(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 0), time(10, 0))], COACH
            )
        assert report.is_clean
        assert report.total == 1

    async def test_no_availability_is_soft(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(TUESDAY, time(10, 0), time(11, 0))], COACH
            )
        assert len(report.entries) == 1
        entry = report.entries[0]
        assert entry.severity == SOFT
        assert entry.reason == OUTSIDE_AVAILABILITY == "outside declared availability"
        assert entry.date == TUESDAY

    async def test_partially_covered_window_is_soft(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(11, 30), time(12, 30))], COACH
            )
        assert [e.severity for e in report.entries] == [SOFT]

    async def test_recurring_slot_outside_validity_is_soft(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(date(2025, 7, 7), time(9, 0), time(10, 0))], COACH
            )
        assert [e.reason for e in report.entries] == [OUTSIDE_AVAILABILITY]

    async def test_dated_slot_covers_its_day(self) -> None:
        async with test_session() as session:
            session.add(
                AvailabilitySlot(
                    coach_id=COACH,
                    is_recurring=False,
                    day_of_week=2,
                    slot_date=TUESDAY,
                    start_time=time(10, 0),
                    end_time=time(11, 0),
                )
            )
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(TUESDAY, time(10, 0), time(11, 0))], COACH
            )
        assert report.is_clean

    async def test_double_booking_is_one_hard_entry(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            existing = make_session(COACH, MONDAY, time(9, 0), time(10, 0))
            session.add(existing)
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 30), time(10, 30))], COACH
            )
        assert len(report.entries) == 1
        assert report.entries[0].severity == HARD
        assert report.entries[0].reason == COACH_DOUBLE_BOOKING
        assert report.entries[0].session_id == existing.id

    async def test_two_overlapping_sessions_give_one_hard_entry(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            first = make_session(COACH, MONDAY, time(9, 0), time(10, 0))
            second = make_session(COACH, MONDAY, time(10, 0), time(11, 0))
            session.add_all([first, second])
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 30), time(10, 30))], COACH
            )
        assert len(report.hard) == 1
        assert report.hard[0].reason == COACH_DOUBLE_BOOKING
        assert report.hard[0].session_id == first.id
        assert report.clashing_ids == {first.id, second.id}

    async def test_two_room_bookings_give_one_classroom_entry(self) -> None:
        async with test_session() as session:
            room = Classroom(name="Salle A")
            session.add(room)
            session.add(_monday_slot())
            await session.flush()
            session.add_all(
                [
                    make_session(
                        OTHER_COACH, MONDAY, time(9, 0), time(10, 0), classroom_id=room.id
                    ),
                    make_session(9, MONDAY, time(10, 0), time(11, 0), classroom_id=room.id),
                ]
            )
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 30), time(10, 30))], COACH, classroom_id=room.id
            )
        assert [(e.severity, e.reason) for e in report.entries] == [
            (HARD, CLASSROOM_DOUBLE_BOOKING)
        ]
        assert len(report.clashing_ids) == 2

    async def test_one_entry_per_instance(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            session.add_all(
                [
                    make_session(COACH, MONDAY, time(9, 0), time(10, 0)),
                    make_session(COACH, MONDAY, time(10, 0), time(11, 0)),
                    make_session(COACH, date(2025, 2, 10), time(9, 0), time(11, 0)),
                ]
            )
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [
                    TimeWindow(MONDAY, time(9, 30), time(10, 30)),
                    TimeWindow(date(2025, 2, 10), time(9, 30), time(10, 30)),
                ],
                COACH,
            )
        assert [e.date for e in report.hard] == [MONDAY, date(2025, 2, 10)]

    async def test_touching_session_is_not_a_conflict(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            session.add(make_session(COACH, MONDAY, time(9, 0), time(10, 0)))
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(10, 0), time(11, 0))], COACH
            )
        assert report.is_clean

    async def test_cancelled_sessions_are_ignored(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            session.add(make_session(COACH, MONDAY, time(9, 0), time(10, 0), status=CANCELLED))
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 0), time(10, 0))], COACH
            )
        assert report.is_clean

    async def test_other_coach_does_not_conflict_without_classroom(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            session.add(make_session(OTHER_COACH, MONDAY, time(9, 0), time(10, 0)))
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 0), time(10, 0))], COACH
            )
        assert report.is_clean

    async def test_classroom_double_booking(self) -> None:
        async with test_session() as session:
            room = Classroom(name="Salle A")
            session.add(room)
            session.add(_monday_slot())
            await session.flush()
            session.add(
                make_session(OTHER_COACH, MONDAY, time(9, 0), time(10, 0), classroom_id=room.id)
            )
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 30), time(10, 30))], COACH, classroom_id=room.id
            )
        assert [(e.severity, e.reason) for e in report.entries] == [
            (HARD, CLASSROOM_DOUBLE_BOOKING)
        ]

    async def test_same_session_reported_once_for_coach_and_room(self) -> None:
        async with test_session() as session:
            room = Classroom(name="Salle A")
            session.add(room)
            session.add(_monday_slot())
            await session.flush()
            session.add(make_session(COACH, MONDAY, time(9, 0), time(10, 0), classroom_id=room.id))
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 0), time(10, 0))], COACH, classroom_id=room.id
            )
        assert [e.reason for e in report.entries] == [COACH_DOUBLE_BOOKING]

    async def test_hard_and_soft_on_same_date(self) -> None:
        async with test_session() as session:
            session.add(make_session(COACH, TUESDAY, time(10, 0), time(11, 0)))
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(TUESDAY, time(10, 0), time(11, 0))], COACH
            )
        assert [e.severity for e in report.entries] == [HARD, SOFT]
        assert len(report.hard) == 1
        assert len(report.soft) == 1

    async def test_excluded_ids_are_skipped(self) -> None:
        async with test_session() as session:
            session.add(_monday_slot())
            existing = make_session(COACH, MONDAY, time(9, 0), time(10, 0))
            session.add(existing)
            await session.commit()

            report = await ConflictDetector(ResourceStore(session)).check(
                [TimeWindow(MONDAY, time(9, 0), time(10, 0))], COACH, exclude_ids=[existing.id]
            )
        assert report.is_clean

    async def test_check_does_not_write(self) -> None:
        async with test_session() as session:
            detector = ConflictDetector(ResourceStore(session))
            await detector.check([TimeWindow(MONDAY, time(9, 0), time(10, 0))], COACH)
            assert not session.new
            assert not session.dirty
