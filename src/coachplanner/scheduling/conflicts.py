"""Conflict detection for proposed sessions.

The detector only reports. Whether a HARD conflict stops a create is a
policy decision taken by the caller (see `Settings.block_hard_conflicts`).
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from coachplanner.scheduling.overlap import TimeWindow, contains, overlaps
from coachplanner.scheduling.store import ResourceStore

logger = logging.getLogger(__name__)

SOFT = "SOFT"
HARD = "HARD"

COACH_DOUBLE_BOOKING = "double booking with coach session"
CLASSROOM_DOUBLE_BOOKING = "double booking with classroom session"
OUTSIDE_AVAILABILITY = "outside declared availability"


@dataclass(frozen=True)
class ConflictEntry:
    date: date
    reason: str
    severity: str  # SOFT, HARD
    session_id: int | None = None  # the existing session clashed with, for HARD entries


@dataclass
class ConflictReport:
    """Result of a conflict check, in proposal order."""

    total: int = 0  # number of instances checked
    entries: list[ConflictEntry] = field(default_factory=list)
    # every existing session that overlaps some instance, reported or not
    clashing_ids: set[int] = field(default_factory=set)

    @property
    def is_clean(self) -> bool:
        return not self.entries

    @property
    def hard(self) -> list[ConflictEntry]:
        return [e for e in self.entries if e.severity == HARD]

    @property
    def soft(self) -> list[ConflictEntry]:
        return [e for e in self.entries if e.severity == SOFT]


def _window(row) -> TimeWindow:
    return TimeWindow(row.scheduled_date, row.start_time, row.end_time)


class ConflictDetector:
    """Read-only checks of proposed windows against the store."""

    def __init__(self, store: ResourceStore) -> None:
        self._store = store

    async def check(
        self,
        instances: Sequence[TimeWindow],
        coach_id: int,
        classroom_id: int | None = None,
        exclude_ids: Iterable[int] = (),
        include_availability: bool = True,
    ) -> ConflictReport:
        """Check each proposed window in order.

        Per window, at most one entry of each kind: coach double booking
        (HARD), classroom double booking (HARD, ignoring sessions that
        already clash with the coach), then containment in a declared
        availability slot (SOFT). Every overlapping session id lands in
        `clashing_ids`, including those not named by an entry.
        """
        excluded = list(exclude_ids)
        report = ConflictReport(total=len(instances))

        for proposed in instances:
            coach_clashes = [
                existing.id
                for existing in await self._store.sessions_for_coach_on(
                    coach_id, proposed.day, excluded
                )
                if overlaps(proposed, _window(existing))
            ]
            if coach_clashes:
                report.clashing_ids.update(coach_clashes)
                report.entries.append(
                    ConflictEntry(proposed.day, COACH_DOUBLE_BOOKING, HARD, coach_clashes[0])
                )

            if classroom_id is not None:
                room_clashes = [
                    existing.id
                    for existing in await self._store.sessions_for_classroom_on(
                        classroom_id, proposed.day, excluded
                    )
                    if existing.id not in coach_clashes and overlaps(proposed, _window(existing))
                ]
                if room_clashes:
                    report.clashing_ids.update(room_clashes)
                    report.entries.append(
                        ConflictEntry(
                            proposed.day, CLASSROOM_DOUBLE_BOOKING, HARD, room_clashes[0]
                        )
                    )

            if include_availability and not await self.is_available(coach_id, proposed):
                report.entries.append(ConflictEntry(proposed.day, OUTSIDE_AVAILABILITY, SOFT))

        if report.entries:
            logger.debug(
                "Conflict check for coach %s: %d instance(s), %d hard, %d soft",
                coach_id,
                report.total,
                len(report.hard),
                len(report.soft),
            )
        return report

    async def is_available(self, coach_id: int, proposed: TimeWindow) -> bool:
        """True if some covering slot fully contains the proposed window."""
        slots = await self._store.slots_covering(coach_id, proposed.day)
        return any(
            contains(TimeWindow(proposed.day, slot.start_time, slot.end_time), proposed)
            for slot in slots
        )
