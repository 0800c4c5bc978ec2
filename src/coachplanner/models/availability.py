from datetime import date, datetime, time

from sqlalchemy import Index
from sqlalchemy.orm import Mapped, mapped_column

from coachplanner.database import Base, utcnow


class AvailabilitySlot(Base):
    """When a coach can be booked.

    Recurring slots repeat on `day_of_week` inside [valid_from, valid_to];
    dated slots cover `slot_date` only. Rows are never edited in place.
    """

    __tablename__ = "availability_slots"
    __table_args__ = (Index("ix_availability_slots_coach_day", "coach_id", "day_of_week"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    coach_id: Mapped[int] = mapped_column(index=True)
    is_recurring: Mapped[bool] = mapped_column(default=True)
    day_of_week: Mapped[int]  # 0=Sunday, 6=Saturday
    slot_date: Mapped[date | None] = mapped_column(default=None)  # dated slots only
    valid_from: Mapped[date | None] = mapped_column(default=None)  # recurring slots only
    valid_to: Mapped[date | None] = mapped_column(default=None)
    start_time: Mapped[time]
    end_time: Mapped[time]
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
