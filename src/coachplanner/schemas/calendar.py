from datetime import date, time

from pydantic import BaseModel, Field


class CalendarEntryRead(BaseModel):
    kind: str  # AVAILABILITY, SESSION
    date: date
    start_time: time
    end_time: time
    ref_id: int
    title: str | None = None
    status: str | None = None
    type: str | None = None
    classroom_id: int | None = None

    model_config = {"from_attributes": True}


class CalendarDayRead(BaseModel):
    date: date
    entries: list[CalendarEntryRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class CalendarMonthRead(BaseModel):
    coach_id: int
    year: int
    month: int
    days: list[CalendarDayRead]
