from datetime import date, time

from pydantic import BaseModel, Field


class AvailabilityRangeCreate(BaseModel):
    start_date: date
    end_date: date
    days_of_week: list[int]  # 0=Sunday, 6=Saturday
    start_time: time
    end_time: time


class AvailabilityDateCreate(BaseModel):
    date: date
    start_time: time
    end_time: time


class AvailabilitySlotRead(BaseModel):
    id: int
    coach_id: int
    is_recurring: bool
    day_of_week: int = Field(ge=0, le=6)
    slot_date: date | None = None
    valid_from: date | None = None
    valid_to: date | None = None
    start_time: time
    end_time: time

    model_config = {"from_attributes": True}


class AvailabilityInstanceRead(BaseModel):
    slot_id: int
    coach_id: int
    date: date
    day_of_week: int
    start_time: time
    end_time: time
    is_recurring: bool

    model_config = {"from_attributes": True}


class AvailabilityDeleted(BaseModel):
    id: int
    deleted: bool = True
