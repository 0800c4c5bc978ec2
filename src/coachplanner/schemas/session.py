from datetime import date, datetime, time

from pydantic import BaseModel, Field

SESSION_TYPE_PATTERN = r"^(COURSE|MOCK_EXAM)$"


class SessionCreate(BaseModel):
    """A single session, optionally repeated on the same weekday for `weeks` weeks."""

    title: str = Field(max_length=200)
    description: str | None = None
    scheduled_date: date
    start_time: time
    end_time: time
    type: str = Field(default="COURSE", pattern=SESSION_TYPE_PATTERN)
    weeks: int = Field(default=1, ge=1)
    coach_id: int
    classroom_id: int | None = None


class ConflictCheckRequest(BaseModel):
    start_date: date
    end_date: date
    days_of_week: list[int]  # 0=Sunday, 6=Saturday
    start_time: time
    end_time: time
    coach_id: int
    classroom_id: int | None = None


class SessionRangeCreate(ConflictCheckRequest):
    title: str = Field(max_length=200)
    description: str | None = None
    type: str = Field(default="COURSE", pattern=SESSION_TYPE_PATTERN)


class ConflictEntryRead(BaseModel):
    date: date
    reason: str
    severity: str

    model_config = {"from_attributes": True}


class ConflictReportRead(BaseModel):
    total: int
    conflicts: list[ConflictEntryRead]


class PersonSummaryRead(BaseModel):
    id: int
    name: str | None = None
    email: str | None = None

    model_config = {"from_attributes": True}


class ClassroomSummaryRead(BaseModel):
    id: int
    name: str | None = None
    level: str | None = None

    model_config = {"from_attributes": True}


class AttendanceCreate(BaseModel):
    candidate_id: int


class AttendanceRead(BaseModel):
    id: int
    session_id: int
    candidate_id: int
    signed_at: datetime
    candidate: PersonSummaryRead | None = None

    model_config = {"from_attributes": True}


class SessionRead(BaseModel):
    id: int
    coach_id: int
    classroom_id: int | None = None
    title: str
    description: str | None = None
    scheduled_date: date
    start_time: time
    end_time: time
    duration_minutes: int
    type: str
    status: str
    recurrence_group_id: str | None = None
    opened_at: datetime | None = None
    closed_at: datetime | None = None
    created_at: datetime

    # Filled in by SessionLifecycle.attach_details on read endpoints
    coach: PersonSummaryRead | None = None
    classroom: ClassroomSummaryRead | None = None
    attendances: list[AttendanceRead] = Field(default_factory=list)
    attendance_count: int = 0

    model_config = {"from_attributes": True}
