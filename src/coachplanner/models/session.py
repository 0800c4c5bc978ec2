from datetime import date, datetime, time

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from coachplanner.database import Base, utcnow

SCHEDULED = "SCHEDULED"
OPEN = "OPEN"
COMPLETED = "COMPLETED"
CANCELLED = "CANCELLED"
SESSION_STATUSES = (SCHEDULED, OPEN, COMPLETED, CANCELLED)

COURSE = "COURSE"
MOCK_EXAM = "MOCK_EXAM"
SESSION_TYPES = (COURSE, MOCK_EXAM)


class CourseSession(Base):
    __tablename__ = "course_sessions"
    __table_args__ = (
        Index("ix_course_sessions_coach_date", "coach_id", "scheduled_date"),
        Index("ix_course_sessions_classroom_date", "classroom_id", "scheduled_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    coach_id: Mapped[int]
    classroom_id: Mapped[int | None] = mapped_column(
        ForeignKey("classrooms.id"), default=None
    )
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, default=None)
    scheduled_date: Mapped[date]
    start_time: Mapped[time]
    end_time: Mapped[time]
    duration_minutes: Mapped[int]  # always derived from start/end
    type: Mapped[str] = mapped_column(String(20), default=COURSE)  # COURSE, MOCK_EXAM
    status: Mapped[str] = mapped_column(
        String(20), default=SCHEDULED
    )  # SCHEDULED, OPEN, COMPLETED, CANCELLED
    recurrence_group_id: Mapped[str | None] = mapped_column(
        String(32), default=None, index=True
    )  # shared by siblings created in one batch
    opened_at: Mapped[datetime | None] = mapped_column(default=None)
    closed_at: Mapped[datetime | None] = mapped_column(default=None)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)


class Attendance(Base):
    __tablename__ = "attendances"
    __table_args__ = (UniqueConstraint("session_id", "candidate_id", name="uq_attendance_signer"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("course_sessions.id"))
    candidate_id: Mapped[int]
    signed_at: Mapped[datetime] = mapped_column(default=utcnow)
