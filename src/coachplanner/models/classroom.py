from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from coachplanner.database import Base, utcnow


class Classroom(Base):
    __tablename__ = "classrooms"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    level: Mapped[str | None] = mapped_column(String(20), default=None)  # A1, A2, B1, ...
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
