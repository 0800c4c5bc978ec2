from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from coachplanner.database import Base, utcnow


class User(Base):
    """Local mirror of the identity directory, read for nested summaries only."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    role: Mapped[str] = mapped_column(
        String(20), default="CANDIDATE"
    )  # CANDIDATE, COACH, ADMIN, ORG_ADMIN, SUPER_ADMIN
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
