"""Calendar API route — a coach's month of availability and sessions."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coachplanner.database import get_db
from coachplanner.scheduling.calendar import build_month
from coachplanner.scheduling.store import ResourceStore
from coachplanner.schemas.calendar import CalendarDayRead, CalendarMonthRead

router = APIRouter(prefix="/api/coaches/{coach_id}/calendar", tags=["calendar"])


@router.get("", response_model=CalendarMonthRead)
async def get_month_calendar(
    coach_id: int,
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=1970, le=9999),
    session: AsyncSession = Depends(get_db),
) -> CalendarMonthRead:
    """Days of the month with availability and non-cancelled sessions, by start time."""
    days = await build_month(ResourceStore(session), coach_id, year, month)
    return CalendarMonthRead(
        coach_id=coach_id,
        year=year,
        month=month,
        days=[CalendarDayRead.model_validate(d) for d in days],
    )
