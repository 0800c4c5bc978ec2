"""Availability API routes — declare, list and remove coach availability."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coachplanner.api.errors import http_error
from coachplanner.database import get_db
from coachplanner.models.availability import AvailabilitySlot
from coachplanner.scheduling.availability import AvailabilityInstance, AvailabilityService
from coachplanner.scheduling.errors import SchedulingError
from coachplanner.schemas.availability import (
    AvailabilityDateCreate,
    AvailabilityDeleted,
    AvailabilityInstanceRead,
    AvailabilityRangeCreate,
    AvailabilitySlotRead,
)

router = APIRouter(prefix="/api/coaches/{coach_id}/availability", tags=["availability"])


@router.get("", response_model=list[AvailabilityInstanceRead])
async def list_availability(
    coach_id: int,
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=1970, le=9999),
    session: AsyncSession = Depends(get_db),
) -> list[AvailabilityInstance]:
    """Every slot of the coach expanded over the requested month."""
    return await AvailabilityService(session).list_month(coach_id, year, month)


@router.post("/range", response_model=list[AvailabilitySlotRead], status_code=201)
async def create_availability_range(
    coach_id: int,
    body: AvailabilityRangeCreate,
    session: AsyncSession = Depends(get_db),
) -> list[AvailabilitySlot]:
    """Declare a weekly time window on the given weekdays between two dates."""
    try:
        return await AvailabilityService(session).create_range(
            coach_id,
            body.start_date,
            body.end_date,
            body.days_of_week,
            body.start_time,
            body.end_time,
        )
    except SchedulingError as e:
        raise http_error(e) from None


@router.post("/date", response_model=AvailabilitySlotRead, status_code=201)
async def create_dated_availability(
    coach_id: int,
    body: AvailabilityDateCreate,
    session: AsyncSession = Depends(get_db),
) -> AvailabilitySlot:
    """Declare availability for one specific date."""
    try:
        return await AvailabilityService(session).create_dated(
            coach_id, body.date, body.start_time, body.end_time
        )
    except SchedulingError as e:
        raise http_error(e) from None


@router.delete("/{slot_id}", response_model=AvailabilityDeleted)
async def delete_availability(
    coach_id: int,
    slot_id: int,
    session: AsyncSession = Depends(get_db),
) -> AvailabilityDeleted:
    """Remove a slot. Edits are made by deleting and re-creating."""
    try:
        await AvailabilityService(session).delete(coach_id, slot_id)
    except SchedulingError as e:
        raise http_error(e) from None
    return AvailabilityDeleted(id=slot_id)
