"""Availability Routes — the slot grid, open inventory, and a tutor's own dates.

Invariants:
    - Every write goes through services/booking_ledger.py
    - Listings never show a slot held by a confirmed booking
"""

import datetime as dt
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.api.dependencies import get_current_user, require_tutor
from tutor_network.core.time_slots import generate_time_slots
from tutor_network.infrastructure.database import get_db
from tutor_network.models.availability import Availability
from tutor_network.models.user import User
from tutor_network.schemas.availability import (
    AvailabilityCreate, AvailabilityReplace, AvailabilityResponse,
)
from tutor_network.services import booking_ledger

router = APIRouter(prefix="/api/v1/availabilities", tags=["availabilities"])


def _response(availability: Availability, tutor: User) -> AvailabilityResponse:
    return AvailabilityResponse(
        id=availability.id,
        tutor_id=availability.tutor_id,
        tutor_name=tutor.full_name,
        date=availability.date,
        time_slots=availability.time_slots,
        created_at=availability.created_at,
    )


@router.get("/slot-grid", response_model=list[str])
async def slot_grid():
    return generate_time_slots()


@router.get("", response_model=list[AvailabilityResponse])
async def list_availabilities(
    tutor_id: UUID | None = Query(None),
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await booking_ledger.list_open_availabilities(db, tutor_id)


@router.get("/mine", response_model=list[AvailabilityResponse])
async def my_availabilities(
    tutor: User = Depends(require_tutor), db: AsyncSession = Depends(get_db),
):
    return await booking_ledger.list_open_availabilities(db, tutor.id)


@router.post(
    "", response_model=AvailabilityResponse, status_code=status.HTTP_201_CREATED,
)
async def create_availability(
    body: AvailabilityCreate,
    tutor: User = Depends(require_tutor),
    db: AsyncSession = Depends(get_db),
):
    availability = await booking_ledger.publish_availability(
        db, tutor, body.date, body.time_slots,
    )
    return _response(availability, tutor)


@router.put("/{date}", response_model=AvailabilityResponse)
async def replace_availability(
    date: dt.date,
    body: AvailabilityReplace,
    tutor: User = Depends(require_tutor),
    db: AsyncSession = Depends(get_db),
):
    availability = await booking_ledger.replace_availability(
        db, tutor, date, body.time_slots,
    )
    return _response(availability, tutor)


@router.delete("/{date}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability(
    date: dt.date,
    tutor: User = Depends(require_tutor),
    db: AsyncSession = Depends(get_db),
):
    await booking_ledger.withdraw_availability(db, tutor, date)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
