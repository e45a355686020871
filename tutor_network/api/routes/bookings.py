"""Booking Routes — claim, list, cancel, contacts, and per-booking notes.

Invariants:
    - Claims and cancellations go through services/booking_ledger.py only
    - Only the booking's tutor and student can read or change it
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.api.dependencies import (
    get_current_user, get_llm_client, require_student,
)
from tutor_network.config import Settings, get_settings
from tutor_network.core.errors import BusinessRuleError
from tutor_network.infrastructure.anthropic_client import ResilientAnthropicClient
from tutor_network.infrastructure.database import get_db
from tutor_network.models.booking import Booking
from tutor_network.models.user import User
from tutor_network.schemas.booking import (
    BookingCreate,
    BookingResponse,
    CalendarEvent,
    Contact,
    NotesResponse,
    NotesUpdate,
    SummaryResponse,
)
from tutor_network.services import ai_assist, booking_ledger

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


def booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        availability_id=booking.availability_id,
        tutor_id=booking.tutor_id,
        tutor_name=booking.tutor.full_name,
        student_id=booking.student_id,
        student_name=booking.student.full_name,
        date=booking.date,
        time=booking.time,
        status=booking.status,
        subject_slug=booking.subject_slug,
        subtopic_title=booking.subtopic_title,
        created_at=booking.created_at,
        cancelled_at=booking.cancelled_at,
    )


def _notes_response(booking: Booking) -> NotesResponse:
    return NotesResponse(
        booking_id=booking.id,
        notes=booking.notes,
        notes_updated_at=booking.notes_updated_at,
    )


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    body: BookingCreate,
    student: User = Depends(require_student),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_ledger.claim_slot(
        db, student, body.availability_id, body.time,
        body.subject_slug, body.subtopic_title,
    )
    return booking_response(booking)


@router.get("", response_model=list[CalendarEvent])
async def list_bookings(
    upcoming: bool = Query(False),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The caller's confirmed sessions as calendar events, soonest first."""
    from_date = booking_ledger.current_date() if upcoming else None
    events = []
    for booking in await booking_ledger.list_user_bookings(db, user, from_date=from_date):
        party = booking_ledger.other_party(booking, user)
        events.append(CalendarEvent(
            id=booking.id,
            title=f"Session with {party.full_name}",
            date=booking.date,
            time=booking.time,
            other_party_id=party.id,
            other_party_name=party.full_name,
            subject_slug=booking.subject_slug,
            subtopic_title=booking.subtopic_title,
        ))
    return events


@router.get("/contacts", response_model=list[Contact])
async def list_contacts(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    return [
        Contact(
            id=c.id,
            full_name=c.full_name,
            avatar_url=c.avatar_url,
            email=c.email,
            contact_info=c.contact_info,
        )
        for c in await booking_ledger.list_contacts(db, user)
    ]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_ledger.get_booking_for_participant(db, user, booking_id)
    return booking_response(booking)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_ledger.cancel_booking(db, user, booking_id)
    return booking_response(booking)


@router.get("/{booking_id}/notes", response_model=NotesResponse)
async def get_notes(
    booking_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_ledger.get_booking_for_participant(db, user, booking_id)
    return _notes_response(booking)


@router.put("/{booking_id}/notes", response_model=NotesResponse)
async def save_notes(
    booking_id: UUID,
    body: NotesUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_ledger.update_notes(db, user, booking_id, body.notes)
    return _notes_response(booking)


@router.post("/{booking_id}/notes/summary", response_model=SummaryResponse)
async def summarize_booking_notes(
    booking_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    llm: ResilientAnthropicClient | None = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    booking = await booking_ledger.get_booking_for_participant(db, user, booking_id)
    if not booking.notes:
        raise BusinessRuleError("This session has no notes to summarize")
    summary = await ai_assist.summarize_notes(llm, settings, booking.notes, str(user.id))
    return SummaryResponse(summary=summary)
