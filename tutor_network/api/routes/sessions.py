"""Session Room Routes — embed URLs and notes for a booked session.

Invariants:
    - Both participants of a booking receive identical room identifiers
    - The video room, notes pad and whiteboard are third-party embeds; only
      their URLs are derived here
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.api.dependencies import get_current_user
from tutor_network.config import Settings, get_settings
from tutor_network.core.session_rooms import meeting_room_name, meeting_url, pad_url
from tutor_network.infrastructure.database import get_db
from tutor_network.models.user import User
from tutor_network.schemas.booking import SessionRoomResponse
from tutor_network.services import booking_ledger

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


@router.get("/{booking_id}", response_model=SessionRoomResponse)
async def get_session_room(
    booking_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    booking = await booking_ledger.get_booking_for_participant(db, user, booking_id)
    return SessionRoomResponse(
        booking_id=booking.id,
        meeting_room=meeting_room_name(booking.id),
        meeting_url=meeting_url(settings.jitsi_domain, booking.id),
        notes_pad_url=pad_url(settings.etherpad_url, booking.id),
        whiteboard_url=settings.whiteboard_url,
        notes=booking.notes,
        notes_updated_at=booking.notes_updated_at,
        other_party_name=booking_ledger.other_party(booking, user).full_name,
        date=booking.date,
        time=booking.time,
        topic=booking.subtopic_title,
    )
