"""Notes Routes — the caller's notes history and free-text summaries."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.api.dependencies import get_current_user, get_llm_client
from tutor_network.config import Settings, get_settings
from tutor_network.infrastructure.anthropic_client import ResilientAnthropicClient
from tutor_network.infrastructure.database import get_db
from tutor_network.models.user import User
from tutor_network.schemas.booking import NotesEntry, SummarizeRequest, SummaryResponse
from tutor_network.services import ai_assist, booking_ledger

router = APIRouter(prefix="/api/v1/notes", tags=["notes"])


@router.get("", response_model=list[NotesEntry])
async def list_notes(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    return [
        NotesEntry(
            booking_id=b.id,
            date=b.date,
            time=b.time,
            status=b.status,
            other_party_name=booking_ledger.other_party(b, user).full_name,
            topic=b.subtopic_title,
            notes=b.notes,
            notes_updated_at=b.notes_updated_at,
        )
        for b in await booking_ledger.list_notes(db, user)
    ]


@router.post("/summarize", response_model=SummaryResponse)
async def summarize(
    body: SummarizeRequest,
    user: User = Depends(get_current_user),
    llm: ResilientAnthropicClient | None = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    summary = await ai_assist.summarize_notes(llm, settings, body.content, str(user.id))
    return SummaryResponse(summary=summary)
