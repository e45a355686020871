"""Subject Routes — the catalog, subtopic search, tutors per subject, and learning resources.

Invariants:
    - Catalog data is served from core/subjects_catalog.py (no DB)
    - Resource suggestions always answer 200 for a known subtopic
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.api.dependencies import get_llm_client
from tutor_network.config import Settings, get_settings
from tutor_network.core.errors import ResourceNotFoundError
from tutor_network.core.subjects_catalog import (
    SUBJECTS,
    SubjectConfig,
    all_subtopics_flat,
    filter_subtopics_by_search,
    get_subject_by_slug,
    get_subtopic,
)
from tutor_network.infrastructure.anthropic_client import ResilientAnthropicClient
from tutor_network.infrastructure.database import get_db
from tutor_network.schemas.catalog import (
    ResourcesResponse, SubjectOut, SubtopicOptionOut, SubtopicOut,
)
from tutor_network.schemas.profile import TutorSummary
from tutor_network.services import ai_assist, profiles

router = APIRouter(prefix="/api/v1/subjects", tags=["subjects"])


def _subject_out(config: SubjectConfig) -> SubjectOut:
    return SubjectOut(
        slug=config.slug,
        title=config.title,
        subtopics=[
            SubtopicOut(id=st.id, title=st.title, description=st.description)
            for st in config.subtopics
        ],
    )


def _subject_or_404(slug: str) -> SubjectConfig:
    subject = get_subject_by_slug(slug)
    if subject is None:
        raise ResourceNotFoundError("Subject", slug)
    return subject


@router.get("", response_model=list[SubjectOut])
async def list_subjects():
    return [_subject_out(config) for config in SUBJECTS.values()]


@router.get("/search", response_model=list[SubtopicOptionOut])
async def search_subtopics(q: str = Query("", max_length=100)):
    return [
        SubtopicOptionOut(
            subject_slug=o.subject_slug,
            subject_title=o.subject_title,
            subtopic_id=o.subtopic_id,
            subtopic_title=o.subtopic_title,
        )
        for o in filter_subtopics_by_search(all_subtopics_flat(), q)
    ]


@router.get("/{slug}", response_model=SubjectOut)
async def get_subject(slug: str):
    return _subject_out(_subject_or_404(slug))


@router.get("/{slug}/tutors", response_model=list[TutorSummary])
async def list_subject_tutors(
    slug: str,
    subtopic_id: str | None = Query(None, max_length=50),
    db: AsyncSession = Depends(get_db),
):
    _subject_or_404(slug)
    if subtopic_id and get_subtopic(slug, subtopic_id) is None:
        raise ResourceNotFoundError("Subtopic", f"{slug}/{subtopic_id}")
    return await profiles.tutors_for_subject(db, slug, subtopic_id)


@router.post("/{slug}/{subtopic_id}/resources", response_model=ResourcesResponse)
async def subtopic_resources(
    slug: str,
    subtopic_id: str,
    llm: ResilientAnthropicClient | None = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    subject = _subject_or_404(slug)
    subtopic = get_subtopic(slug, subtopic_id)
    if subtopic is None:
        raise ResourceNotFoundError("Subtopic", f"{slug}/{subtopic_id}")
    resources = await ai_assist.suggest_resources(
        llm, settings, subject.title, subtopic.title, subtopic.description,
    )
    return ResourcesResponse(
        subject_title=subject.title,
        topic_title=subtopic.title,
        resources=resources,
    )
