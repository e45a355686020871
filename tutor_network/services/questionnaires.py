"""Questionnaires — a student's saved answers and the recommendations derived from them.

Invariants:
    - Saving answers always succeeds independently of the AI call
    - Stored recommendations always belong to the stored answers: new answers
      clear them until a fresh recommendation succeeds
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.config import Settings
from tutor_network.core.errors import ResourceNotFoundError, TutorNetworkError
from tutor_network.infrastructure.anthropic_client import ResilientAnthropicClient
from tutor_network.models.questionnaire import Questionnaire
from tutor_network.models.user import User
from tutor_network.services.ai_assist import (
    NO_RECOMMENDATIONS_MESSAGE,
    recommend_subtopics,
)

logger = logging.getLogger(__name__)


async def get_questionnaire(db: AsyncSession, user: User) -> Questionnaire:
    row = (await db.execute(
        select(Questionnaire).where(Questionnaire.user_id == user.id),
    )).scalar_one_or_none()
    if row is None:
        raise ResourceNotFoundError("Questionnaire", str(user.id))
    return row


async def save_answers(
    db: AsyncSession,
    llm: ResilientAnthropicClient | None,
    settings: Settings,
    user: User,
    answers: dict,
) -> tuple[Questionnaire, str | None]:
    """Upsert answers, then try to refresh recommendations.

    Returns the row and, when recommendations could not be produced, a message
    saying why. AI failures are logged and reported, never raised.
    """
    row = (await db.execute(
        select(Questionnaire).where(Questionnaire.user_id == user.id),
    )).scalar_one_or_none()
    if row is None:
        row = Questionnaire(user_id=user.id)
        db.add(row)
    row.answers = dict(answers)
    row.recommendations = None
    row.updated_at = datetime.now(timezone.utc)
    await db.commit()

    try:
        recommendations = await recommend_subtopics(llm, settings, answers, str(user.id))
    except TutorNetworkError as e:
        logger.warning(
            f"Recommendations unavailable: {e.message}",
            extra={"user_id": str(user.id), "error_code": e.code},
        )
        return row, e.message
    if not recommendations:
        return row, NO_RECOMMENDATIONS_MESSAGE

    row.recommendations = recommendations
    await db.commit()
    return row, None


async def regenerate_recommendations(
    db: AsyncSession,
    llm: ResilientAnthropicClient | None,
    settings: Settings,
    user: User,
) -> Questionnaire:
    """Recommend again from the saved answers. AI errors propagate."""
    row = await get_questionnaire(db, user)
    recommendations = await recommend_subtopics(llm, settings, row.answers, str(user.id))
    row.recommendations = recommendations or None
    row.updated_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info(
        f"Recommendations regenerated ({len(recommendations)})",
        extra={"user_id": str(user.id)},
    )
    return row
