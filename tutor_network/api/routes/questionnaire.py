"""Questionnaire Routes — save answers, read them back, and get subtopic recommendations.

Invariants:
    - PUT saves answers even when recommendations cannot be produced
    - POST /recommendations (stateless) reports an empty result as 200 with an error message
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.api.dependencies import (
    get_current_user, get_llm_client, require_student,
)
from tutor_network.config import Settings, get_settings
from tutor_network.infrastructure.anthropic_client import ResilientAnthropicClient
from tutor_network.infrastructure.database import get_db
from tutor_network.models.questionnaire import Questionnaire
from tutor_network.models.user import User
from tutor_network.schemas.questionnaire import (
    QuestionnaireAnswers,
    QuestionnaireResponse,
    QuestionnaireSubmit,
    RecommendationsResponse,
)
from tutor_network.services import ai_assist, questionnaires

router = APIRouter(prefix="/api/v1", tags=["questionnaire"])


def _response(row: Questionnaire, error: str | None = None) -> QuestionnaireResponse:
    return QuestionnaireResponse(
        answers=QuestionnaireAnswers.model_validate(row.answers),
        recommendations=row.recommendations,
        recommendation_error=error,
        updated_at=row.updated_at,
    )


@router.get("/questionnaire", response_model=QuestionnaireResponse)
async def get_questionnaire(
    student: User = Depends(require_student), db: AsyncSession = Depends(get_db),
):
    return _response(await questionnaires.get_questionnaire(db, student))


@router.put("/questionnaire", response_model=QuestionnaireResponse)
async def save_questionnaire(
    body: QuestionnaireSubmit,
    student: User = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    llm: ResilientAnthropicClient | None = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    row, error = await questionnaires.save_answers(
        db, llm, settings, student,
        body.answers.model_dump(mode="json", exclude_none=True),
    )
    return _response(row, error)


@router.post("/questionnaire/recommendations", response_model=QuestionnaireResponse)
async def regenerate_recommendations(
    student: User = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    llm: ResilientAnthropicClient | None = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    row = await questionnaires.regenerate_recommendations(db, llm, settings, student)
    error = None if row.recommendations else ai_assist.NO_RECOMMENDATIONS_MESSAGE
    return _response(row, error)


@router.post("/recommendations", response_model=RecommendationsResponse)
async def recommend(
    body: QuestionnaireSubmit,
    user: User = Depends(get_current_user),
    llm: ResilientAnthropicClient | None = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    recommendations = await ai_assist.recommend_subtopics(
        llm, settings,
        body.answers.model_dump(mode="json", exclude_none=True),
        str(user.id),
    )
    if not recommendations:
        return RecommendationsResponse(
            recommendations=[], error=ai_assist.NO_RECOMMENDATIONS_MESSAGE,
        )
    return RecommendationsResponse(recommendations=recommendations)
