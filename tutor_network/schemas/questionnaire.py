"""Questionnaire Schemas — study-preference answers and AI recommendations.

Invariants:
    - Every answer is optional; blank answers become None
    - helpType and currentLevel accept only the offered choices
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tutor_network.core.domain_types import CurrentLevel, HelpType
from tutor_network.schemas._text import blank_to_none


class QuestionnaireAnswers(BaseModel):
    """Field names match the questionnaire form keys."""
    model_config = ConfigDict(extra="ignore")

    gradeLevel: str | None = Field(None, max_length=100)
    favoriteSubjects: str | None = Field(None, max_length=1000)
    strugglingSubjects: str | None = Field(None, max_length=1000)
    specificNeeds: str | None = Field(None, max_length=2000)
    helpType: HelpType | None = None
    currentLevel: CurrentLevel | None = None
    learningBest: str | None = Field(None, max_length=1000)
    specificWants: str | None = Field(None, max_length=2000)
    extraNotes: str | None = Field(None, max_length=2000)

    @field_validator("*", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return blank_to_none(v)


class QuestionnaireSubmit(BaseModel):
    answers: QuestionnaireAnswers


class Recommendation(BaseModel):
    subject_slug: str
    subtopic_id: str
    reason: str
    subject_title: str | None = None
    subtopic_title: str | None = None


class QuestionnaireResponse(BaseModel):
    answers: QuestionnaireAnswers
    recommendations: list[Recommendation] | None = None
    recommendation_error: str | None = None
    updated_at: datetime


class RecommendationsResponse(BaseModel):
    recommendations: list[Recommendation]
    error: str | None = None
