"""Profile Schemas — editable profile fields and a tutor's taught subtopics.

Invariants:
    - Optional text fields: empty or whitespace-only input is stored as None
    - subtopics=None leaves the tutor's set untouched; a list (even empty) replaces it
"""

from pydantic import BaseModel, Field, field_validator

from tutor_network.schemas._text import blank_to_none
from tutor_network.schemas.auth import UserResponse


class SubtopicRef(BaseModel):
    subject_slug: str = Field(min_length=1, max_length=50)
    subtopic_id: str = Field(min_length=1, max_length=50)


class TaughtSubtopic(SubtopicRef):
    subject_title: str
    subtopic_title: str


class ProfileResponse(UserResponse):
    subtopics: list[TaughtSubtopic] = []


class ProfileUpdate(BaseModel):
    full_name: str = Field(min_length=1, max_length=200)
    username: str | None = Field(None, max_length=50)
    bio: str | None = Field(None, max_length=2000)
    avatar_url: str | None = Field(None, max_length=1000)
    contact_info: str | None = Field(None, max_length=500)
    subtopics: list[SubtopicRef] | None = None

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty or whitespace")
        return v

    @field_validator("username", "bio", "avatar_url", "contact_info", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return blank_to_none(v)


class TutorSummary(BaseModel):
    """Tutor card shown on a subject page."""
    id: str
    full_name: str
    username: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    subtopics: list[TaughtSubtopic] = []
