"""Catalog Schemas — subjects, searchable subtopic options and learning resources."""

from pydantic import BaseModel


class SubtopicOut(BaseModel):
    id: str
    title: str
    description: str


class SubjectOut(BaseModel):
    slug: str
    title: str
    subtopics: list[SubtopicOut]


class SubtopicOptionOut(BaseModel):
    subject_slug: str
    subject_title: str
    subtopic_id: str
    subtopic_title: str


class LearningResource(BaseModel):
    title: str
    url: str
    note: str


class ResourcesResponse(BaseModel):
    subject_title: str
    topic_title: str
    resources: list[LearningResource]
