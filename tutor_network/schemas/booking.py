"""Booking Schemas — claims, calendar events, contacts, notes and session rooms.

Invariants:
    - BookingCreate.time is normalized to the canonical slot label
    - NotesUpdate: blank notes become None (clears the notes)
"""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from tutor_network.core.time_slots import normalize_slot
from tutor_network.schemas._text import blank_to_none


class BookingCreate(BaseModel):
    availability_id: UUID
    time: str = Field(min_length=1, max_length=20)
    subject_slug: str | None = Field(None, max_length=50)
    subtopic_title: str | None = Field(None, max_length=200)

    @field_validator("time")
    @classmethod
    def canonical_time(cls, v: str) -> str:
        return normalize_slot(v)

    @field_validator("subject_slug", "subtopic_title", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return blank_to_none(v)


class BookingResponse(BaseModel):
    id: UUID
    availability_id: UUID | None
    tutor_id: UUID
    tutor_name: str
    student_id: UUID
    student_name: str
    date: dt.date
    time: str
    status: str
    subject_slug: str | None = None
    subtopic_title: str | None = None
    created_at: dt.datetime
    cancelled_at: dt.datetime | None = None


class CalendarEvent(BaseModel):
    """One confirmed booking seen from the caller's side."""
    id: UUID
    title: str
    date: dt.date
    time: str
    other_party_id: UUID
    other_party_name: str
    subject_slug: str | None = None
    subtopic_title: str | None = None


class Contact(BaseModel):
    id: UUID
    full_name: str
    avatar_url: str | None = None
    email: str
    contact_info: str | None = None


class NotesUpdate(BaseModel):
    notes: str | None = Field(None, max_length=50_000)

    @field_validator("notes", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return blank_to_none(v)


class NotesResponse(BaseModel):
    booking_id: UUID
    notes: str | None
    notes_updated_at: dt.datetime | None


class NotesEntry(BaseModel):
    """Row of the notes history page."""
    booking_id: UUID
    date: dt.date
    time: str
    status: str
    other_party_name: str
    topic: str | None
    notes: str
    notes_updated_at: dt.datetime | None


class SummarizeRequest(BaseModel):
    content: str = Field(max_length=50_000)


class SummaryResponse(BaseModel):
    summary: str


class SessionRoomResponse(BaseModel):
    booking_id: UUID
    meeting_room: str
    meeting_url: str
    notes_pad_url: str
    whiteboard_url: str
    notes: str | None
    notes_updated_at: dt.datetime | None
    other_party_name: str
    date: dt.date
    time: str
    topic: str | None
