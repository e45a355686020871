"""Availability Schemas — tutor slot publishing.

Invariants:
    - Slot labels are normalized ("02:00 pm" -> "2:00 PM"), de-duplicated and
      sorted by clock time at the boundary
    - AvailabilityReplace requires at least one slot
"""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from tutor_network.core.time_slots import sort_slots


class AvailabilityCreate(BaseModel):
    """time_slots omitted -> the default quick-create slots."""
    date: dt.date
    time_slots: list[str] | None = Field(None, max_length=48)

    @field_validator("time_slots")
    @classmethod
    def normalize(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        slots = sort_slots(v)
        if not slots:
            raise ValueError("Select at least one time slot.")
        return slots


class AvailabilityReplace(BaseModel):
    time_slots: list[str] = Field(min_length=1, max_length=48)

    @field_validator("time_slots")
    @classmethod
    def normalize(cls, v: list[str]) -> list[str]:
        return sort_slots(v)


class AvailabilityResponse(BaseModel):
    id: UUID
    tutor_id: UUID
    tutor_name: str | None = None
    date: dt.date
    time_slots: list[str]
    created_at: dt.datetime
