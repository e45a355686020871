"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, AvailabilityId, BookingId wrap UUIDs
    - All valid states encoded as str Enums — no raw string matching in services
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
AvailabilityId = NewType("AvailabilityId", UUID)
BookingId = NewType("BookingId", UUID)

# "2:00 PM" — canonical form produced by core.time_slots.normalize_slot
SlotLabel = NewType("SlotLabel", str)


# ─── Enums ───────────────────────────────────────────────────────

class UserType(str, Enum):
    """Account role — maps to users.user_type."""
    STUDENT = "student"
    TUTOR = "tutor"


class BookingStatus(str, Enum):
    """Booking lifecycle — confirmed on claim, cancelled on cancel."""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class HelpType(str, Enum):
    """Questionnaire: kind of help the student wants."""
    HOMEWORK = "Homework help"
    CONCEPTS = "Understanding concepts"
    TEST_PREP = "Test prep"
    ADVANCED = "Advanced placement"


class CurrentLevel(str, Enum):
    """Questionnaire: self-reported standing."""
    STRUGGLING = "Struggling a lot"
    BEHIND = "A little behind"
    ON_TRACK = "On track"
    CHALLENGE = "Want a challenge"
