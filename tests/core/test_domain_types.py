"""Domain Types — identity wrappers and enum values stored in the database."""

from uuid import uuid4

from tutor_network.core.domain_types import (
    AvailabilityId, BookingId, BookingStatus, CurrentLevel, HelpType,
    SlotLabel, UserId, UserType,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert UserId(uid) == uid
    assert AvailabilityId(uid) == uid
    assert BookingId(uid) == uid
    assert SlotLabel("2:00 PM") == "2:00 PM"


def test_stored_enum_values():
    assert {t.value for t in UserType} == {"student", "tutor"}
    assert {s.value for s in BookingStatus} == {"confirmed", "cancelled"}


def test_questionnaire_choices():
    assert HelpType("Test prep") is HelpType.TEST_PREP
    assert [c.value for c in CurrentLevel] == [
        "Struggling a lot", "A little behind", "On track", "Want a challenge",
    ]
