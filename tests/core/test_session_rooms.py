"""Session Rooms — identifiers derived from a booking id."""

from uuid import UUID

from tutor_network.core.session_rooms import (
    meeting_room_name, meeting_url, pad_name, pad_url,
)

BOOKING_ID = UUID("6f1c2d3e-4b5a-4c7d-8e9f-0a1b2c3d4e5f")


def test_meeting_room_strips_non_alphanumerics():
    assert meeting_room_name(BOOKING_ID) == "6f1c2d3e4b5a4c7d8e9f0a1b2c3d4e5f"
    assert meeting_room_name("---") == "session"


def test_meeting_url():
    assert meeting_url("meet.jit.si", BOOKING_ID) == (
        "https://meet.jit.si/6f1c2d3e4b5a4c7d8e9f0a1b2c3d4e5f"
    )


def test_pad_name_keeps_dashes_and_underscores():
    assert pad_name(BOOKING_ID) == str(BOOKING_ID)
    assert pad_name("a b/c_d") == "a_b_c_d"


def test_pad_url_disables_chat_and_line_numbers():
    assert pad_url("https://pad.example.org/", "abc") == (
        "https://pad.example.org/p/abc?showChat=false&showLineNumbers=false"
    )


def test_both_participants_derive_the_same_room():
    assert meeting_room_name(str(BOOKING_ID)) == meeting_room_name(BOOKING_ID)
