"""Session Rooms — derives third-party room identifiers from a booking id.

Invariants:
    - Tutor and student of a booking always derive the same room and pad
    - Pure string functions; the embeds themselves are hosted elsewhere
"""

import re
from uuid import UUID

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_NON_PAD_SAFE = re.compile(r"[^a-zA-Z0-9_-]")


def meeting_room_name(booking_id: UUID | str) -> str:
    """Video room name: booking id with every non-alphanumeric character removed."""
    return _NON_ALNUM.sub("", str(booking_id)) or "session"


def meeting_url(domain: str, booking_id: UUID | str) -> str:
    return f"https://{domain.strip('/')}/{meeting_room_name(booking_id)}"


def pad_name(booking_id: UUID | str) -> str:
    """Collaborative notes pad name: unsafe characters replaced by '_'."""
    return _NON_PAD_SAFE.sub("_", str(booking_id))


def pad_url(base_url: str, booking_id: UUID | str) -> str:
    return (
        f"{base_url.rstrip('/')}/p/{pad_name(booking_id)}"
        "?showChat=false&showLineNumbers=false"
    )
