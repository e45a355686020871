"""Time Slots — pure operations on an availability's list of slot labels.

Invariants:
    - A slot label is "H:MM AM" / "H:MM PM": no leading zero on the hour, upper-case period
    - Every list returned here is a new list, chronologically sorted where noted
    - Ordering is by clock time, never by string comparison
"""

from datetime import date, datetime, time
from collections.abc import Iterable

from tutor_network.core.domain_types import SlotLabel

GRID_START_HOUR = 8
GRID_END_HOUR = 20
GRID_STEP_MINUTES = 30

DEFAULT_TIME_SLOTS: tuple[str, ...] = (
    "9:00 AM", "10:00 AM", "11:00 AM",
    "1:00 PM", "2:00 PM", "3:00 PM", "4:00 PM",
)


def format_slot(value: time) -> SlotLabel:
    """Render a clock time as a canonical slot label."""
    period = "PM" if value.hour >= 12 else "AM"
    hour = value.hour % 12 or 12
    return SlotLabel(f"{hour}:{value.minute:02d} {period}")


def generate_time_slots() -> list[SlotLabel]:
    """Slot grid offered to tutors: 8:00 AM through 8:30 PM every 30 minutes."""
    return [
        format_slot(time(hour, minute))
        for hour in range(GRID_START_HOUR, GRID_END_HOUR + 1)
        for minute in range(0, 60, GRID_STEP_MINUTES)
    ]


def parse_slot(label: str) -> time:
    """Parse a slot label into a clock time. Raises ValueError on bad input."""
    if not isinstance(label, str):
        raise ValueError(f"slot must be a string, got {type(label).__name__}")
    cleaned = " ".join(label.split()).upper()
    try:
        return datetime.strptime(cleaned, "%I:%M %p").time()
    except ValueError:
        raise ValueError(
            f"invalid time slot '{label}' (expected e.g. '2:00 PM')",
        ) from None


def normalize_slot(label: str) -> SlotLabel:
    """'02:00 pm' -> '2:00 PM'."""
    return format_slot(parse_slot(label))


def sort_slots(slots: Iterable[str]) -> list[SlotLabel]:
    """Normalize, de-duplicate and order slots by clock time."""
    unique = {normalize_slot(s) for s in slots}
    return sorted(unique, key=parse_slot)


def remove_slot(slots: Iterable[str], slot: str) -> list[str]:
    """Slots without the given one (compared in canonical form)."""
    target = normalize_slot(slot)
    return [s for s in slots if normalize_slot(s) != target]


def restore_slot(slots: Iterable[str], slot: str) -> list[SlotLabel]:
    """Slots with the given one put back, chronologically sorted."""
    return sort_slots([*slots, slot])


def contains_slot(slots: Iterable[str], slot: str) -> bool:
    target = normalize_slot(slot)
    return any(normalize_slot(s) == target for s in slots)


def open_slots(slots: Iterable[str], booked: Iterable[str]) -> list[str]:
    """Slots that are not held by a booking."""
    taken = {normalize_slot(b) for b in booked}
    return [s for s in slots if normalize_slot(s) not in taken]


def slot_sort_key(day: date, slot: str) -> tuple[date, time]:
    """Chronological key for (date, slot) pairs such as bookings."""
    try:
        return day, parse_slot(slot)
    except ValueError:
        # Unparseable legacy labels sort last within their day
        return day, time.max
