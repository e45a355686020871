"""Booking Ledger — the one place where tutor slot inventory and bookings are reconciled.

Invariants:
    - A claimed slot leaves the availability and becomes a confirmed booking in
      the same transaction; the availability row is deleted with its last slot
    - At most one confirmed booking per (tutor, date, time): the availability row
      is locked FOR UPDATE and the partial unique index rejects any duplicate
      that slips past the lock
    - Cancelling a booking dated today or later puts its slot back, recreating
      the availability row when needed (an upsert, so concurrent recreations
      merge into one row)
    - Slot lists are rewritten only while their row is locked; bookings are
      read after the lock is taken
    - Stored slot lists are canonical, chronologically sorted, and never contain
      a slot held by a confirmed booking
    - JSON slot lists are always reassigned, never mutated in place

Design Decisions:
    - Functions take the caller's session and commit themselves: every mutation
      here is one unit of work, and routes stay thin
    - `today` is injectable so date rules are testable without freezing time
"""

import datetime as dt
import logging
from uuid import UUID

from sqlalchemy import select, update, or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.core.domain_types import BookingStatus, UserType
from tutor_network.core.errors import (
    AvailabilityExistsError,
    BookingNotActiveError,
    BusinessRuleError,
    ErrorContext,
    PermissionDeniedError,
    ResourceNotFoundError,
    SlotUnavailableError,
)
from tutor_network.core.time_slots import (
    DEFAULT_TIME_SLOTS,
    contains_slot,
    normalize_slot,
    open_slots,
    remove_slot,
    restore_slot,
    slot_sort_key,
    sort_slots,
)
from tutor_network.models.availability import Availability
from tutor_network.models.booking import Booking
from tutor_network.models.user import User

logger = logging.getLogger(__name__)


def current_date() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


# ─── Claim / Cancel ──────────────────────────────────────────────

async def claim_slot(
    db: AsyncSession,
    student: User,
    availability_id: UUID,
    time: str,
    subject_slug: str | None = None,
    subtopic_title: str | None = None,
    *,
    today: dt.date | None = None,
) -> Booking:
    """Atomically move one slot out of an availability into a confirmed booking.

    Losing a race for the last slot of a day yields 404, not 409: the winner
    deleted the availability, and its id is all the request names.
    """
    if student.user_type != UserType.STUDENT.value:
        raise PermissionDeniedError("Only students can book sessions")
    today = today or current_date()
    slot = normalize_slot(time)
    ctx = ErrorContext(user_id=str(student.id), availability_id=str(availability_id))

    availability = (await db.execute(
        select(Availability)
        .where(Availability.id == availability_id)
        .with_for_update(),
    )).scalar_one_or_none()
    if availability is None:
        raise ResourceNotFoundError("Availability", str(availability_id), ctx)
    day = availability.date
    if day < today:
        raise BusinessRuleError("Cannot book a session in the past", ctx)
    if not contains_slot(availability.time_slots, slot):
        raise SlotUnavailableError(day.isoformat(), slot, ctx)

    booking = Booking(
        availability_id=availability.id,
        tutor_id=availability.tutor_id,
        student_id=student.id,
        date=availability.date,
        time=slot,
        status=BookingStatus.CONFIRMED.value,
        subject_slug=subject_slug,
        subtopic_title=subtopic_title,
    )
    db.add(booking)
    try:
        await db.flush()
    except IntegrityError:
        # rollback expires loaded rows; only plain values are used below
        await db.rollback()
        logger.warning(
            f"Concurrent claim rejected for {slot} on {day}",
            extra={"availability_id": str(availability_id)},
        )
        raise SlotUnavailableError(day.isoformat(), slot, ctx)

    remaining = remove_slot(availability.time_slots, slot)
    if remaining:
        availability.time_slots = remaining
    else:
        booking.availability_id = None
        await db.delete(availability)
    await db.commit()

    logger.info(
        f"Slot {slot} on {booking.date} claimed",
        extra={
            "booking_id": str(booking.id),
            "user_id": str(student.id),
            "availability_id": str(availability_id),
        },
    )
    return await get_booking(db, booking.id)


async def cancel_booking(
    db: AsyncSession, user: User, booking_id: UUID, *, today: dt.date | None = None,
) -> Booking:
    """Cancel a confirmed booking and republish its slot when it is not in the past."""
    today = today or current_date()
    booking = await _lock_booking(db, booking_id)
    _ensure_participant(booking, user)
    if booking.status != BookingStatus.CONFIRMED.value:
        raise BookingNotActiveError(
            str(booking_id), ErrorContext(booking_id=str(booking_id)),
        )

    booking.status = BookingStatus.CANCELLED.value
    booking.cancelled_at = _now()

    if booking.date >= today:
        availability = await _lock_or_create_availability(
            db, booking.tutor_id, booking.date,
        )
        availability.time_slots = restore_slot(availability.time_slots, booking.time)
    await db.commit()

    logger.info(
        f"Booking cancelled ({booking.time} on {booking.date})",
        extra={"booking_id": str(booking_id), "user_id": str(user.id)},
    )
    return await get_booking(db, booking_id)


# ─── Availability Writes ─────────────────────────────────────────

async def publish_availability(
    db: AsyncSession,
    tutor: User,
    date: dt.date,
    time_slots: list[str] | None = None,
    *,
    today: dt.date | None = None,
) -> Availability:
    """Create the tutor's availability for a date (default slots when none given)."""
    _ensure_tutor(tutor)
    _ensure_not_past(date, today or current_date())
    if await _lock_availability(db, tutor.id, date) is not None:
        raise AvailabilityExistsError(date.isoformat())

    slots = await _unbooked(db, tutor.id, date, time_slots or list(DEFAULT_TIME_SLOTS))
    availability = Availability(tutor_id=tutor.id, date=date, time_slots=slots)
    db.add(availability)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise AvailabilityExistsError(date.isoformat())
    await db.commit()
    logger.info(
        f"Availability published for {date} ({len(slots)} slots)",
        extra={"user_id": str(tutor.id), "availability_id": str(availability.id)},
    )
    return availability


async def replace_availability(
    db: AsyncSession,
    tutor: User,
    date: dt.date,
    time_slots: list[str],
    *,
    today: dt.date | None = None,
) -> Availability:
    """Replace the open slots for a date, creating the row if it does not exist."""
    _ensure_tutor(tutor)
    _ensure_not_past(date, today or current_date())
    if not time_slots:
        raise BusinessRuleError("Select at least one time slot")

    # bookings are read only once the row is locked
    availability = await _lock_or_create_availability(db, tutor.id, date)
    slots = await _unbooked(db, tutor.id, date, time_slots)
    availability.time_slots = slots
    await db.commit()
    logger.info(
        f"Availability for {date} set to {len(slots)} slots",
        extra={"user_id": str(tutor.id), "availability_id": str(availability.id)},
    )
    return availability


async def withdraw_availability(db: AsyncSession, tutor: User, date: dt.date) -> None:
    """Delete the tutor's availability for a date. Existing bookings are kept."""
    _ensure_tutor(tutor)
    availability = await _lock_availability(db, tutor.id, date)
    if availability is None:
        raise ResourceNotFoundError("Availability", date.isoformat())
    await db.execute(
        update(Booking)
        .where(Booking.availability_id == availability.id)
        .values(availability_id=None),
    )
    await db.delete(availability)
    await db.commit()
    logger.info(
        f"Availability for {date} withdrawn",
        extra={"user_id": str(tutor.id), "availability_id": str(availability.id)},
    )


# ─── Reads ───────────────────────────────────────────────────────

async def list_open_availabilities(
    db: AsyncSession, tutor_id: UUID | None = None, *, today: dt.date | None = None,
) -> list[dict]:
    """Upcoming availabilities with only bookable slots; empty ones omitted."""
    today = today or current_date()
    query = (
        select(Availability, User.full_name)
        .join(User, User.id == Availability.tutor_id)
        .where(Availability.date >= today)
        .order_by(Availability.date, Availability.created_at)
    )
    booked_query = (
        select(Booking.tutor_id, Booking.date, Booking.time)
        .where(Booking.status == BookingStatus.CONFIRMED.value)
        .where(Booking.date >= today)
    )
    if tutor_id is not None:
        query = query.where(Availability.tutor_id == tutor_id)
        booked_query = booked_query.where(Booking.tutor_id == tutor_id)

    booked: dict[tuple[UUID, dt.date], list[str]] = {}
    for b_tutor, b_date, b_time in (await db.execute(booked_query)).all():
        booked.setdefault((b_tutor, b_date), []).append(b_time)

    result = []
    for availability, tutor_name in (await db.execute(query)).all():
        slots = open_slots(
            availability.time_slots,
            booked.get((availability.tutor_id, availability.date), []),
        )
        if not slots:
            continue
        result.append({
            "id": availability.id,
            "tutor_id": availability.tutor_id,
            "tutor_name": tutor_name,
            "date": availability.date,
            "time_slots": slots,
            "created_at": availability.created_at,
        })
    return result


async def get_booking(db: AsyncSession, booking_id: UUID) -> Booking:
    booking = (await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True),
    )).unique().scalar_one_or_none()
    if booking is None:
        raise ResourceNotFoundError("Booking", str(booking_id))
    return booking


async def get_booking_for_participant(
    db: AsyncSession, user: User, booking_id: UUID,
) -> Booking:
    booking = await get_booking(db, booking_id)
    _ensure_participant(booking, user)
    return booking


async def list_user_bookings(
    db: AsyncSession,
    user: User,
    *,
    confirmed_only: bool = True,
    from_date: dt.date | None = None,
) -> list[Booking]:
    """The caller's bookings, either side, in chronological order."""
    query = select(Booking).where(
        or_(Booking.student_id == user.id, Booking.tutor_id == user.id),
    )
    if confirmed_only:
        query = query.where(Booking.status == BookingStatus.CONFIRMED.value)
    if from_date is not None:
        query = query.where(Booking.date >= from_date)
    bookings = (await db.execute(query)).unique().scalars().all()
    return sorted(bookings, key=lambda b: slot_sort_key(b.date, b.time))


def other_party(booking: Booking, user: User) -> User:
    return booking.student if booking.tutor_id == user.id else booking.tutor


async def list_contacts(db: AsyncSession, user: User) -> list[User]:
    """Distinct counterparts from the caller's confirmed bookings, by name."""
    contacts: dict[UUID, User] = {}
    for booking in await list_user_bookings(db, user):
        party = other_party(booking, user)
        contacts.setdefault(party.id, party)
    return sorted(contacts.values(), key=lambda u: (u.full_name.lower(), str(u.id)))


async def update_notes(
    db: AsyncSession, user: User, booking_id: UUID, notes: str | None,
) -> Booking:
    booking = await get_booking_for_participant(db, user, booking_id)
    booking.notes = notes
    booking.notes_updated_at = _now()
    await db.commit()
    logger.info(
        "Session notes saved",
        extra={"booking_id": str(booking_id), "user_id": str(user.id)},
    )
    return booking


async def list_notes(db: AsyncSession, user: User) -> list[Booking]:
    """Bookings of any status that carry notes, newest session first."""
    bookings = await list_user_bookings(db, user, confirmed_only=False)
    return [b for b in reversed(bookings) if b.notes]


# ─── Helpers ─────────────────────────────────────────────────────

async def _lock_booking(db: AsyncSession, booking_id: UUID) -> Booking:
    booking = (await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .with_for_update(of=Booking),
    )).unique().scalar_one_or_none()
    if booking is None:
        raise ResourceNotFoundError("Booking", str(booking_id))
    return booking


async def _lock_availability(
    db: AsyncSession, tutor_id: UUID, date: dt.date,
) -> Availability | None:
    return (await db.execute(
        select(Availability)
        .where(Availability.tutor_id == tutor_id)
        .where(Availability.date == date)
        .with_for_update(),
    )).scalar_one_or_none()


async def _lock_or_create_availability(
    db: AsyncSession, tutor_id: UUID, date: dt.date,
) -> Availability:
    """Lock the (tutor, date) row, inserting an empty one first if it is missing.

    Concurrent creators collide on uq_availabilities_tutor_date; ON CONFLICT DO
    NOTHING makes the loser wait for the winner and then lock the winner's row.
    """
    availability = await _lock_availability(db, tutor_id, date)
    if availability is not None:
        return availability
    if db.get_bind().dialect.name == "postgresql":
        stmt = pg_insert(Availability)
    else:
        stmt = sqlite_insert(Availability)
    await db.execute(
        stmt.values(tutor_id=tutor_id, date=date, time_slots=[])
        .on_conflict_do_nothing(index_elements=["tutor_id", "date"]),
    )
    return (await db.execute(
        select(Availability)
        .where(Availability.tutor_id == tutor_id)
        .where(Availability.date == date)
        .with_for_update()
        .execution_options(populate_existing=True),
    )).scalar_one()


async def _unbooked(
    db: AsyncSession, tutor_id: UUID, date: dt.date, slots: list[str],
) -> list[str]:
    """Canonical slots minus those already held by a confirmed booking."""
    booked = (await db.execute(
        select(Booking.time)
        .where(Booking.tutor_id == tutor_id)
        .where(Booking.date == date)
        .where(Booking.status == BookingStatus.CONFIRMED.value),
    )).scalars().all()
    remaining = open_slots(sort_slots(slots), booked)
    if not remaining:
        raise BusinessRuleError("Every selected time slot is already booked")
    return remaining


def _ensure_participant(booking: Booking, user: User) -> None:
    if user.id not in (booking.tutor_id, booking.student_id):
        raise PermissionDeniedError(
            "You are not a participant in this booking",
            ErrorContext(user_id=str(user.id), booking_id=str(booking.id)),
        )


def _ensure_tutor(user: User) -> None:
    if user.user_type != UserType.TUTOR.value:
        raise PermissionDeniedError("Only tutors can manage availability")


def _ensure_not_past(date: dt.date, today: dt.date) -> None:
    if date < today:
        raise BusinessRuleError("Cannot set availability for a past date")
