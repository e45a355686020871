"""Booking ORM — one claimed slot pairing a tutor and a student.

Invariants:
    - At most one confirmed booking per (tutor_id, date, time), enforced by a
      partial unique index; cancelled rows are kept for history and notes
    - availability_id is informational and becomes NULL once the source
      availability row is deleted
    - status transitions: confirmed -> cancelled (terminal)
"""

import datetime as dt
import uuid

from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tutor_network.db.base import Base

_CONFIRMED_ONLY = text("status = 'confirmed'")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index(
            "uq_bookings_confirmed_slot", "tutor_id", "date", "time",
            unique=True,
            postgresql_where=_CONFIRMED_ONLY,
            sqlite_where=_CONFIRMED_ONLY,
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    availability_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("availabilities.id", ondelete="SET NULL"),
        nullable=True,
    )
    tutor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="confirmed",
    )
    subject_slug: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subtopic_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes_updated_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(dt.timezone.utc),
    )
    cancelled_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    tutor: Mapped["User"] = relationship(
        "User", foreign_keys=[tutor_id], lazy="joined", innerjoin=True,
    )
    student: Mapped["User"] = relationship(
        "User", foreign_keys=[student_id], lazy="joined", innerjoin=True,
    )
