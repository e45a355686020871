"""Availability ORM — a tutor's open slots for one date.

Invariants:
    - At most one row per (tutor_id, date)
    - time_slots holds canonical slot labels in chronological order
    - A row whose last slot is claimed is deleted, never left empty

Design Decisions:
    - JSON column for time_slots: the list is always rewritten as a whole
      (assign a new list; in-place mutation is not tracked)
"""

import datetime as dt
import uuid

from sqlalchemy import Date, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from tutor_network.db.base import Base


class Availability(Base):
    __tablename__ = "availabilities"
    __table_args__ = (
        UniqueConstraint("tutor_id", "date", name="uq_availabilities_tutor_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    tutor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time_slots: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(dt.timezone.utc),
    )
