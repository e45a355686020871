"""TutorSubject ORM — one catalog subtopic a tutor teaches."""

import uuid

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from tutor_network.db.base import Base


class TutorSubject(Base):
    __tablename__ = "tutor_subjects"
    __table_args__ = (
        UniqueConstraint(
            "tutor_id", "subject_slug", "subtopic_id",
            name="uq_tutor_subjects_tutor_subtopic",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    tutor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    subject_slug: Mapped[str] = mapped_column(String(50), nullable=False)
    subtopic_id: Mapped[str] = mapped_column(String(50), nullable=False)
