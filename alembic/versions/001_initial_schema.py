"""Initial schema — users, tutor_subjects, availabilities, bookings, questionnaires.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("username", sa.String(50), nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("avatar_url", sa.String(1000), nullable=True),
        sa.Column("contact_info", sa.String(500), nullable=True),
        sa.Column("user_type", sa.String(20), nullable=False, server_default="student"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "tutor_subjects",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tutor_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("subject_slug", sa.String(50), nullable=False),
        sa.Column("subtopic_id", sa.String(50), nullable=False),
        sa.UniqueConstraint(
            "tutor_id", "subject_slug", "subtopic_id",
            name="uq_tutor_subjects_tutor_subtopic",
        ),
    )
    op.create_index("ix_tutor_subjects_tutor_id", "tutor_subjects", ["tutor_id"])

    op.create_table(
        "availabilities",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tutor_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time_slots", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("tutor_id", "date", name="uq_availabilities_tutor_date"),
    )
    op.create_index("ix_availabilities_tutor_id", "availabilities", ["tutor_id"])

    op.create_table(
        "bookings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "availability_id", UUID(as_uuid=True),
            sa.ForeignKey("availabilities.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("tutor_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("student_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        sa.Column("subject_slug", sa.String(50), nullable=True),
        sa.Column("subtopic_title", sa.String(200), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("notes_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_bookings_tutor_id", "bookings", ["tutor_id"])
    op.create_index("ix_bookings_student_id", "bookings", ["student_id"])
    # One confirmed booking per tutor slot; cancelled rows stay for history
    op.create_index(
        "uq_bookings_confirmed_slot", "bookings", ["tutor_id", "date", "time"],
        unique=True, postgresql_where=sa.text("status = 'confirmed'"),
    )

    op.create_table(
        "questionnaires",
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("answers", sa.JSON, nullable=False),
        sa.Column("recommendations", sa.JSON, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("questionnaires")
    op.drop_index("uq_bookings_confirmed_slot", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("availabilities")
    op.drop_table("tutor_subjects")
    op.drop_table("users")
