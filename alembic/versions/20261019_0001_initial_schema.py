"""Initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


role_enum = sa.Enum("trainee", "interviewer", "admin", name="role_enum", native_enum=False)
user_status_enum = sa.Enum(
    "pending_verification", "approved", "rejected", name="user_status_enum", native_enum=False
)
interview_mode_enum = sa.Enum("ai", "peer", "family", "live", name="interview_mode_enum", native_enum=False)
interview_status_enum = sa.Enum(
    "scheduled", "in_progress", "completed", "cancelled", "no_show", name="interview_status_enum", native_enum=False
)
language_enum = sa.Enum("english", "arabic", name="language_enum", native_enum=False)
difficulty_enum = sa.Enum(
    "beginner", "intermediate", "advanced", "expert", name="difficulty_enum", native_enum=False
)
ai_session_status_enum = sa.Enum(
    "initialized", "in_progress", "completed", "abandoned", name="ai_session_status_enum", native_enum=False
)
notification_type_enum = sa.Enum(
    "success", "warning", "info", "error", name="notification_type_enum", native_enum=False
)
outbox_status_enum = sa.Enum("pending", "processed", "failed", name="outbox_status_enum", native_enum=False)


def _id_col() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("status", user_status_enum, nullable=False),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=False)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "interviews",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("mode", interview_mode_enum, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("interviewer_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.Integer(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("language", language_enum, nullable=False),
        sa.Column("difficulty", difficulty_enum, nullable=False),
        sa.Column("focus_area", sa.String(length=255), nullable=True),
        sa.Column("consent_flags", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("status", interview_status_enum, nullable=False),
        sa.Column("meeting_link", sa.String(length=512), nullable=True),
        sa.Column("session_id", sa.String(length=128), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.CheckConstraint("duration IN (30, 45, 60, 90)", name="ck_interviews_duration_allowed"),
        sa.CheckConstraint("time_slot >= 0 AND time_slot < 1440", name="ck_interviews_time_of_day"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_interviews_user_id_users", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["interviewer_id"],
            ["users.id"],
            name="fk_interviews_interviewer_id_users",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("session_id", name="uq_interviews_session_id"),
    )
    op.create_index("ix_interviews_mode", "interviews", ["mode"], unique=False)
    op.create_index("ix_interviews_user_id", "interviews", ["user_id"], unique=False)
    op.create_index("ix_interviews_interviewer_id", "interviews", ["interviewer_id"], unique=False)
    op.create_index("ix_interviews_scheduled_date", "interviews", ["scheduled_date"], unique=False)
    op.create_index("ix_interviews_status", "interviews", ["status"], unique=False)

    op.create_table(
        "ai_sessions",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("interview_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("session_id", sa.String(length=128), nullable=False),
        sa.Column("specialty", sa.String(length=255), nullable=True),
        sa.Column("difficulty", difficulty_enum, nullable=False),
        sa.Column("language", language_enum, nullable=False),
        sa.Column("status", ai_session_status_enum, nullable=False),
        sa.Column("configuration", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("metrics", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("transcript", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.ForeignKeyConstraint(
            ["interview_id"],
            ["interviews.id"],
            name="fk_ai_sessions_interview_id_interviews",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_ai_sessions_user_id_users", ondelete="CASCADE"),
        sa.UniqueConstraint("interview_id", name="uq_ai_sessions_interview_id"),
        sa.UniqueConstraint("session_id", name="uq_ai_sessions_session_id"),
    )
    op.create_index("ix_ai_sessions_user_id", "ai_sessions", ["user_id"], unique=False)

    op.create_table(
        "available_slots",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("interviewer_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.Integer(), nullable=False),
        sa.Column("mode", interview_mode_enum, nullable=False),
        sa.Column("is_booked", sa.Boolean(), nullable=False),
        sa.Column("interview_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint("time >= 0 AND time < 1440", name="ck_available_slots_time_of_day"),
        sa.CheckConstraint(
            "(is_booked AND interview_id IS NOT NULL) OR (NOT is_booked AND interview_id IS NULL)",
            name="ck_available_slots_booked_link",
        ),
        sa.ForeignKeyConstraint(
            ["interviewer_id"],
            ["users.id"],
            name="fk_available_slots_interviewer_id_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["interview_id"],
            ["interviews.id"],
            name="fk_available_slots_interview_id_interviews",
            ondelete="RESTRICT",
        ),
        sa.UniqueConstraint(
            "interviewer_id",
            "date",
            "time",
            "mode",
            name="uq_available_slots_owner_day_time_mode",
        ),
    )
    op.create_index("ix_available_slots_interviewer_id", "available_slots", ["interviewer_id"], unique=False)
    op.create_index("ix_available_slots_date", "available_slots", ["date"], unique=False)
    op.create_index("ix_available_slots_mode", "available_slots", ["mode"], unique=False)
    op.create_index("ix_available_slots_is_booked", "available_slots", ["is_booked"], unique=False)

    op.create_table(
        "notifications",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", notification_type_enum, nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_notifications_user_id_users", ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"], unique=False)
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"], unique=False)

    op.create_table(
        "outbox_events",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("aggregate_type", sa.String(length=64), nullable=False),
        sa.Column("aggregate_id", sa.String(length=64), nullable=False),
        sa.Column("event_type", sa.String(length=128), nullable=False),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("status", outbox_status_enum, nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("retries", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
    )
    op.create_index("ix_outbox_events_aggregate_type", "outbox_events", ["aggregate_type"], unique=False)
    op.create_index("ix_outbox_events_aggregate_id", "outbox_events", ["aggregate_id"], unique=False)
    op.create_index("ix_outbox_events_event_type", "outbox_events", ["event_type"], unique=False)
    op.create_index("ix_outbox_events_status", "outbox_events", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_outbox_events_status", table_name="outbox_events")
    op.drop_index("ix_outbox_events_event_type", table_name="outbox_events")
    op.drop_index("ix_outbox_events_aggregate_id", table_name="outbox_events")
    op.drop_index("ix_outbox_events_aggregate_type", table_name="outbox_events")
    op.drop_table("outbox_events")

    op.drop_index("ix_notifications_is_read", table_name="notifications")
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")

    op.drop_index("ix_available_slots_is_booked", table_name="available_slots")
    op.drop_index("ix_available_slots_mode", table_name="available_slots")
    op.drop_index("ix_available_slots_date", table_name="available_slots")
    op.drop_index("ix_available_slots_interviewer_id", table_name="available_slots")
    op.drop_table("available_slots")

    op.drop_index("ix_ai_sessions_user_id", table_name="ai_sessions")
    op.drop_table("ai_sessions")

    op.drop_index("ix_interviews_status", table_name="interviews")
    op.drop_index("ix_interviews_scheduled_date", table_name="interviews")
    op.drop_index("ix_interviews_interviewer_id", table_name="interviews")
    op.drop_index("ix_interviews_user_id", table_name="interviews")
    op.drop_index("ix_interviews_mode", table_name="interviews")
    op.drop_table("interviews")

    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
