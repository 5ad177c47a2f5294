"""Booking ORM models."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mockrise.core.database import Base, BaseModelMixin, enum_type
from mockrise.core.enums import (
    AISessionStatusEnum,
    DifficultyEnum,
    InterviewModeEnum,
    InterviewStatusEnum,
    LanguageEnum,
)

if TYPE_CHECKING:
    from mockrise.modules.identity.models import User


def default_consent_flags() -> dict:
    return {"recording": False, "dataUsage": False}


class Interview(BaseModelMixin, Base):
    """Mock interview booked by a trainee."""

    __tablename__ = "interviews"
    __table_args__ = (
        CheckConstraint("duration IN (30, 45, 60, 90)", name="duration_allowed"),
        CheckConstraint("time_slot >= 0 AND time_slot < 1440", name="time_of_day"),
    )

    mode: Mapped[InterviewModeEnum] = mapped_column(
        enum_type(InterviewModeEnum, "interview_mode_enum"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    interviewer_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    time_slot: Mapped[int] = mapped_column(Integer, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    language: Mapped[LanguageEnum] = mapped_column(
        enum_type(LanguageEnum, "language_enum"),
        nullable=False,
    )
    difficulty: Mapped[DifficultyEnum] = mapped_column(
        enum_type(DifficultyEnum, "difficulty_enum"),
        default=DifficultyEnum.INTERMEDIATE,
        nullable=False,
    )
    focus_area: Mapped[str | None] = mapped_column(String(255), nullable=True)
    consent_flags: Mapped[dict] = mapped_column(JSONB, default=default_consent_flags, nullable=False)
    status: Mapped[InterviewStatusEnum] = mapped_column(
        enum_type(InterviewStatusEnum, "interview_status_enum"),
        default=InterviewStatusEnum.SCHEDULED,
        nullable=False,
        index=True,
    )
    meeting_link: Mapped[str | None] = mapped_column(String(512), nullable=True)
    session_id: Mapped[str | None] = mapped_column(String(128), nullable=True, unique=True)
    # "metadata" is reserved on declarative classes.
    details: Mapped[dict | None] = mapped_column("metadata", JSONB, nullable=True)

    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    trainee: Mapped["User"] = relationship(foreign_keys=[user_id])
    interviewer: Mapped["User | None"] = relationship(foreign_keys=[interviewer_id])
    ai_session: Mapped["AISession | None"] = relationship(back_populates="interview", uselist=False)


class AISession(BaseModelMixin, Base):
    """AI interviewer session prepared for an ``ai`` booking."""

    __tablename__ = "ai_sessions"

    interview_id: Mapped[UUID] = mapped_column(
        ForeignKey("interviews.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    specialty: Mapped[str | None] = mapped_column(String(255), nullable=True)
    difficulty: Mapped[DifficultyEnum] = mapped_column(
        enum_type(DifficultyEnum, "difficulty_enum"),
        default=DifficultyEnum.INTERMEDIATE,
        nullable=False,
    )
    language: Mapped[LanguageEnum] = mapped_column(
        enum_type(LanguageEnum, "language_enum"),
        nullable=False,
    )
    status: Mapped[AISessionStatusEnum] = mapped_column(
        enum_type(AISessionStatusEnum, "ai_session_status_enum"),
        default=AISessionStatusEnum.INITIALIZED,
        nullable=False,
    )
    configuration: Mapped[dict] = mapped_column(JSONB, default=dict, nullable=False)
    metrics: Mapped[dict] = mapped_column(JSONB, default=dict, nullable=False)
    transcript: Mapped[list] = mapped_column(JSONB, default=list, nullable=False)

    interview: Mapped[Interview] = relationship(back_populates="ai_session")
