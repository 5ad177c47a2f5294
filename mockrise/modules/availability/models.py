"""Interviewer availability ORM models."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mockrise.core.database import Base, BaseModelMixin, enum_type
from mockrise.core.enums import InterviewModeEnum

if TYPE_CHECKING:
    from mockrise.modules.identity.models import User


class AvailableSlot(BaseModelMixin, Base):
    """Time of day an interviewer offers on a calendar day."""

    __tablename__ = "available_slots"
    __table_args__ = (
        UniqueConstraint("interviewer_id", "date", "time", "mode", name="uq_available_slots_owner_day_time_mode"),
        CheckConstraint("time >= 0 AND time < 1440", name="time_of_day"),
        CheckConstraint(
            "(is_booked AND interview_id IS NOT NULL) OR (NOT is_booked AND interview_id IS NULL)",
            name="booked_link",
        ),
    )

    interviewer_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    time: Mapped[int] = mapped_column(Integer, nullable=False)
    mode: Mapped[InterviewModeEnum] = mapped_column(
        enum_type(InterviewModeEnum, "interview_mode_enum"),
        default=InterviewModeEnum.LIVE,
        nullable=False,
        index=True,
    )
    is_booked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    interview_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("interviews.id", ondelete="RESTRICT"),
        nullable=True,
    )
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    interviewer: Mapped["User | None"] = relationship(foreign_keys=[interviewer_id])
