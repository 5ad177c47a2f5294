"""Availability schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from mockrise.core.enums import InterviewModeEnum
from mockrise.shared.schemas import CamelModel
from mockrise.shared.timeslots import CalendarDay, TimeLabel


class SlotCreate(CamelModel):
    """Add availability request."""

    date: CalendarDay
    time: TimeLabel
    mode: InterviewModeEnum = InterviewModeEnum.LIVE


class SlotRead(CamelModel):
    """Availability slot response schema."""

    id: UUID
    interviewer_id: UUID | None
    date: CalendarDay
    time: TimeLabel
    mode: InterviewModeEnum
    is_booked: bool
    interview_id: UUID | None
    timezone: str
    created_at: datetime
