"""Admin schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from mockrise.core.enums import InterviewStatusEnum
from mockrise.modules.booking.schemas import InterviewRead
from mockrise.shared.pagination import Page
from mockrise.shared.schemas import CamelModel
from mockrise.shared.timeslots import CalendarDay, TimeLabel


class AdminInterviewUpdate(CamelModel):
    """Partial interview correction made by an admin."""

    status: InterviewStatusEnum | None = None
    interviewer_id: UUID | None = None
    time_slot: TimeLabel | None = None
    scheduled_date: CalendarDay | None = None


class AdminInterviewCancel(CamelModel):
    """Admin cancel request."""

    reason: str | None = Field(default=None, max_length=1000)


class InterviewStats(CamelModel):
    """Unfiltered totals shown on the admin dashboard cards."""

    total: int = 0
    scheduled: int = 0
    in_progress: int = Field(default=0, alias="in_progress")
    completed: int = 0


class AdminInterviewPage(Page[InterviewRead]):
    """Filtered interview page plus global stats."""

    stats: InterviewStats
