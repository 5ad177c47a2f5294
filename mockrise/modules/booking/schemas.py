"""Booking schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, Field, field_validator

from mockrise.core.enums import DifficultyEnum, InterviewModeEnum, InterviewStatusEnum, LanguageEnum
from mockrise.modules.booking.metadata import InterviewMetadata
from mockrise.modules.identity.schemas import UserPublic
from mockrise.shared.schemas import CamelModel
from mockrise.shared.timeslots import CalendarDay, TimeLabel

ALLOWED_DURATIONS = (30, 45, 60, 90)


class ConsentFlags(CamelModel):
    """Trainee consent captured at booking time."""

    recording: bool = False
    data_usage: bool = False


class BookingCreate(CamelModel):
    """Create booking request."""

    mode: InterviewModeEnum
    scheduled_date: CalendarDay
    time_slot: TimeLabel
    duration: int
    language: LanguageEnum
    difficulty: DifficultyEnum = DifficultyEnum.INTERMEDIATE
    focus_area: str | None = Field(default=None, max_length=255)
    consent_flags: ConsentFlags = Field(default_factory=ConsentFlags)
    slot_id: UUID | None = None
    interviewer_id: UUID | None = None

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value not in ALLOWED_DURATIONS:
            raise ValueError("Invalid duration. Must be 30, 45, 60, or 90 minutes")
        return value


class BookingReschedule(CamelModel):
    """Reschedule request; omitted fields keep their current value."""

    scheduled_date: CalendarDay | None = None
    time_slot: TimeLabel | None = None
    slot_id: UUID | None = None
    interviewer_id: UUID | None = None


class SlotCandidate(CamelModel):
    """One bookable (or taken) time on the requested day."""

    id: UUID | None = None
    time: TimeLabel
    available: bool
    interviewer: UserPublic | None = None


class SlotAvailability(CamelModel):
    """Availability query result."""

    date: CalendarDay
    mode: InterviewModeEnum
    slots: list[SlotCandidate]


class InterviewRead(CamelModel):
    """Interview response schema."""

    id: UUID
    mode: InterviewModeEnum
    user_id: UUID
    interviewer_id: UUID | None
    scheduled_date: CalendarDay
    time_slot: TimeLabel
    duration: int
    language: LanguageEnum
    difficulty: DifficultyEnum
    focus_area: str | None
    consent_flags: ConsentFlags
    status: InterviewStatusEnum
    meeting_link: str | None
    session_id: str | None
    metadata: InterviewMetadata | None = Field(
        default=None,
        validation_alias=AliasChoices("details", "metadata"),
    )
    trainee: UserPublic | None = None
    interviewer: UserPublic | None = None
    started_at: datetime | None
    completed_at: datetime | None
    cancelled_at: datetime | None
    cancellation_reason: str | None
    created_at: datetime
    updated_at: datetime
