"""Interview lifecycle event names and payloads."""

from __future__ import annotations

from mockrise.modules.booking.models import Interview
from mockrise.shared.timeslots import format_time_label

INTERVIEW_SCHEDULED = "interview.scheduled"
INTERVIEW_RESCHEDULED = "interview.rescheduled"
INTERVIEW_UPDATED = "interview.updated"
INTERVIEW_CANCELLED = "interview.cancelled"
INTERVIEW_STATUS_UPDATED = "interview.status.updated"


def _display_name(user) -> str | None:
    if user is None:
        return None
    return user.name or user.email


def interview_snapshot(interview: Interview) -> dict:
    """Denormalized view of the interview carried inside every event."""
    return {
        "mode": str(interview.mode),
        "status": str(interview.status),
        "trainee_id": str(interview.user_id),
        "trainee_name": _display_name(interview.trainee),
        "interviewer_id": str(interview.interviewer_id) if interview.interviewer_id else None,
        "interviewer_name": _display_name(interview.interviewer),
        "scheduled_date": interview.scheduled_date.isoformat(),
        "time_slot": format_time_label(interview.time_slot),
        "language": str(interview.language),
    }
