"""Status label changes shared by interviewer and admin flows."""

from __future__ import annotations

from datetime import datetime

from mockrise.core.enums import InterviewStatusEnum
from mockrise.modules.booking.models import Interview


def apply_status(interview: Interview, status: InterviewStatusEnum, now: datetime) -> bool:
    """Set ``status`` and stamp the matching timestamps once.

    Returns True when the interview moves into ``cancelled`` with this call,
    which is when its live slot has to be released.
    """
    entering_cancelled = (
        status == InterviewStatusEnum.CANCELLED and interview.status != InterviewStatusEnum.CANCELLED
    )
    interview.status = status

    if status == InterviewStatusEnum.IN_PROGRESS and interview.started_at is None:
        interview.started_at = now
    elif status == InterviewStatusEnum.COMPLETED:
        if interview.started_at is None:
            interview.started_at = now
        if interview.completed_at is None:
            interview.completed_at = now
    elif status == InterviewStatusEnum.CANCELLED and interview.cancelled_at is None:
        interview.cancelled_at = now

    return entering_cancelled
