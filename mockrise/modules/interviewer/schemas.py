"""Interviewer session schemas."""

from __future__ import annotations

from mockrise.core.enums import InterviewStatusEnum
from mockrise.shared.schemas import CamelModel


class InterviewStatusUpdate(CamelModel):
    """Status change requested by the assigned interviewer."""

    status: InterviewStatusEnum
