"""Interviewer sessions API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from mockrise.core.enums import InterviewStatusEnum, RoleEnum
from mockrise.modules.booking.schemas import InterviewRead
from mockrise.modules.identity.models import User
from mockrise.modules.identity.service import require_roles
from mockrise.modules.interviewer.schemas import InterviewStatusUpdate
from mockrise.modules.interviewer.service import InterviewerService, get_interviewer_service
from mockrise.shared.schemas import ApiResponse

router = APIRouter(prefix="/interviewer/interviews", tags=["interviewer"])

require_interviewer = require_roles(RoleEnum.INTERVIEWER)


@router.get("", response_model=ApiResponse[list[InterviewRead]])
async def list_assigned_interviews(
    status_filter: InterviewStatusEnum | None = Query(default=None, alias="status"),
    service: InterviewerService = Depends(get_interviewer_service),
    current_user: User = Depends(require_interviewer),
) -> ApiResponse[list[InterviewRead]]:
    """List live interviews assigned to the caller."""
    interviews = await service.list_assigned(current_user, status_filter)
    return ApiResponse(data=[InterviewRead.model_validate(item) for item in interviews])


@router.get("/{interview_id}", response_model=ApiResponse[InterviewRead])
async def get_assigned_interview(
    interview_id: UUID,
    service: InterviewerService = Depends(get_interviewer_service),
    current_user: User = Depends(require_interviewer),
) -> ApiResponse[InterviewRead]:
    """Return one assigned interview."""
    interview = await service.get_assigned(interview_id, current_user)
    return ApiResponse(data=InterviewRead.model_validate(interview))


@router.put("/{interview_id}/status", response_model=ApiResponse[InterviewRead])
async def update_interview_status(
    interview_id: UUID,
    payload: InterviewStatusUpdate,
    service: InterviewerService = Depends(get_interviewer_service),
    current_user: User = Depends(require_interviewer),
) -> ApiResponse[InterviewRead]:
    """Mark an assigned interview in progress, completed, and so on."""
    interview = await service.update_status(interview_id, payload.status, current_user)
    return ApiResponse(
        data=InterviewRead.model_validate(interview),
        message="Interview status updated successfully",
    )
