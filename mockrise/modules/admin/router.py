"""Admin API router."""

from __future__ import annotations

from enum import StrEnum
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from mockrise.core.enums import InterviewModeEnum, InterviewStatusEnum, RoleEnum
from mockrise.modules.admin.schemas import AdminInterviewCancel, AdminInterviewPage, AdminInterviewUpdate
from mockrise.modules.admin.service import AdminInterviewService, get_admin_interview_service
from mockrise.modules.booking.schemas import InterviewRead
from mockrise.modules.identity.models import User
from mockrise.modules.identity.service import require_roles
from mockrise.shared.exceptions import BadRequestException
from mockrise.shared.pagination import PaginationParams, get_pagination_params
from mockrise.shared.schemas import ApiResponse

router = APIRouter(prefix="/admin/interviews", tags=["admin"])

require_admin = require_roles(RoleEnum.ADMIN)


def _optional_filter(enum_cls: type[StrEnum], value: str | None, field: str) -> StrEnum | None:
    if value is None or value == "" or value == "all":
        return None
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise BadRequestException(f"Invalid {field}: {value}") from exc


@router.get("", response_model=ApiResponse[AdminInterviewPage])
async def list_interviews(
    mode: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=255),
    pagination: PaginationParams = Depends(get_pagination_params),
    service: AdminInterviewService = Depends(get_admin_interview_service),
    _: User = Depends(require_admin),
) -> ApiResponse[AdminInterviewPage]:
    """List interviews with filters, search and global stats."""
    items, total, stats = await service.list_interviews(
        mode=_optional_filter(InterviewModeEnum, mode, "mode"),
        status=_optional_filter(InterviewStatusEnum, status_filter, "status"),
        search=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    page = AdminInterviewPage(
        items=[InterviewRead.model_validate(item) for item in items],
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        has_more=pagination.offset + len(items) < total,
        stats=stats,
    )
    return ApiResponse(data=page)


@router.put("/{interview_id}", response_model=ApiResponse[InterviewRead])
async def update_interview(
    interview_id: UUID,
    payload: AdminInterviewUpdate,
    service: AdminInterviewService = Depends(get_admin_interview_service),
    current_user: User = Depends(require_admin),
) -> ApiResponse[InterviewRead]:
    """Correct status, interviewer, day or time of an interview."""
    interview = await service.update_interview(interview_id, payload, current_user)
    return ApiResponse(data=InterviewRead.model_validate(interview), message="Interview updated successfully")


@router.post("/{interview_id}/cancel", response_model=ApiResponse[InterviewRead])
async def cancel_interview(
    interview_id: UUID,
    payload: AdminInterviewCancel | None = None,
    service: AdminInterviewService = Depends(get_admin_interview_service),
    current_user: User = Depends(require_admin),
) -> ApiResponse[InterviewRead]:
    """Cancel an interview and release its slot."""
    reason = payload.reason if payload is not None else None
    interview = await service.cancel_interview(interview_id, reason, current_user)
    return ApiResponse(data=InterviewRead.model_validate(interview), message="Interview cancelled successfully")
