"""Interviewer availability API router."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from mockrise.core.enums import InterviewModeEnum, RoleEnum
from mockrise.modules.availability.schemas import SlotCreate, SlotRead
from mockrise.modules.availability.service import AvailabilityService, get_availability_service
from mockrise.modules.identity.models import User
from mockrise.modules.identity.service import require_roles
from mockrise.shared.schemas import ApiResponse, MessageResponse

router = APIRouter(prefix="/interviewer/availability", tags=["availability"])


@router.get("", response_model=ApiResponse[list[SlotRead]])
async def list_availability(
    day: date | None = Query(default=None, alias="date"),
    mode: InterviewModeEnum = Query(default=InterviewModeEnum.LIVE),
    include_booked: bool = Query(default=False, alias="includeBooked"),
    service: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(require_roles(RoleEnum.INTERVIEWER, RoleEnum.ADMIN)),
) -> ApiResponse[list[SlotRead]]:
    """List the caller's published slots."""
    slots = await service.list_slots(current_user, day=day, mode=mode, include_booked=include_booked)
    return ApiResponse(data=[SlotRead.model_validate(slot) for slot in slots])


@router.post("/add", response_model=ApiResponse[SlotRead], status_code=status.HTTP_201_CREATED)
async def add_availability(
    payload: SlotCreate,
    service: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(require_roles(RoleEnum.INTERVIEWER)),
) -> ApiResponse[SlotRead]:
    """Publish an availability slot."""
    slot = await service.add_slot(payload, current_user)
    return ApiResponse(data=SlotRead.model_validate(slot), message="Availability added successfully")


@router.delete("/delete/{slot_id}", response_model=MessageResponse)
async def delete_availability(
    slot_id: UUID,
    service: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(require_roles(RoleEnum.INTERVIEWER)),
) -> MessageResponse:
    """Delete an unbooked slot."""
    await service.delete_slot(slot_id, current_user)
    return MessageResponse(message="Availability slot deleted successfully")
