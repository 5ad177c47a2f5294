"""Booking API router."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from mockrise.core.enums import InterviewModeEnum, InterviewStatusEnum
from mockrise.modules.booking.rate_limit import enforce_create_rate_limit, enforce_reschedule_rate_limit
from mockrise.modules.booking.schemas import BookingCreate, BookingReschedule, InterviewRead, SlotAvailability
from mockrise.modules.booking.service import BookingService, get_booking_service
from mockrise.modules.identity.models import User
from mockrise.modules.identity.service import get_current_user
from mockrise.shared.schemas import ApiResponse

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/slots", response_model=ApiResponse[SlotAvailability])
async def get_available_slots(
    day: date = Query(alias="date"),
    mode: InterviewModeEnum = Query(),
    service: BookingService = Depends(get_booking_service),
    _: User = Depends(get_current_user),
) -> ApiResponse[SlotAvailability]:
    """List candidate times for a day and mode."""
    return ApiResponse(data=await service.get_available_slots(day, mode))


@router.post(
    "/create",
    response_model=ApiResponse[InterviewRead],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_create_rate_limit)],
)
async def create_booking(
    payload: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[InterviewRead]:
    """Book an interview."""
    interview = await service.create_booking(payload, current_user)
    return ApiResponse(data=InterviewRead.model_validate(interview), message="Interview booked successfully")


@router.get("", response_model=ApiResponse[list[InterviewRead]])
async def list_bookings(
    status_filter: InterviewStatusEnum | None = Query(default=None, alias="status"),
    mode: InterviewModeEnum | None = Query(default=None),
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[list[InterviewRead]]:
    """List the caller's bookings."""
    interviews = await service.list_bookings(current_user, status=status_filter, mode=mode)
    return ApiResponse(data=[InterviewRead.model_validate(item) for item in interviews])


@router.put(
    "/{interview_id}/reschedule",
    response_model=ApiResponse[InterviewRead],
    dependencies=[Depends(enforce_reschedule_rate_limit)],
)
async def reschedule_booking(
    interview_id: UUID,
    payload: BookingReschedule,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[InterviewRead]:
    """Move a booking to another day, time or interviewer."""
    interview = await service.reschedule_booking(interview_id, payload, current_user)
    return ApiResponse(data=InterviewRead.model_validate(interview), message="Interview rescheduled successfully")
