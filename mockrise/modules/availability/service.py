"""Interviewer availability business logic."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mockrise.core.config import get_settings
from mockrise.core.database import get_db_session
from mockrise.core.enums import InterviewModeEnum
from mockrise.modules.availability.models import AvailableSlot
from mockrise.modules.availability.repository import AvailabilityRepository
from mockrise.modules.availability.schemas import SlotCreate
from mockrise.modules.identity.models import User
from mockrise.shared.exceptions import BadRequestException, ForbiddenException, NotFoundException
from mockrise.shared.timeslots import is_bookable_time, is_past_day, minutes_of_day
from mockrise.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)


class AvailabilityService:
    """Slot store operations performed by interviewers."""

    def __init__(self, repository: AvailabilityRepository) -> None:
        self.repository = repository

    async def list_slots(
        self,
        actor: User,
        *,
        day: date | None,
        mode: InterviewModeEnum,
        include_booked: bool,
    ) -> list[AvailableSlot]:
        """List the caller's upcoming slots ordered by day then time."""
        now = utc_now()
        today = now.date()
        if day is not None and day < today:
            return []

        slots = await self.repository.list_interviewer_slots(
            actor.id,
            mode=mode,
            from_day=today,
            day=day,
            include_booked=include_booked,
        )
        now_minutes = minutes_of_day(now)
        return [slot for slot in slots if slot.date > today or slot.time > now_minutes]

    async def add_slot(self, payload: SlotCreate, actor: User) -> AvailableSlot:
        """Publish one more bookable time."""
        now = utc_now()
        if is_past_day(payload.date, now):
            raise BadRequestException("Cannot add availability for past dates")
        if not is_bookable_time(payload.date, payload.time, now, settings.booking_buffer_minutes):
            raise BadRequestException(
                f"Time slot must be at least {settings.booking_buffer_minutes} minutes from now",
            )

        existing = await self.repository.find_slot(
            day=payload.date,
            time=payload.time,
            interviewer_id=actor.id,
            mode=payload.mode,
        )
        if existing is not None:
            raise BadRequestException("This time slot already exists for this date")

        try:
            slot = await self.repository.create_slot(actor.id, payload.date, payload.time, payload.mode)
        except IntegrityError as exc:
            raise BadRequestException("This time slot already exists for this date") from exc

        logger.info("Interviewer %s added %s slot %s", actor.id, payload.mode, slot.id)
        return slot

    async def delete_slot(self, slot_id: UUID, actor: User) -> None:
        """Remove an unbooked slot owned by the caller."""
        slot = await self.repository.get_slot_by_id(slot_id)
        if slot is None:
            raise NotFoundException("Slot not found")
        if slot.interviewer_id != actor.id:
            raise ForbiddenException("Not authorized to delete this slot")
        if slot.is_booked:
            raise BadRequestException("Cannot delete a booked slot")

        await self.repository.delete_slot(slot)
        logger.info("Interviewer %s deleted slot %s", actor.id, slot_id)


async def get_availability_service(session: AsyncSession = Depends(get_db_session)) -> AvailabilityService:
    """Dependency provider for availability service."""
    return AvailabilityService(AvailabilityRepository(session))
