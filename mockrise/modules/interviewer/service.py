"""Interviewer-side management of assigned live interviews."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mockrise.core.database import get_db_session
from mockrise.core.enums import InterviewModeEnum, InterviewStatusEnum
from mockrise.modules.availability.repository import AvailabilityRepository
from mockrise.modules.booking.events import INTERVIEW_STATUS_UPDATED, interview_snapshot
from mockrise.modules.booking.lifecycle import apply_status
from mockrise.modules.booking.metadata import LiveMetadata, dump_metadata
from mockrise.modules.booking.models import Interview
from mockrise.modules.booking.repository import BookingRepository
from mockrise.modules.booking.slots import LiveSlotAllocator
from mockrise.modules.identity.models import User
from mockrise.modules.identity.repository import IdentityRepository
from mockrise.modules.outbox.publisher import InterviewEventPublisher
from mockrise.modules.outbox.repository import OutboxRepository
from mockrise.shared.exceptions import ForbiddenException, NotFoundException
from mockrise.shared.utils import utc_now

logger = logging.getLogger(__name__)


class InterviewerService:
    """Read and progress interviews assigned to the caller."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        slots: LiveSlotAllocator,
        publisher: InterviewEventPublisher,
    ) -> None:
        self.booking_repository = booking_repository
        self.slots = slots
        self.publisher = publisher

    async def list_assigned(self, actor: User, status: InterviewStatusEnum | None) -> list[Interview]:
        return await self.booking_repository.list_interviewer_interviews(actor.id, status=status)

    async def get_assigned(self, interview_id: UUID, actor: User) -> Interview:
        interview = await self.booking_repository.get_interview_by_id(interview_id)
        if interview is None:
            raise NotFoundException("Interview not found")
        if interview.interviewer_id != actor.id:
            raise ForbiddenException("You are not assigned to this interview")
        return interview

    async def update_status(
        self,
        interview_id: UUID,
        status: InterviewStatusEnum,
        actor: User,
    ) -> Interview:
        """Set the status label and stamp lifecycle timestamps."""
        interview = await self.get_assigned(interview_id, actor)
        previous_status = interview.status

        reopened = (
            previous_status == InterviewStatusEnum.CANCELLED
            and status != InterviewStatusEnum.CANCELLED
            and interview.mode == InterviewModeEnum.LIVE
        )
        if reopened:
            # The slot was freed on cancel and may have been booked since.
            slot = await self.slots.resolve_slot(
                interviewer_id=actor.id,
                day=interview.scheduled_date,
                time=interview.time_slot,
                held_by=interview.id,
            )
            await self.slots.claim(slot, interview, operation="reopen")
            interview.details = dump_metadata(LiveMetadata(slot_id=slot.id))

        if apply_status(interview, status, utc_now()):
            await self.slots.release(interview)
        interview = await self.booking_repository.save(interview)

        await self.publisher.publish(
            INTERVIEW_STATUS_UPDATED,
            interview.id,
            {**interview_snapshot(interview), "previous_status": str(previous_status)},
        )
        logger.info("Interviewer %s moved interview %s to %s", actor.id, interview.id, status)
        return interview


async def get_interviewer_service(session: AsyncSession = Depends(get_db_session)) -> InterviewerService:
    """Dependency provider for interviewer service."""
    return InterviewerService(
        booking_repository=BookingRepository(session),
        slots=LiveSlotAllocator(AvailabilityRepository(session), IdentityRepository(session)),
        publisher=InterviewEventPublisher(OutboxRepository(session)),
    )
