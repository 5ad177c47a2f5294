"""Live slot resolution and claiming shared by booking, admin and interviewer flows."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from mockrise.core.enums import InterviewModeEnum
from mockrise.core.metrics import record_slot_conflict
from mockrise.modules.availability.models import AvailableSlot
from mockrise.modules.availability.repository import AvailabilityRepository
from mockrise.modules.booking.metadata import linked_slot_id
from mockrise.modules.booking.models import Interview
from mockrise.modules.identity.models import User
from mockrise.modules.identity.repository import IdentityRepository
from mockrise.shared.exceptions import BadRequestException, ConflictException

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "The selected time slot has already been booked. Please select another time."
SLOT_MISSING_MESSAGE = (
    "The selected time slot is not available. "
    "It may have been removed or the interviewer is no longer available at this time."
)
SLOT_MISMATCH_MESSAGE = "The selected time slot does not match the requested date and time."


class LiveSlotAllocator:
    """Find, claim and release interviewer slots for live interviews."""

    def __init__(
        self,
        availability_repository: AvailabilityRepository,
        identity_repository: IdentityRepository,
    ) -> None:
        self.availability_repository = availability_repository
        self.identity_repository = identity_repository

    async def resolve_interviewer(self, interviewer_id: UUID | None) -> User:
        if interviewer_id is None:
            raise BadRequestException("Interviewer ID is required for live mode")
        interviewer = await self.identity_repository.get_user_by_id(interviewer_id)
        if interviewer is None or not interviewer.is_approved_interviewer:
            raise BadRequestException("Invalid or unapproved interviewer")
        return interviewer

    async def resolve_slot(
        self,
        *,
        interviewer_id: UUID,
        day: date,
        time: int,
        slot_id: UUID | None = None,
        held_by: UUID | None = None,
    ) -> AvailableSlot:
        """Return the unbooked live slot matching the request.

        ``held_by`` lets an interview re-select the slot it already holds.
        """
        if slot_id is not None:
            slot = await self.availability_repository.get_slot_by_id(slot_id)
            if slot is None or slot.mode != InterviewModeEnum.LIVE or slot.interviewer_id != interviewer_id:
                raise BadRequestException(SLOT_MISSING_MESSAGE)
            if slot.date != day or slot.time != time:
                raise BadRequestException(SLOT_MISMATCH_MESSAGE)
        else:
            slot = await self.availability_repository.find_slot(
                day=day,
                time=time,
                interviewer_id=interviewer_id,
            )
            if slot is None:
                raise BadRequestException(SLOT_MISSING_MESSAGE)

        if slot.is_booked and (held_by is None or slot.interview_id != held_by):
            raise BadRequestException(SLOT_TAKEN_MESSAGE)
        return slot

    async def claim(self, slot: AvailableSlot, interview: Interview, *, operation: str) -> None:
        """Book ``slot`` for ``interview`` or raise ConflictException."""
        if slot.is_booked and slot.interview_id == interview.id:
            return
        if not await self.availability_repository.book_slot(slot.id, interview.id):
            record_slot_conflict(operation)
            logger.warning("Slot %s was claimed concurrently during %s", slot.id, operation)
            raise ConflictException("This time slot was just booked by someone else. Please select another time.")

    async def release(self, interview: Interview) -> bool:
        """Free the slot recorded in the interview metadata, if it still holds it."""
        slot_id = linked_slot_id(interview.details)
        if slot_id is None:
            return False
        released = await self.availability_repository.release_slot(slot_id, interview.id)
        if not released:
            logger.info("Slot %s was not held by interview %s", slot_id, interview.id)
        return released
