"""Booking business logic: availability query, create, list and reschedule."""

from __future__ import annotations

import logging
from datetime import date, datetime
from uuid import UUID, uuid4

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mockrise.core.config import get_settings
from mockrise.core.database import get_db_session
from mockrise.core.enums import (
    AISessionStatusEnum,
    InterviewModeEnum,
    InterviewStatusEnum,
    RoleEnum,
)
from mockrise.core.metrics import INTERVIEWS_BOOKED_TOTAL
from mockrise.modules.availability.repository import AvailabilityRepository
from mockrise.modules.booking.events import INTERVIEW_RESCHEDULED, INTERVIEW_SCHEDULED, interview_snapshot
from mockrise.modules.booking.metadata import (
    AiMetadata,
    FamilyMetadata,
    InterviewMetadata,
    LiveMetadata,
    PeerMetadata,
    dump_metadata,
    linked_slot_id,
)
from mockrise.modules.booking.models import AISession, Interview
from mockrise.modules.booking.repository import BookingRepository
from mockrise.modules.booking.schemas import BookingCreate, BookingReschedule, SlotAvailability, SlotCandidate
from mockrise.modules.booking.slots import LiveSlotAllocator
from mockrise.modules.identity.models import User
from mockrise.modules.identity.repository import IdentityRepository
from mockrise.modules.identity.schemas import UserPublic
from mockrise.modules.outbox.publisher import InterviewEventPublisher
from mockrise.modules.outbox.repository import OutboxRepository
from mockrise.shared.exceptions import BadRequestException, ForbiddenException, NotFoundException
from mockrise.shared.timeslots import DEFAULT_SLOT_TIMES, format_time_label, is_bookable_time, is_past_day
from mockrise.shared.utils import random_token, utc_now

settings = get_settings()
logger = logging.getLogger(__name__)

_RESCHEDULE_BLOCKED = {
    InterviewStatusEnum.COMPLETED: "Cannot reschedule a completed interview",
    InterviewStatusEnum.CANCELLED: "Cannot reschedule a cancelled interview",
    InterviewStatusEnum.IN_PROGRESS: "Cannot reschedule an interview that is in progress",
}


def new_meeting_link() -> str:
    return f"{settings.meeting_link_base_url}{random_token(11)}"


def new_ai_session_id(now: datetime) -> str:
    return f"ai_{int(now.timestamp() * 1000)}_{random_token(9)}"


class BookingService:
    """Slot allocator and reschedule handler for trainee bookings."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        availability_repository: AvailabilityRepository,
        identity_repository: IdentityRepository,
        publisher: InterviewEventPublisher,
    ) -> None:
        self.booking_repository = booking_repository
        self.availability_repository = availability_repository
        self.publisher = publisher
        self.slots = LiveSlotAllocator(availability_repository, identity_repository)

    async def get_available_slots(self, day: date, mode: InterviewModeEnum) -> SlotAvailability:
        """Compute candidate times for one day and mode."""
        now = utc_now()
        buffer_minutes = settings.booking_buffer_minutes
        if is_past_day(day, now):
            return SlotAvailability(date=day, mode=mode, slots=[])

        if mode == InterviewModeEnum.LIVE:
            open_slots = await self.availability_repository.list_open_live_slots(day)
            candidates = [
                SlotCandidate(
                    id=slot.id,
                    time=slot.time,
                    available=True,
                    interviewer=UserPublic.model_validate(slot.interviewer),
                )
                for slot in open_slots
                if is_bookable_time(day, slot.time, now, buffer_minutes)
            ]
        else:
            booked_times = await self.booking_repository.list_booked_times(mode, day)
            candidates = [
                SlotCandidate(time=time, available=time not in booked_times)
                for time in DEFAULT_SLOT_TIMES
                if is_bookable_time(day, time, now, buffer_minutes)
            ]

        return SlotAvailability(date=day, mode=mode, slots=candidates)

    def _ensure_schedulable(self, day: date, time_slot: int, *, past_day_message: str) -> None:
        now = utc_now()
        if is_past_day(day, now):
            raise BadRequestException(past_day_message)
        if not is_bookable_time(day, time_slot, now, settings.booking_buffer_minutes):
            raise BadRequestException(
                "Invalid time slot. Selected time must be at least "
                f"{settings.booking_buffer_minutes} minutes in the future",
            )

    async def _ensure_no_overlap(
        self,
        trainee_id: UUID,
        mode: InterviewModeEnum,
        day: date,
        time_slot: int,
        *,
        exclude_id: UUID | None = None,
    ) -> None:
        own = await self.booking_repository.find_trainee_booking_at(
            trainee_id,
            day,
            time_slot,
            exclude_id=exclude_id,
        )
        if own is not None:
            raise BadRequestException("You already have a booking at this time")

        # Modes without interviewers share one timeline per mode.
        if mode != InterviewModeEnum.LIVE:
            taken = await self.booking_repository.find_mode_booking_at(
                mode,
                day,
                time_slot,
                exclude_id=exclude_id,
            )
            if taken is not None:
                raise BadRequestException("This time slot is already booked. Please select another time.")

    async def create_booking(self, payload: BookingCreate, actor: User) -> Interview:
        """Validate the request, insert the interview and claim its slot."""
        if actor.role != RoleEnum.TRAINEE:
            raise ForbiddenException("Only trainees can create bookings")

        day, time_slot = payload.scheduled_date, payload.time_slot
        self._ensure_schedulable(day, time_slot, past_day_message="Invalid date. Date must be in the future")

        slot = None
        interviewer_id = None
        if payload.mode == InterviewModeEnum.LIVE:
            interviewer = await self.slots.resolve_interviewer(payload.interviewer_id)
            slot = await self.slots.resolve_slot(
                interviewer_id=interviewer.id,
                day=day,
                time=time_slot,
                slot_id=payload.slot_id,
            )
            interviewer_id = interviewer.id

        await self._ensure_no_overlap(actor.id, payload.mode, day, time_slot)

        interview = Interview(
            id=uuid4(),
            mode=payload.mode,
            user_id=actor.id,
            interviewer_id=interviewer_id,
            scheduled_date=day,
            time_slot=time_slot,
            duration=payload.duration,
            language=payload.language,
            difficulty=payload.difficulty,
            focus_area=payload.focus_area,
            consent_flags=payload.consent_flags.model_dump(by_alias=True),
            status=InterviewStatusEnum.SCHEDULED,
        )

        metadata: InterviewMetadata
        if payload.mode == InterviewModeEnum.LIVE:
            metadata = LiveMetadata(slot_id=slot.id)
            interview.meeting_link = new_meeting_link()
        elif payload.mode == InterviewModeEnum.AI:
            interview.session_id = new_ai_session_id(utc_now())
            metadata = AiMetadata(session_id=interview.session_id)
        elif payload.mode == InterviewModeEnum.PEER:
            metadata = PeerMetadata()
        else:
            metadata = FamilyMetadata()
            interview.meeting_link = new_meeting_link()
        interview.details = dump_metadata(metadata)

        interview = await self.booking_repository.create_interview(interview)

        if slot is not None:
            await self.slots.claim(slot, interview, operation="create")

        if payload.mode == InterviewModeEnum.AI:
            await self.booking_repository.create_ai_session(
                AISession(
                    interview_id=interview.id,
                    user_id=actor.id,
                    session_id=interview.session_id,
                    specialty=payload.focus_area,
                    difficulty=payload.difficulty,
                    language=payload.language,
                    status=AISessionStatusEnum.INITIALIZED,
                    configuration={"duration": payload.duration, "focusArea": payload.focus_area},
                ),
            )

        INTERVIEWS_BOOKED_TOTAL.labels(mode=str(payload.mode)).inc()
        await self.publisher.publish(INTERVIEW_SCHEDULED, interview.id, interview_snapshot(interview))
        logger.info("Trainee %s booked %s interview %s", actor.id, payload.mode, interview.id)
        return interview

    async def list_bookings(
        self,
        actor: User,
        *,
        status: InterviewStatusEnum | None = None,
        mode: InterviewModeEnum | None = None,
    ) -> list[Interview]:
        """List the caller's own interviews."""
        return await self.booking_repository.list_user_interviews(actor.id, status=status, mode=mode)

    async def reschedule_booking(
        self,
        interview_id: UUID,
        payload: BookingReschedule,
        actor: User,
    ) -> Interview:
        """Move a trainee's interview, swapping live slots when needed."""
        if actor.role != RoleEnum.TRAINEE:
            raise ForbiddenException("Only trainees can reschedule their bookings")

        interview = await self.booking_repository.get_interview_by_id(interview_id)
        if interview is None:
            raise NotFoundException("Interview not found")
        if interview.user_id != actor.id:
            raise ForbiddenException("You can only reschedule your own bookings")
        if interview.status in _RESCHEDULE_BLOCKED:
            raise BadRequestException(_RESCHEDULE_BLOCKED[interview.status])

        new_day = payload.scheduled_date or interview.scheduled_date
        new_time = payload.time_slot if payload.time_slot is not None else interview.time_slot
        self._ensure_schedulable(new_day, new_time, past_day_message="Cannot reschedule to a past date")

        previous = {
            "previous_scheduled_date": interview.scheduled_date.isoformat(),
            "previous_time_slot": format_time_label(interview.time_slot),
            "previous_interviewer_id": str(interview.interviewer_id) if interview.interviewer_id else None,
        }
        moved = new_day != interview.scheduled_date or new_time != interview.time_slot

        if interview.mode == InterviewModeEnum.LIVE:
            new_interviewer_id = payload.interviewer_id or interview.interviewer_id
            current_slot_id = linked_slot_id(interview.details)
            changed = (
                moved
                or new_interviewer_id != interview.interviewer_id
                or (payload.slot_id is not None and payload.slot_id != current_slot_id)
            )
            if changed:
                interviewer = await self.slots.resolve_interviewer(new_interviewer_id)
                slot = await self.slots.resolve_slot(
                    interviewer_id=interviewer.id,
                    day=new_day,
                    time=new_time,
                    slot_id=payload.slot_id,
                    held_by=interview.id,
                )
                if moved:
                    await self._ensure_no_overlap(actor.id, interview.mode, new_day, new_time, exclude_id=interview.id)
                await self.slots.release(interview)
                await self.slots.claim(slot, interview, operation="reschedule")
                interview.details = dump_metadata(LiveMetadata(slot_id=slot.id))
                interview.interviewer_id = interviewer.id
        elif moved:
            await self._ensure_no_overlap(actor.id, interview.mode, new_day, new_time, exclude_id=interview.id)

        interview.scheduled_date = new_day
        interview.time_slot = new_time
        interview = await self.booking_repository.save(interview)

        await self.publisher.publish(
            INTERVIEW_RESCHEDULED,
            interview.id,
            {**interview_snapshot(interview), **previous},
        )
        logger.info("Trainee %s rescheduled interview %s", actor.id, interview.id)
        return interview


async def get_booking_service(session: AsyncSession = Depends(get_db_session)) -> BookingService:
    """Dependency provider for booking service."""
    return BookingService(
        booking_repository=BookingRepository(session),
        availability_repository=AvailabilityRepository(session),
        identity_repository=IdentityRepository(session),
        publisher=InterviewEventPublisher(OutboxRepository(session)),
    )
