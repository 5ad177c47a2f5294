"""Admin interview oversight: listing, corrections and cancellation."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mockrise.core.database import get_db_session
from mockrise.core.enums import InterviewModeEnum, InterviewStatusEnum, RoleEnum
from mockrise.modules.admin.repository import AdminRepository
from mockrise.modules.admin.schemas import AdminInterviewUpdate, InterviewStats
from mockrise.modules.availability.repository import AvailabilityRepository
from mockrise.modules.booking.events import INTERVIEW_CANCELLED, INTERVIEW_UPDATED, interview_snapshot
from mockrise.modules.booking.lifecycle import apply_status
from mockrise.modules.booking.metadata import LiveMetadata, dump_metadata
from mockrise.modules.booking.models import Interview
from mockrise.modules.booking.repository import BookingRepository
from mockrise.modules.booking.slots import LiveSlotAllocator
from mockrise.modules.identity.models import User
from mockrise.modules.identity.repository import IdentityRepository
from mockrise.modules.outbox.publisher import InterviewEventPublisher
from mockrise.modules.outbox.repository import OutboxRepository
from mockrise.shared.exceptions import BadRequestException, NotFoundException
from mockrise.shared.timeslots import format_time_label
from mockrise.shared.utils import utc_now

logger = logging.getLogger(__name__)


def _display_name(user: User | None) -> str:
    if user is None:
        return "None"
    return user.name or user.email


class AdminInterviewService:
    """Admin-side interview management."""

    def __init__(
        self,
        admin_repository: AdminRepository,
        booking_repository: BookingRepository,
        identity_repository: IdentityRepository,
        slots: LiveSlotAllocator,
        publisher: InterviewEventPublisher,
    ) -> None:
        self.admin_repository = admin_repository
        self.booking_repository = booking_repository
        self.identity_repository = identity_repository
        self.slots = slots
        self.publisher = publisher

    async def list_interviews(
        self,
        *,
        mode: InterviewModeEnum | None,
        status: InterviewStatusEnum | None,
        search: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Interview], int, InterviewStats]:
        items, total = await self.admin_repository.list_interviews(
            mode=mode,
            status=status,
            search=search,
            limit=limit,
            offset=offset,
        )
        counts = await self.admin_repository.count_by_status()
        stats = InterviewStats(
            total=sum(counts.values()),
            scheduled=counts.get(InterviewStatusEnum.SCHEDULED, 0),
            in_progress=counts.get(InterviewStatusEnum.IN_PROGRESS, 0),
            completed=counts.get(InterviewStatusEnum.COMPLETED, 0),
        )
        return items, total, stats

    async def _get_interview(self, interview_id: UUID) -> Interview:
        interview = await self.booking_repository.get_interview_by_id(interview_id)
        if interview is None:
            raise NotFoundException("Interview not found")
        return interview

    async def update_interview(self, interview_id: UUID, payload: AdminInterviewUpdate, actor: User) -> Interview:
        """Apply a partial correction and describe it to the participants."""
        interview = await self._get_interview(interview_id)
        changes: list[str] = []

        old_status = interview.status
        old_day, old_time = interview.scheduled_date, interview.time_slot
        new_day = payload.scheduled_date or old_day
        new_time = payload.time_slot if payload.time_slot is not None else old_time
        moved = new_day != old_day or new_time != old_time

        if payload.status is not None and payload.status != old_status:
            if apply_status(interview, payload.status, utc_now()):
                await self.slots.release(interview)
            changes.append(f"Status changed from {old_status} to {payload.status}")

        if interview.mode == InterviewModeEnum.LIVE:
            new_interviewer_id = payload.interviewer_id or interview.interviewer_id
            reassigned = new_interviewer_id != interview.interviewer_id
            reopened = old_status == InterviewStatusEnum.CANCELLED and interview.status != old_status

            if reassigned:
                new_interviewer = await self.identity_repository.get_user_by_id(new_interviewer_id)
                if new_interviewer is None or new_interviewer.role != RoleEnum.INTERVIEWER:
                    raise BadRequestException("Invalid interviewer")
                changes.append(
                    f"Interviewer changed from {_display_name(interview.interviewer)} "
                    f"to {_display_name(new_interviewer)}",
                )

            if (moved or reassigned or reopened) and interview.status != InterviewStatusEnum.CANCELLED:
                if new_interviewer_id is None:
                    raise BadRequestException("Interviewer ID is required for live mode")
                slot = await self.slots.resolve_slot(
                    interviewer_id=new_interviewer_id,
                    day=new_day,
                    time=new_time,
                    held_by=interview.id,
                )
                if await self.slots.release(interview):
                    changes.append(f"Old time slot {format_time_label(old_time)} has been freed")
                await self.slots.claim(slot, interview, operation="admin_update")
                interview.details = dump_metadata(LiveMetadata(slot_id=slot.id))
                changes.append(f"New time slot {format_time_label(new_time)} has been booked")

            interview.interviewer_id = new_interviewer_id

        if new_day != old_day:
            changes.append(f"Date changed from {old_day.isoformat()} to {new_day.isoformat()}")
        if new_time != old_time:
            changes.append(f"Time changed from {format_time_label(old_time)} to {format_time_label(new_time)}")
        interview.scheduled_date = new_day
        interview.time_slot = new_time

        interview = await self.booking_repository.save(interview)

        if changes:
            await self.publisher.publish(
                INTERVIEW_UPDATED,
                interview.id,
                {**interview_snapshot(interview), "changes": changes},
            )
        logger.info("Admin %s updated interview %s (%d change(s))", actor.id, interview.id, len(changes))
        return interview

    async def cancel_interview(self, interview_id: UUID, reason: str | None, actor: User) -> Interview:
        """Cancel an interview and free its live slot."""
        interview = await self._get_interview(interview_id)
        if interview.status == InterviewStatusEnum.CANCELLED:
            raise BadRequestException("Interview is already cancelled")

        apply_status(interview, InterviewStatusEnum.CANCELLED, utc_now())
        if reason:
            interview.cancellation_reason = reason
        await self.slots.release(interview)
        interview = await self.booking_repository.save(interview)

        await self.publisher.publish(
            INTERVIEW_CANCELLED,
            interview.id,
            {**interview_snapshot(interview), "reason": reason},
        )
        logger.info("Admin %s cancelled interview %s", actor.id, interview.id)
        return interview


async def get_admin_interview_service(session: AsyncSession = Depends(get_db_session)) -> AdminInterviewService:
    """Dependency provider for admin interview service."""
    identity_repository = IdentityRepository(session)
    return AdminInterviewService(
        admin_repository=AdminRepository(session),
        booking_repository=BookingRepository(session),
        identity_repository=identity_repository,
        slots=LiveSlotAllocator(AvailabilityRepository(session), identity_repository),
        publisher=InterviewEventPublisher(OutboxRepository(session)),
    )
