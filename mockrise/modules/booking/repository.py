"""Booking store repository layer."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from mockrise.core.enums import InterviewModeEnum, InterviewStatusEnum
from mockrise.modules.booking.models import AISession, Interview

_PARTICIPANTS = ("trainee", "interviewer")


class BookingRepository:
    """DB operations for interviews and their AI sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _with_participants(self) -> Select[tuple[Interview]]:
        return select(Interview).options(
            selectinload(Interview.trainee),
            selectinload(Interview.interviewer),
        )

    async def create_interview(self, interview: Interview) -> Interview:
        self.session.add(interview)
        await self.session.flush()
        await self.session.refresh(interview, attribute_names=list(_PARTICIPANTS))
        return interview

    async def get_interview_by_id(self, interview_id: UUID) -> Interview | None:
        stmt = self._with_participants().where(Interview.id == interview_id)
        return await self.session.scalar(stmt)

    async def find_trainee_booking_at(
        self,
        user_id: UUID,
        day: date,
        time_slot: int,
        *,
        exclude_id: UUID | None = None,
    ) -> Interview | None:
        """Active interview of one trainee at ``(day, time)`` in any mode."""
        stmt = select(Interview).where(
            Interview.user_id == user_id,
            Interview.scheduled_date == day,
            Interview.time_slot == time_slot,
            Interview.status != InterviewStatusEnum.CANCELLED,
        )
        if exclude_id is not None:
            stmt = stmt.where(Interview.id != exclude_id)
        return await self.session.scalar(stmt.limit(1))

    async def find_mode_booking_at(
        self,
        mode: InterviewModeEnum,
        day: date,
        time_slot: int,
        *,
        exclude_id: UUID | None = None,
    ) -> Interview | None:
        """Active interview of any trainee occupying ``(day, mode, time)``."""
        stmt = select(Interview).where(
            Interview.mode == mode,
            Interview.scheduled_date == day,
            Interview.time_slot == time_slot,
            Interview.status != InterviewStatusEnum.CANCELLED,
        )
        if exclude_id is not None:
            stmt = stmt.where(Interview.id != exclude_id)
        return await self.session.scalar(stmt.limit(1))

    async def list_booked_times(self, mode: InterviewModeEnum, day: date) -> set[int]:
        stmt = select(Interview.time_slot).where(
            Interview.mode == mode,
            Interview.scheduled_date == day,
            Interview.status != InterviewStatusEnum.CANCELLED,
        )
        return set((await self.session.scalars(stmt)).all())

    async def list_user_interviews(
        self,
        user_id: UUID,
        *,
        status: InterviewStatusEnum | None = None,
        mode: InterviewModeEnum | None = None,
    ) -> list[Interview]:
        stmt = self._with_participants().where(Interview.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Interview.status == status)
        if mode is not None:
            stmt = stmt.where(Interview.mode == mode)

        stmt = stmt.order_by(Interview.scheduled_date.asc(), Interview.created_at.desc())
        return list((await self.session.scalars(stmt)).all())

    async def list_interviewer_interviews(
        self,
        interviewer_id: UUID,
        *,
        status: InterviewStatusEnum | None = None,
    ) -> list[Interview]:
        stmt = self._with_participants().where(
            Interview.interviewer_id == interviewer_id,
            Interview.mode == InterviewModeEnum.LIVE,
        )
        if status is not None:
            stmt = stmt.where(Interview.status == status)

        stmt = stmt.order_by(Interview.scheduled_date.asc(), Interview.time_slot.asc())
        return list((await self.session.scalars(stmt)).all())

    async def create_ai_session(self, ai_session: AISession) -> AISession:
        self.session.add(ai_session)
        await self.session.flush()
        return ai_session

    async def save(self, interview: Interview) -> Interview:
        await self.session.flush()
        await self.session.refresh(interview, attribute_names=list(_PARTICIPANTS))
        return interview
