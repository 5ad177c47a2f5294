"""Slot store repository layer."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from mockrise.core.enums import InterviewModeEnum
from mockrise.modules.availability.models import AvailableSlot
from mockrise.shared.utils import utc_now


class AvailabilityRepository:
    """DB access for interviewer availability slots."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_slot(
        self,
        interviewer_id: UUID,
        day: date,
        time: int,
        mode: InterviewModeEnum,
        timezone: str = "UTC",
    ) -> AvailableSlot:
        """Insert slot inside a savepoint; raises IntegrityError on duplicates."""
        slot = AvailableSlot(
            interviewer_id=interviewer_id,
            date=day,
            time=time,
            mode=mode,
            timezone=timezone,
            is_booked=False,
        )
        async with self.session.begin_nested():
            self.session.add(slot)
        return slot

    async def get_slot_by_id(self, slot_id: UUID) -> AvailableSlot | None:
        return await self.session.get(AvailableSlot, slot_id)

    async def find_slot(
        self,
        *,
        day: date,
        time: int,
        interviewer_id: UUID,
        mode: InterviewModeEnum = InterviewModeEnum.LIVE,
    ) -> AvailableSlot | None:
        stmt = select(AvailableSlot).where(
            AvailableSlot.date == day,
            AvailableSlot.time == time,
            AvailableSlot.interviewer_id == interviewer_id,
            AvailableSlot.mode == mode,
        )
        return await self.session.scalar(stmt)

    async def list_open_live_slots(self, day: date) -> list[AvailableSlot]:
        stmt = (
            select(AvailableSlot)
            .options(selectinload(AvailableSlot.interviewer))
            .where(
                AvailableSlot.date == day,
                AvailableSlot.mode == InterviewModeEnum.LIVE,
                AvailableSlot.is_booked.is_(False),
                AvailableSlot.interviewer_id.is_not(None),
            )
            .order_by(AvailableSlot.time.asc(), AvailableSlot.created_at.asc())
        )
        return list((await self.session.scalars(stmt)).all())

    async def list_interviewer_slots(
        self,
        interviewer_id: UUID,
        *,
        mode: InterviewModeEnum,
        from_day: date,
        day: date | None = None,
        include_booked: bool = False,
    ) -> list[AvailableSlot]:
        stmt: Select[tuple[AvailableSlot]] = select(AvailableSlot).where(
            AvailableSlot.interviewer_id == interviewer_id,
            AvailableSlot.mode == mode,
            AvailableSlot.date >= from_day,
        )
        if day is not None:
            stmt = stmt.where(AvailableSlot.date == day)
        if not include_booked:
            stmt = stmt.where(AvailableSlot.is_booked.is_(False))

        stmt = stmt.order_by(AvailableSlot.date.asc(), AvailableSlot.time.asc())
        return list((await self.session.scalars(stmt)).all())

    async def delete_slot(self, slot: AvailableSlot) -> None:
        await self.session.delete(slot)
        await self.session.flush()

    async def book_slot(self, slot_id: UUID, interview_id: UUID) -> bool:
        """Claim an unbooked slot. False means another writer got there first."""
        stmt = (
            update(AvailableSlot)
            .where(AvailableSlot.id == slot_id, AvailableSlot.is_booked.is_(False))
            .values(
                is_booked=True,
                interview_id=interview_id,
                version=AvailableSlot.version + 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def release_slot(self, slot_id: UUID, interview_id: UUID) -> bool:
        """Free a slot held by ``interview_id``. No-op when it is not held by it."""
        stmt = (
            update(AvailableSlot)
            .where(
                AvailableSlot.id == slot_id,
                AvailableSlot.is_booked.is_(True),
                AvailableSlot.interview_id == interview_id,
            )
            .values(
                is_booked=False,
                interview_id=None,
                version=AvailableSlot.version + 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
