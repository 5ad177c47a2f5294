"""Admin repository layer."""

from __future__ import annotations

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from mockrise.core.enums import InterviewModeEnum, InterviewStatusEnum
from mockrise.modules.booking.models import Interview
from mockrise.modules.identity.models import User


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class AdminRepository:
    """Cross-user interview queries for admins."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_interviews(
        self,
        *,
        mode: InterviewModeEnum | None,
        status: InterviewStatusEnum | None,
        search: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Interview], int]:
        base_stmt: Select[tuple[Interview]] = select(Interview)
        if mode is not None:
            base_stmt = base_stmt.where(Interview.mode == mode)
        if status is not None:
            base_stmt = base_stmt.where(Interview.status == status)
        if search:
            pattern = _like_pattern(search.strip())
            matching_users = select(User.id).where(
                or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\")),
            )
            base_stmt = base_stmt.where(
                or_(Interview.user_id.in_(matching_users), Interview.interviewer_id.in_(matching_users)),
            )

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = (
            base_stmt.options(selectinload(Interview.trainee), selectinload(Interview.interviewer))
            .order_by(Interview.scheduled_date.desc(), Interview.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        items = list((await self.session.scalars(stmt)).all())
        return items, total

    async def count_by_status(self) -> dict[InterviewStatusEnum, int]:
        stmt = select(Interview.status, func.count()).group_by(Interview.status)
        rows = (await self.session.execute(stmt)).all()
        return {status: int(count) for status, count in rows}
