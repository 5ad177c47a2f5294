"""Notifications repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mockrise.core.enums import NotificationTypeEnum
from mockrise.modules.notifications.models import Notification


class NotificationsRepository:
    """DB operations for notifications domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def savepoint(self):
        """Nested transaction that discards this batch of notifications on error."""
        return self.session.begin_nested()

    async def create_notification(
        self,
        user_id: UUID,
        title: str,
        message: str,
        type_: NotificationTypeEnum = NotificationTypeEnum.INFO,
        details: dict | None = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type_,
            details=details or {},
            is_read=False,
        )
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def get_user_notification(self, notification_id: UUID, user_id: UUID) -> Notification | None:
        stmt = select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
        return await self.session.scalar(stmt)

    async def list_notifications_for_user(
        self,
        user_id: UUID,
        *,
        unread_only: bool,
        limit: int,
        offset: int,
    ) -> tuple[list[Notification], int]:
        base_stmt: Select[tuple[Notification]] = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            base_stmt = base_stmt.where(Notification.is_read.is_(False))

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(Notification.created_at.desc()).limit(limit).offset(offset)
        items = list((await self.session.scalars(stmt)).all())
        return items, total

    async def count_unread(self, user_id: UUID) -> int:
        stmt = select(func.count()).where(Notification.user_id == user_id, Notification.is_read.is_(False))
        return int((await self.session.scalar(stmt)) or 0)

    async def mark_read(self, notification: Notification) -> Notification:
        notification.is_read = True
        await self.session.flush()
        return notification

    async def mark_all_read(self, user_id: UUID) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)

    async def delete(self, notification: Notification) -> None:
        await self.session.delete(notification)
        await self.session.flush()
