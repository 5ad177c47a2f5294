"""Notifications business logic layer."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mockrise.core.database import get_db_session
from mockrise.modules.identity.models import User
from mockrise.modules.notifications.models import Notification
from mockrise.modules.notifications.repository import NotificationsRepository
from mockrise.modules.notifications.schemas import NotificationInbox, NotificationRead
from mockrise.shared.exceptions import NotFoundException


class NotificationsService:
    """Inbox operations for the current user."""

    def __init__(self, repository: NotificationsRepository) -> None:
        self.repository = repository

    async def get_inbox(self, actor: User, *, unread_only: bool, limit: int, offset: int) -> NotificationInbox:
        items, total = await self.repository.list_notifications_for_user(
            actor.id,
            unread_only=unread_only,
            limit=limit,
            offset=offset,
        )
        unread_count = await self.repository.count_unread(actor.id)
        return NotificationInbox(
            notifications=[NotificationRead.model_validate(item) for item in items],
            total=total,
            unread_count=unread_count,
        )

    async def _get_own(self, notification_id: UUID, actor: User) -> Notification:
        notification = await self.repository.get_user_notification(notification_id, actor.id)
        if notification is None:
            raise NotFoundException("Notification not found")
        return notification

    async def mark_read(self, notification_id: UUID, actor: User) -> Notification:
        notification = await self._get_own(notification_id, actor)
        return await self.repository.mark_read(notification)

    async def mark_all_read(self, actor: User) -> int:
        return await self.repository.mark_all_read(actor.id)

    async def delete(self, notification_id: UUID, actor: User) -> None:
        notification = await self._get_own(notification_id, actor)
        await self.repository.delete(notification)


async def get_notifications_service(session: AsyncSession = Depends(get_db_session)) -> NotificationsService:
    """Dependency provider for notifications service."""
    return NotificationsService(NotificationsRepository(session))
