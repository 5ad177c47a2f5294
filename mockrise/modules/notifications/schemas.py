"""Notifications schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, Field

from mockrise.core.enums import NotificationTypeEnum
from mockrise.shared.schemas import CamelModel


class NotificationRead(CamelModel):
    """Notification response schema."""

    id: UUID
    user_id: UUID
    title: str
    message: str
    type: NotificationTypeEnum
    is_read: bool
    metadata: dict = Field(default_factory=dict, validation_alias=AliasChoices("details", "metadata"))
    created_at: datetime


class NotificationInbox(CamelModel):
    """Inbox page with unread counter."""

    notifications: list[NotificationRead]
    total: int
    unread_count: int
