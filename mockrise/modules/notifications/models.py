"""Notifications ORM models."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from mockrise.core.database import Base, BaseModelMixin, enum_type
from mockrise.core.enums import NotificationTypeEnum


class Notification(BaseModelMixin, Base):
    """In-app notification shown in a user's inbox."""

    __tablename__ = "notifications"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NotificationTypeEnum] = mapped_column(
        enum_type(NotificationTypeEnum, "notification_type_enum"),
        default=NotificationTypeEnum.INFO,
        nullable=False,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    details: Mapped[dict] = mapped_column("metadata", JSONB, default=dict, nullable=False)
