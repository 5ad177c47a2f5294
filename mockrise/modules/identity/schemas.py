"""Identity schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr

from mockrise.core.enums import RoleEnum, UserStatusEnum
from mockrise.shared.schemas import CamelModel


class UserPublic(CamelModel):
    """Public identity shown next to slots and interviews."""

    id: UUID
    name: str
    email: EmailStr


class UserRead(CamelModel):
    """User output schema."""

    id: UUID
    email: EmailStr
    name: str
    role: RoleEnum
    status: UserStatusEnum
    timezone: str
    created_at: datetime
