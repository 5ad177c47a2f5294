"""Identity repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mockrise.core.enums import RoleEnum, UserStatusEnum
from mockrise.modules.identity.models import User


class IdentityRepository:
    """DB operations for identity domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return await self.session.scalar(stmt)

    async def list_user_ids_by_role(self, role: RoleEnum) -> list[UUID]:
        stmt = select(User.id).where(User.role == role).order_by(User.created_at.asc())
        return list((await self.session.scalars(stmt)).all())

    async def create_user(
        self,
        email: str,
        name: str,
        role: RoleEnum,
        status: UserStatusEnum = UserStatusEnum.APPROVED,
    ) -> User:
        user = User(email=email, name=name, role=role, status=status)
        self.session.add(user)
        await self.session.flush()
        return user
