"""Identity ORM models.

User rows are written by the external auth service; this API reads them to
resolve callers, list admins and check interviewer approval.
"""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from mockrise.core.database import Base, BaseModelMixin, enum_type
from mockrise.core.enums import RoleEnum, UserStatusEnum


class User(BaseModelMixin, Base):
    """Platform user model."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[RoleEnum] = mapped_column(
        enum_type(RoleEnum, "role_enum"),
        default=RoleEnum.TRAINEE,
        nullable=False,
        index=True,
    )
    status: Mapped[UserStatusEnum] = mapped_column(
        enum_type(UserStatusEnum, "user_status_enum"),
        default=UserStatusEnum.APPROVED,
        nullable=False,
    )
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)

    @property
    def is_approved_interviewer(self) -> bool:
        return self.role == RoleEnum.INTERVIEWER and self.status == UserStatusEnum.APPROVED
