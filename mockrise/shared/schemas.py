"""Wire-format base models shared by all modules."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Model exchanged with clients in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope: ``{"success": true, "data": ..., "message": ...}``."""

    success: bool = True
    data: T
    message: str | None = None


class MessageResponse(CamelModel):
    """Success envelope without payload."""

    success: bool = True
    message: str
