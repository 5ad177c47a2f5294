"""Per-trainee rate limits for booking writes."""

from __future__ import annotations

from fastapi import Depends

from mockrise.core.config import get_settings
from mockrise.core.rate_limit import get_rate_limiter
from mockrise.modules.identity.models import User
from mockrise.modules.identity.service import get_current_user
from mockrise.shared.exceptions import RateLimitException


async def _enforce_limit(user: User, *, action: str, max_requests: int) -> None:
    settings = get_settings()
    decision = await get_rate_limiter().acquire(
        f"booking:{action}:{user.id}",
        max_requests=max_requests,
        window_seconds=settings.booking_rate_limit_window_seconds,
    )
    if not decision.allowed:
        raise RateLimitException(
            f"Too many {action} requests. Try again in {decision.retry_after} second(s).",
        )


async def enforce_create_rate_limit(current_user: User = Depends(get_current_user)) -> None:
    """Apply rate limit for booking creation."""
    await _enforce_limit(
        current_user,
        action="create",
        max_requests=get_settings().booking_rate_limit_create_requests,
    )


async def enforce_reschedule_rate_limit(current_user: User = Depends(get_current_user)) -> None:
    """Apply rate limit for booking reschedule."""
    await _enforce_limit(
        current_user,
        action="reschedule",
        max_requests=get_settings().booking_rate_limit_reschedule_requests,
    )
