"""Sliding-window rate limiter backends (in-memory and Redis)."""

from __future__ import annotations

import asyncio
import math
import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import uuid4

from mockrise.core.config import Settings, get_settings


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    """Outcome of one acquire attempt."""

    allowed: bool
    retry_after: int = 0


class RateLimiter(Protocol):
    """Common contract for limiter backends."""

    async def acquire(self, key: str, *, max_requests: int, window_seconds: int) -> RateLimitDecision:
        """Try to reserve one request in the time window."""

    async def clear(self) -> None:
        """Drop tracked counters (used in tests)."""


_REDIS_ACQUIRE_SCRIPT = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])

redis.call('ZREMRANGEBYSCORE', key, '-inf', now - window)
if redis.call('ZCARD', key) >= limit then
  local oldest = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
  if oldest[2] ~= nil then
    return {0, tonumber(oldest[2])}
  end
  return {0, now}
end

redis.call('ZADD', key, now, ARGV[4])
redis.call('EXPIRE', key, math.ceil(window))
return {1, 0}
"""


def _retry_after(oldest_event: float, window_seconds: int, now: float) -> int:
    return max(1, math.ceil(oldest_event + window_seconds - now))


class InMemorySlidingWindowRateLimiter:
    """Per-process limiter keeping event timestamps per key."""

    def __init__(self, now_provider: Callable[[], float] | None = None) -> None:
        self._events: dict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._now = now_provider or time.monotonic

    async def acquire(self, key: str, *, max_requests: int, window_seconds: int) -> RateLimitDecision:
        now = self._now()
        async with self._lock:
            events = self._events[key]
            while events and events[0] <= now - window_seconds:
                events.popleft()

            if len(events) >= max_requests:
                return RateLimitDecision(False, _retry_after(events[0], window_seconds, now))

            events.append(now)
            return RateLimitDecision(True)

    async def clear(self) -> None:
        async with self._lock:
            self._events.clear()


class RedisSlidingWindowRateLimiter:
    """Redis-backed limiter shared across API instances."""

    def __init__(
        self,
        *,
        redis_url: str,
        namespace: str,
        now_provider: Callable[[], float] | None = None,
    ) -> None:
        self._redis_url = redis_url
        self._namespace = namespace
        self._now = now_provider or time.time
        self._init_lock = asyncio.Lock()
        self._client: Any | None = None
        self._script: Any | None = None

    async def _ensure_client(self) -> None:
        if self._script is not None:
            return
        async with self._init_lock:
            if self._client is None:
                from redis.asyncio import from_url

                self._client = from_url(self._redis_url, encoding="utf-8", decode_responses=True)
            if self._script is None:
                self._script = self._client.register_script(_REDIS_ACQUIRE_SCRIPT)

    async def acquire(self, key: str, *, max_requests: int, window_seconds: int) -> RateLimitDecision:
        await self._ensure_client()
        now = self._now()
        allowed, oldest = await self._script(
            keys=[f"{self._namespace}:{key}"],
            args=[now, window_seconds, max_requests, f"{now}:{uuid4().hex}"],
        )
        if int(allowed):
            return RateLimitDecision(True)
        return RateLimitDecision(False, _retry_after(float(oldest), window_seconds, now))

    async def clear(self) -> None:
        """Delete limiter keys for this namespace."""
        await self._ensure_client()
        cursor: int = 0
        while True:
            cursor, keys = await self._client.scan(cursor=cursor, match=f"{self._namespace}:*", count=100)
            if keys:
                await self._client.delete(*keys)
            if int(cursor) == 0:
                break


_rate_limiter: RateLimiter | None = None
_rate_limiter_signature: tuple[str, str | None, str] | None = None


def _build_rate_limiter(settings: Settings) -> RateLimiter:
    if settings.booking_rate_limit_backend == "redis":
        return RedisSlidingWindowRateLimiter(
            redis_url=settings.redis_url or "",
            namespace=settings.booking_rate_limit_redis_namespace,
        )
    return InMemorySlidingWindowRateLimiter()


def get_rate_limiter() -> RateLimiter:
    """Return shared limiter instance for configured backend."""
    global _rate_limiter, _rate_limiter_signature
    settings = get_settings()
    signature = (
        settings.booking_rate_limit_backend,
        settings.redis_url,
        settings.booking_rate_limit_redis_namespace,
    )
    if _rate_limiter is None or _rate_limiter_signature != signature:
        _rate_limiter = _build_rate_limiter(settings)
        _rate_limiter_signature = signature
    return _rate_limiter
