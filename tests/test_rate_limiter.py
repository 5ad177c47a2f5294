from __future__ import annotations

from types import SimpleNamespace

import pytest

from mockrise.core import rate_limit as rate_limit_module
from mockrise.core.rate_limit import InMemorySlidingWindowRateLimiter, RateLimitDecision


class FakeRedisLimiter:
    def __init__(self, *, redis_url: str, namespace: str) -> None:
        self.redis_url = redis_url
        self.namespace = namespace

    async def acquire(self, key: str, *, max_requests: int, window_seconds: int) -> RateLimitDecision:
        return RateLimitDecision(True)

    async def clear(self) -> None:
        return None


def _limiter_settings(backend: str, redis_url: str | None, namespace: str) -> SimpleNamespace:
    return SimpleNamespace(
        booking_rate_limit_backend=backend,
        redis_url=redis_url,
        booking_rate_limit_redis_namespace=namespace,
    )


@pytest.fixture(autouse=True)
def _reset_shared_limiter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(rate_limit_module, "_rate_limiter", None)
    monkeypatch.setattr(rate_limit_module, "_rate_limiter_signature", None)


@pytest.mark.asyncio
async def test_sliding_window_blocks_after_limit_and_recovers() -> None:
    now_point = [100.0]
    limiter = InMemorySlidingWindowRateLimiter(now_provider=lambda: now_point[0])

    first = await limiter.acquire("k", max_requests=2, window_seconds=10)
    second = await limiter.acquire("k", max_requests=2, window_seconds=10)
    third = await limiter.acquire("k", max_requests=2, window_seconds=10)

    assert first == RateLimitDecision(True, 0)
    assert second == RateLimitDecision(True, 0)
    assert third.allowed is False
    assert third.retry_after == 10

    now_point[0] = 110.01
    fourth = await limiter.acquire("k", max_requests=2, window_seconds=10)
    assert fourth.allowed is True
    assert fourth.retry_after == 0


@pytest.mark.asyncio
async def test_keys_are_limited_independently() -> None:
    limiter = InMemorySlidingWindowRateLimiter(now_provider=lambda: 50.0)

    await limiter.acquire("booking:create:a", max_requests=1, window_seconds=60)
    blocked = await limiter.acquire("booking:create:a", max_requests=1, window_seconds=60)
    other = await limiter.acquire("booking:create:b", max_requests=1, window_seconds=60)

    assert blocked.allowed is False
    assert other.allowed is True


@pytest.mark.asyncio
async def test_clear_drops_all_counters() -> None:
    limiter = InMemorySlidingWindowRateLimiter(now_provider=lambda: 200.0)

    await limiter.acquire("booking:create:1", max_requests=1, window_seconds=60)
    blocked = await limiter.acquire("booking:create:1", max_requests=1, window_seconds=60)
    assert blocked.allowed is False

    await limiter.clear()
    allowed_again = await limiter.acquire("booking:create:1", max_requests=1, window_seconds=60)
    assert allowed_again == RateLimitDecision(True, 0)


def test_get_rate_limiter_uses_redis_backend_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _limiter_settings("redis", "redis://redis:6379/0", "booking_limit_test")
    monkeypatch.setattr(rate_limit_module, "get_settings", lambda: settings)
    monkeypatch.setattr(rate_limit_module, "RedisSlidingWindowRateLimiter", FakeRedisLimiter)

    limiter = rate_limit_module.get_rate_limiter()

    assert isinstance(limiter, FakeRedisLimiter)
    assert limiter.redis_url == "redis://redis:6379/0"
    assert limiter.namespace == "booking_limit_test"


def test_get_rate_limiter_reuses_instance_for_same_signature(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _limiter_settings("memory", None, "booking_rate_limit")
    monkeypatch.setattr(rate_limit_module, "get_settings", lambda: settings)

    first = rate_limit_module.get_rate_limiter()
    second = rate_limit_module.get_rate_limiter()

    assert first is second
    assert isinstance(first, InMemorySlidingWindowRateLimiter)


def test_get_rate_limiter_rebuilds_when_signature_changes(monkeypatch: pytest.MonkeyPatch) -> None:
    state = {"backend": "memory", "redis_url": None, "namespace": "booking_rate_limit"}
    monkeypatch.setattr(
        rate_limit_module,
        "get_settings",
        lambda: _limiter_settings(state["backend"], state["redis_url"], state["namespace"]),
    )
    monkeypatch.setattr(rate_limit_module, "RedisSlidingWindowRateLimiter", FakeRedisLimiter)

    first = rate_limit_module.get_rate_limiter()

    state.update(backend="redis", redis_url="redis://redis:6379/0", namespace="booking_limit_v2")
    second = rate_limit_module.get_rate_limiter()

    assert first is not second
    assert isinstance(second, FakeRedisLimiter)
