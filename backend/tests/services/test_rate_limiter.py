"""Fixed-Window Rate Limiter — memory windows, Redis counters and fallback."""

from unittest.mock import AsyncMock, MagicMock

from redis.exceptions import RedisError

from lamontai.core.rate_limit_rules import RateLimitRule
from lamontai.infrastructure.rate_limiter import RateLimitDecision, RateLimiter

RULE = RateLimitRule("auth", limit=2, window_seconds=60)


class FakeClock:
    def __init__(self):
        self.now = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now


async def test_memory_window_limits_after_budget():
    limiter = RateLimiter(clock=FakeClock())
    first = await limiter.hit("ip:/login", RULE)
    second = await limiter.hit("ip:/login", RULE)
    third = await limiter.hit("ip:/login", RULE)

    assert (first.limited, first.remaining) == (False, 1)
    assert (second.limited, second.remaining) == (False, 0)
    assert (third.limited, third.remaining) == (True, 0)


async def test_memory_window_resets_after_window():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock)
    for _ in range(3):
        await limiter.hit("k", RULE)

    clock.now += 61
    decision = await limiter.hit("k", RULE)
    assert not decision.limited
    assert decision.remaining == 1
    assert decision.reset_at == clock.now + 60


async def test_keys_are_independent():
    limiter = RateLimiter(clock=FakeClock())
    for _ in range(3):
        await limiter.hit("a", RULE)
    assert not (await limiter.hit("b", RULE)).limited


async def test_reset_clears_windows():
    limiter = RateLimiter(clock=FakeClock())
    for _ in range(3):
        await limiter.hit("k", RULE)
    limiter.reset()
    assert not (await limiter.hit("k", RULE)).limited


def test_retry_after_rounds_up_and_is_at_least_one():
    decision = RateLimitDecision(limited=True, limit=2, remaining=0, reset_at=100.2)
    assert decision.retry_after(now=90.0) == 11
    assert decision.retry_after(now=200.0) == 1


def _redis(count: int, pttl: int = 60_000) -> MagicMock:
    client = MagicMock()
    client.incr = AsyncMock(return_value=count)
    client.pexpire = AsyncMock()
    client.pttl = AsyncMock(return_value=pttl)
    return client


async def test_redis_first_hit_sets_window_expiry():
    clock = FakeClock()
    client = _redis(count=1)
    limiter = RateLimiter(redis_client=client, clock=clock)

    decision = await limiter.hit("k", RULE)

    client.incr.assert_awaited_once_with("ratelimit:k")
    client.pexpire.assert_awaited_once_with("ratelimit:k", 60_000)
    assert decision == RateLimitDecision(
        limited=False, limit=2, remaining=1, reset_at=clock.now + 60,
    )


async def test_redis_over_budget_is_limited():
    limiter = RateLimiter(redis_client=_redis(count=3, pttl=30_000), clock=FakeClock())
    decision = await limiter.hit("k", RULE)
    assert decision.limited
    assert decision.remaining == 0


async def test_redis_key_without_expiry_gets_one():
    client = _redis(count=2, pttl=-1)
    limiter = RateLimiter(redis_client=client, clock=FakeClock())
    await limiter.hit("k", RULE)
    client.pexpire.assert_awaited_once_with("ratelimit:k", 60_000)


async def test_redis_error_falls_back_to_memory():
    client = MagicMock()
    client.incr = AsyncMock(side_effect=RedisError("down"))
    limiter = RateLimiter(redis_client=client, clock=FakeClock())

    decision = await limiter.hit("k", RULE)
    assert not decision.limited
    assert decision.remaining == 1
