"""Fixed-Window Rate Limiter — Redis INCR/PEXPIRE with an in-memory fallback.

Invariants:
    - A window starts at the first hit for a key and lasts rule.window_seconds
    - limited is True iff the hit count in the current window exceeds rule.limit
    - remaining is never negative
    - A Redis failure falls back to the memory windows for that hit (never raises)

Design Decisions:
    - Fixed window over sliding log: one counter per key, O(1) memory
    - Memory state is advisory and per-process (ADR: acceptable for single-worker
      deployments; configure Redis for shared limits)
    - Clock injected for deterministic tests
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from lamontai.core.rate_limit_rules import RateLimitRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    limited: bool
    limit: int
    remaining: int
    reset_at: float  # unix seconds

    def retry_after(self, now: float) -> int:
        return max(1, int(self.reset_at - now + 0.999))


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Counts hits per key within fixed windows."""

    def __init__(
        self,
        redis_client: aioredis.Redis | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.redis = redis_client
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def attach_redis(self, client: aioredis.Redis | None) -> None:
        self.redis = client

    def reset(self) -> None:
        self._windows.clear()

    async def hit(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        """Record one request for key and decide whether it is over budget."""
        if self.redis is not None:
            try:
                return await self._hit_redis(key, rule)
            except (RedisError, OSError) as e:
                logger.warning(f"Rate limiter Redis error, using memory window: {e}")
        return self._hit_memory(key, rule)

    async def _hit_redis(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        now = self._clock()
        redis_key = f"ratelimit:{key}"
        count = await self.redis.incr(redis_key)
        if count == 1:
            await self.redis.pexpire(redis_key, rule.window_seconds * 1000)
        ttl_ms = await self.redis.pttl(redis_key)
        if ttl_ms < 0:
            # key lost its expiry (e.g. crash between INCR and PEXPIRE)
            await self.redis.pexpire(redis_key, rule.window_seconds * 1000)
            ttl_ms = rule.window_seconds * 1000
        return RateLimitDecision(
            limited=count > rule.limit,
            limit=rule.limit,
            remaining=max(0, rule.limit - count),
            reset_at=now + ttl_ms / 1000,
        )

    def _hit_memory(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        now = self._clock()
        window = self._windows.get(key)
        if window is None or window.reset_at <= now:
            window = _Window(count=0, reset_at=now + rule.window_seconds)
            self._windows[key] = window
            self._evict_expired(now)
        window.count += 1
        return RateLimitDecision(
            limited=window.count > rule.limit,
            limit=rule.limit,
            remaining=max(0, rule.limit - window.count),
            reset_at=window.reset_at,
        )

    def _evict_expired(self, now: float) -> None:
        stale = [k for k, w in self._windows.items() if w.reset_at <= now]
        for k in stale:
            del self._windows[k]
