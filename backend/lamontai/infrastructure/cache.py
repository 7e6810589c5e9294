"""Cache — JSON key-value cache on Redis with an in-process memory fallback.

Invariants:
    - Values are JSON round-tripped on every backend (callers never share mutable objects)
    - Every key is namespaced with key_prefix
    - A Redis failure never propagates: the operation is logged and served by the memory fallback
    - Expired memory entries are evicted on read; ttl=None means "default ttl", ttl=0 means no expiry

Design Decisions:
    - Best-effort semantics: the cache is an optimisation, so availability beats consistency
      (ADR: a Redis outage must not take the API down)
    - Singleton via init_cache()/get_cache(), same lifecycle as db_manager; get_cache()
      lazily builds a memory cache so scripts and tests work without startup wiring
"""

import json
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str)


class CacheBackend:
    """Shared behaviour — key namespacing, TTL defaults and get_or_set."""

    backend_name = "abstract"

    def __init__(self, default_ttl: int = DEFAULT_TTL_SECONDS, key_prefix: str = ""):
        self.default_ttl = default_ttl
        self.key_prefix = key_prefix

    def _k(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _ttl(self, ttl: int | None) -> int:
        return self.default_ttl if ttl is None else ttl

    async def get(self, key: str) -> Any | None:
        raise NotImplementedError

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        raise NotImplementedError

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: int | None = None,
    ) -> Any:
        """Cached value, or the factory result stored under key."""
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await factory()
        if value is not None:
            await self.set(key, value, ttl)
        return value


class MemoryCache(CacheBackend):
    """Process-local dict cache. Advisory: not shared across workers."""

    backend_name = "memory"

    def __init__(
        self,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        key_prefix: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(default_ttl, key_prefix)
        self._clock = clock
        self._store: dict[str, tuple[str, float | None]] = {}

    def _live(self, full_key: str) -> str | None:
        entry = self._store.get(full_key)
        if entry is None:
            return None
        raw, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._store[full_key]
            return None
        return raw

    async def get(self, key: str) -> Any | None:
        raw = self._live(self._k(key))
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        seconds = self._ttl(ttl)
        expires_at = self._clock() + seconds if seconds > 0 else None
        self._store[self._k(key)] = (_dumps(value), expires_at)

    async def delete(self, key: str) -> bool:
        return self._store.pop(self._k(key), None) is not None

    async def exists(self, key: str) -> bool:
        return self._live(self._k(key)) is not None

    async def expire(self, key: str, seconds: int) -> bool:
        full_key = self._k(key)
        raw = self._live(full_key)
        if raw is None:
            return False
        self._store[full_key] = (raw, self._clock() + seconds)
        return True

    async def clear_prefix(self, prefix: str) -> int:
        full_prefix = self._k(prefix)
        doomed = [k for k in self._store if k.startswith(full_prefix)]
        for k in doomed:
            del self._store[k]
        return len(doomed)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._store.clear()


class RedisCache(CacheBackend):
    """Redis-backed cache that degrades to a MemoryCache on Redis errors."""

    backend_name = "redis"

    def __init__(
        self,
        client: aioredis.Redis,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        key_prefix: str = "",
        fallback: MemoryCache | None = None,
    ):
        super().__init__(default_ttl, key_prefix)
        self.client = client
        self.fallback = fallback or MemoryCache(default_ttl, key_prefix)

    def _degrade(self, operation: str, key: str, e: Exception) -> None:
        logger.warning(
            f"Redis {operation} failed, using memory fallback: {e}",
            extra={"cache_key": key},
        )

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self.client.get(self._k(key))
        except (RedisError, OSError) as e:
            self._degrade("get", key, e)
            return await self.fallback.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding non-JSON cache entry", extra={"cache_key": key})
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        seconds = self._ttl(ttl)
        try:
            await self.client.set(
                self._k(key), _dumps(value), ex=seconds if seconds > 0 else None,
            )
        except (RedisError, OSError) as e:
            self._degrade("set", key, e)
            await self.fallback.set(key, value, ttl)

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self.client.delete(self._k(key)))
        except (RedisError, OSError) as e:
            self._degrade("delete", key, e)
            return await self.fallback.delete(key)

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self.client.exists(self._k(key)))
        except (RedisError, OSError) as e:
            self._degrade("exists", key, e)
            return await self.fallback.exists(key)

    async def expire(self, key: str, seconds: int) -> bool:
        try:
            return bool(await self.client.expire(self._k(key), seconds))
        except (RedisError, OSError) as e:
            self._degrade("expire", key, e)
            return await self.fallback.expire(key, seconds)

    async def clear_prefix(self, prefix: str) -> int:
        try:
            keys = [k async for k in self.client.scan_iter(match=f"{self._k(prefix)}*")]
            if keys:
                await self.client.delete(*keys)
            return len(keys)
        except (RedisError, OSError) as e:
            self._degrade("clear_prefix", prefix, e)
            return await self.fallback.clear_prefix(prefix)

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError) as e:
            logger.error(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.aclose()
        await self.fallback.close()


# Singleton (initialized on startup)
_cache: CacheBackend | None = None


def init_cache(
    redis_url: str | None,
    default_ttl: int = DEFAULT_TTL_SECONDS,
    key_prefix: str = "",
) -> CacheBackend:
    global _cache
    if redis_url:
        client = aioredis.from_url(redis_url, decode_responses=True)
        _cache = RedisCache(client, default_ttl, key_prefix)
        logger.info("Cache initialized with Redis backend")
    else:
        _cache = MemoryCache(default_ttl, key_prefix)
        logger.info("Cache initialized with in-memory backend")
    return _cache


def set_cache(cache: CacheBackend | None) -> None:
    global _cache
    _cache = cache


def get_cache() -> CacheBackend:
    """FastAPI dependency and service accessor for the process cache."""
    global _cache
    if _cache is None:
        _cache = MemoryCache()
    return _cache


async def close_cache() -> None:
    global _cache
    if _cache is not None:
        await _cache.close()
        _cache = None
