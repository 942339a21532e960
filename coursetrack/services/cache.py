"""Read-through cache for unit summaries.

Computing a unit summary reads every activity of the unit and scores
each section.  The result is cached per (user, unit):

  Client -> cache -> hit  -> return
  Client -> cache -> miss -> activity log -> compute -> populate -> return

Entries are keyed by a per-(user, unit) generation counter:

  1. Readers fetch the generation BEFORE querying the activity log and
     populate the entry for that generation only.
  2. An accepted activity or a new completion marker bumps the
     generation.  A reader that computed from an older snapshot writes
     to a key nobody reads any more, so it cannot resurrect stale data.
  3. TTL (SUMMARY_CACHE_TTL_SECONDS) expires orphaned entries.

The Redis backend is best-effort: a Redis error is logged and treated
as a miss, never surfaced to the caller.  The activity log remains the
source of truth.  The calculator itself never sees the cache.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from redis.exceptions import RedisError

from coursetrack.db.redis import redis_pool

logger = logging.getLogger(__name__)


def summary_generation_key(user_id: str, unit_id: str) -> str:
    return f"summary_gen:{user_id}:{unit_id}"


def summary_cache_key(user_id: str, unit_id: str, generation: int) -> str:
    return f"summary:{user_id}:{unit_id}:{generation}"


@runtime_checkable
class CacheService(Protocol):
    async def get(self, key: str) -> str | None:
        """Fetch a cached value.  Returns None on cache miss."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value with a TTL (time to live)."""
        ...

    async def incr(self, key: str) -> None:
        """Atomically increment an integer counter, creating it at 1."""
        ...


async def summary_generation(cache: CacheService, user_id: str, unit_id: str) -> int:
    raw = await cache.get(summary_generation_key(user_id, unit_id))
    return int(raw) if raw is not None else 0


async def invalidate_summary(cache: CacheService, user_id: str, unit_id: str) -> None:
    await cache.incr(summary_generation_key(user_id, unit_id))


class InMemoryCacheService:
    """In-memory cache for dev and tests, no TTL enforcement."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._store[key] = value

    async def incr(self, key: str) -> None:
        self._store[key] = str(int(self._store.get(key, "0")) + 1)


class RedisCacheService:
    """Redis-backed cache, shared across all API instances."""

    _PREFIX = "cache:"

    def __init__(self, redis_client) -> None:
        self._redis = redis_client

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(f"{self._PREFIX}{key}")
        except RedisError:
            logger.warning(
                "Cache get failed key=%s, treating as miss", key, exc_info=True
            )
            return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._redis.setex(f"{self._PREFIX}{key}", ttl_seconds, value)
        except RedisError:
            logger.warning("Cache set failed key=%s", key, exc_info=True)

    async def incr(self, key: str) -> None:
        # No TTL: an expired counter would restart at a generation whose
        # entry may still be live.
        try:
            await self._redis.incr(f"{self._PREFIX}{key}")
        except RedisError:
            logger.warning("Cache incr failed key=%s", key, exc_info=True)


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

if redis_pool is not None:
    cache_service: CacheService = RedisCacheService(redis_pool)
else:
    cache_service = InMemoryCacheService()
