"""Redis connection management.

Mirrors engine.py: when REDIS_URL is configured we create a connection
pool; when it is None (local dev, tests) the summary cache falls back to
an in-memory implementation and no Redis server is needed.

Redis only ever holds cached unit summaries and their generation
counters.  Losing it costs a recomputation from the activity log, never
data.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis

from coursetrack.core.config import SETTINGS

logger = logging.getLogger(__name__)

if SETTINGS.redis_url:
    redis_pool: aioredis.Redis | None = aioredis.from_url(  # type: ignore[type-arg]
        SETTINGS.redis_url,
        decode_responses=True,  # return str instead of bytes
        max_connections=20,
    )
else:
    redis_pool = None


@asynccontextmanager
async def lifespan_redis():
    """Startup/shutdown hook for Redis, mirrors lifespan_db()."""
    if redis_pool is None:
        logger.info("No REDIS_URL configured, summary cache is in-memory")
        yield
        return

    try:
        await redis_pool.ping()  # type: ignore[misc]  # redis stubs mistype async ping as bool
        logger.info("Redis connected: %s", SETTINGS.redis_url)
    except Exception:
        logger.exception("Redis connection failed on startup")
        # Keep serving: the health endpoint reports the degraded cache.
        yield
        return

    yield

    await redis_pool.aclose()
    logger.info("Redis connection pool closed")
