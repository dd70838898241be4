"""Redis client factory — backs the optional read-through cache in front of the stores.

Balances are never authoritative in Redis; PostgreSQL is the source of truth.
"""

from datetime import timedelta

import redis.asyncio as aioredis

from config.settings import settings
from src.wl_common.cache import ReadThroughCache

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Get or create the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


async def get_cache() -> ReadThroughCache | None:
    """Return the shared read-through cache, or None when caching is disabled."""
    if not settings.CACHE_ENABLED:
        return None
    return ReadThroughCache(
        await get_redis(),
        sliding=timedelta(seconds=settings.CACHE_SLIDING_EXPIRATION_SECONDS),
        absolute=timedelta(seconds=settings.CACHE_ABSOLUTE_EXPIRATION_SECONDS),
    )
