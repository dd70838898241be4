"""Read-through cache over Redis.

Entries are JSON envelopes ``{"cached_at": iso, "value": ...}``. Each hit slides the
TTL forward (GETEX); ``cached_at`` caps the total lifetime at the absolute expiration.
The cache is best-effort: read errors are misses, write/invalidate errors are logged
and swallowed so a Redis outage never fails a store call.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any, TypeVar

import redis.asyncio as aioredis

from src.wl_common.datetime_utils import utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReadThroughCache:
    def __init__(
        self,
        redis: aioredis.Redis,
        sliding: timedelta = timedelta(minutes=5),
        absolute: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._redis = redis
        self._sliding_seconds = int(sliding.total_seconds())
        self._absolute = absolute
        self._clock = clock

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._redis.getex(key, ex=self._sliding_seconds)
        except Exception:
            logger.warning("Cache read failed for key %s", key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            envelope = json.loads(raw)
            cached_at = datetime.fromisoformat(envelope["cached_at"])
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding malformed cache entry %s", key)
            await self.invalidate(key)
            return None
        if self._clock() - cached_at >= self._absolute:
            await self.invalidate(key)
            return None
        return envelope["value"]

    async def set(self, key: str, value: Any) -> None:
        envelope = json.dumps({"cached_at": self._clock().isoformat(), "value": value})
        try:
            await self._redis.set(key, envelope, ex=self._sliding_seconds)
        except Exception:
            logger.warning("Cache write failed for key %s", key, exc_info=True)

    async def invalidate(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self._redis.delete(*keys)
        except Exception:
            logger.warning("Cache invalidation failed for keys %s", keys, exc_info=True)


class CachedStore:
    """Base for store adapters that put a ReadThroughCache in front of an inner store.

    ``bypass`` returns True while the owning unit of work has an open transaction;
    reads then go straight to the inner store and nothing is cached, so mutations
    always see committed-or-own state. Keys invalidated by writes are remembered
    and invalidated again once the unit of work commits.
    """

    def __init__(self, cache: ReadThroughCache, bypass: Callable[[], bool] | None = None) -> None:
        self._cache = cache
        self._bypass = bypass or (lambda: False)
        self._written_keys: set[str] = set()

    async def _read_through(
        self,
        key: str,
        load: Callable[[], Awaitable[T]],
        dump: Callable[[T], Any],
        restore: Callable[[Any], T],
    ) -> T:
        if self._bypass():
            return await load()
        cached = await self._cache.get(key)
        if cached is not None:
            return restore(cached)
        value = await load()
        if value is not None:
            await self._cache.set(key, dump(value))
        return value

    async def _invalidate(self, *keys: str) -> None:
        self._written_keys.update(keys)
        await self._cache.invalidate(*keys)

    async def invalidate_written(self) -> None:
        keys = tuple(self._written_keys)
        self._written_keys.clear()
        await self._cache.invalidate(*keys)
