"""Read-Through Cache — optional cache in front of followees() and query_records().

Invariants:
    - Cached repositories implement the same Protocols as the SQL ones
    - Follow/unfollow invalidate the follower's followee set; clock-in/clock-out
      invalidate the owner's record list
    - Cached record lists hold each owner's completed records for the widest window
      (MAX_WINDOW_DAYS) and are narrowed to the request's `since` in memory
    - Backend failures are logged and treated as misses; the store stays the source of truth
    - A read that misses, then races a clock-out, can write back a list that predates
      the invalidation; it is served until records_ttl_seconds expires

Design Decisions:
    - Values stored as JSON in both backends, so the in-memory backend used in tests
      exercises the same serialization path as Redis
    - One cache key per owner (not per viewer): a clock-out invalidates one key no matter
      how many followers that owner has
    - Redis via redis-py asyncio client, mirroring the queue client's Redis.from_url wiring
"""

import json
import logging
import time
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable

import redis.asyncio as redis
from redis import exceptions as redis_exceptions

from app.core.domain_types import (
    UserId, SleepRecordId, SleepRecordView, MAX_WINDOW_DAYS, as_utc,
)
from app.core.repository_protocols import (
    CacheBackend, FollowRepository, SleepRecordRepository,
)
from app.core.sleep_feed import window_start

logger = logging.getLogger(__name__)


# ─── Backends ────────────────────────────────────────────────────

class InMemoryCache:
    """Process-local TTL cache for development and tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._items: dict[str, tuple[float, str]] = {}

    async def get_many(self, keys: list[str]) -> list[object | None]:
        now = self._clock()
        values: list[object | None] = []
        for key in keys:
            entry = self._items.get(key)
            if entry is None or entry[0] <= now:
                self._items.pop(key, None)
                values.append(None)
            else:
                values.append(json.loads(entry[1]))
        return values

    async def set_many(self, items: dict[str, object], ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds
        for key, value in items.items():
            self._items[key] = (expires_at, json.dumps(value))

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._items.pop(key, None)


class RedisCache:
    """Redis-backed cache. FeedCache namespaces every key with its prefix."""

    def __init__(self, url: str):
        self.url = url
        self.client = redis.Redis.from_url(url)

    async def get_many(self, keys: list[str]) -> list[object | None]:
        if not keys:
            return []
        try:
            raw = await self.client.mget(keys)
        except redis_exceptions.RedisError as e:
            logger.warning(f"Cache read failed, treating as miss: {e}")
            return [None] * len(keys)
        return [_decode(key, value) for key, value in zip(keys, raw)]

    async def set_many(self, items: dict[str, object], ttl_seconds: int) -> None:
        if not items:
            return
        try:
            async with self.client.pipeline(transaction=False) as pipe:
                for key, value in items.items():
                    pipe.setex(key, ttl_seconds, json.dumps(value))
                await pipe.execute()
        except redis_exceptions.RedisError as e:
            logger.warning(f"Cache write failed: {e}")

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self.client.delete(*keys)
        except redis_exceptions.RedisError as e:
            # A stale entry outlives its write by at most one TTL
            logger.error(f"Cache invalidation failed for {keys}: {e}")

    async def close(self) -> None:
        await self.client.aclose()


# ─── Serialization ───────────────────────────────────────────────

def _decode(key: str, value: bytes | None) -> object | None:
    if value is None:
        return None
    try:
        return json.loads(value)
    except ValueError:
        logger.warning(f"Undecodable cache entry {key}, treating as miss")
        return None


def _dump_record(record: SleepRecordView) -> dict:
    return {
        "id": record.id,
        "owner_id": record.owner_id,
        "owner_name": record.owner_name,
        "bedtime": record.bedtime.isoformat(),
        "wake_time": record.wake_time.isoformat() if record.wake_time else None,
        "duration_minutes": record.duration_minutes,
        "created_at": record.created_at.isoformat(),
    }


def _load_record(data: dict) -> SleepRecordView:
    wake_time = data["wake_time"]
    return SleepRecordView(
        id=SleepRecordId(data["id"]),
        owner_id=UserId(data["owner_id"]),
        owner_name=data["owner_name"],
        bedtime=as_utc(datetime.fromisoformat(data["bedtime"])),
        wake_time=as_utc(datetime.fromisoformat(wake_time)) if wake_time else None,
        duration_minutes=data["duration_minutes"],
        created_at=as_utc(datetime.fromisoformat(data["created_at"])),
    )


# ─── Read-through repositories ───────────────────────────────────

class FeedCache:
    """Key layout, TTLs and invalidation for the feed's cached reads."""

    def __init__(
        self,
        backend: CacheBackend,
        prefix: str = "sleep_tracker",
        followees_ttl_seconds: int = 3600,
        records_ttl_seconds: int = 300,
    ):
        self.backend = backend
        self.prefix = prefix
        self.followees_ttl_seconds = followees_ttl_seconds
        self.records_ttl_seconds = records_ttl_seconds

    def followees_key(self, user_id: UserId) -> str:
        return f"{self.prefix}:following_ids:user:{user_id}"

    def records_key(self, user_id: UserId) -> str:
        return f"{self.prefix}:completed_records:user:{user_id}"

    async def invalidate_followees(self, user_id: UserId) -> None:
        await self.backend.delete(self.followees_key(user_id))

    async def invalidate_records(self, user_id: UserId) -> None:
        await self.backend.delete(self.records_key(user_id))

    def wrap_follows(self, inner: FollowRepository) -> "CachedFollowRepository":
        return CachedFollowRepository(inner, self)

    def wrap_records(
        self, inner: SleepRecordRepository,
    ) -> "CachedSleepRecordRepository":
        return CachedSleepRecordRepository(inner, self)


class CachedFollowRepository:
    """FollowRepository decorator caching each user's followee id set."""

    def __init__(self, inner: FollowRepository, cache: FeedCache):
        self.inner = inner
        self.cache = cache

    async def followees(self, user_id: UserId) -> set[UserId]:
        key = self.cache.followees_key(user_id)
        [cached] = await self.cache.backend.get_many([key])
        if cached is not None:
            return {UserId(i) for i in cached}
        ids = await self.inner.followees(user_id)
        await self.cache.backend.set_many(
            {key: sorted(ids)}, self.cache.followees_ttl_seconds,
        )
        return ids


class CachedSleepRecordRepository:
    """SleepRecordRepository decorator caching completed records per owner."""

    def __init__(
        self,
        inner: SleepRecordRepository,
        cache: FeedCache,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.inner = inner
        self.cache = cache
        self._clock = clock

    async def query_records(
        self, owner_ids: set[UserId], since: datetime,
    ) -> list[SleepRecordView]:
        owners = sorted(owner_ids)
        if not owners:
            return []
        cached = await self.cache.backend.get_many(
            [self.cache.records_key(o) for o in owners],
        )

        records: list[SleepRecordView] = []
        missing: list[UserId] = []
        for owner, value in zip(owners, cached):
            if value is None:
                missing.append(owner)
            else:
                records.extend(_load_record(item) for item in value)

        if missing:
            fetch_since = min(
                as_utc(since), window_start(self._clock(), MAX_WINDOW_DAYS),
            )
            fetched = await self.inner.query_records(set(missing), fetch_since)
            by_owner: dict[UserId, list[SleepRecordView]] = defaultdict(list)
            for record in fetched:
                by_owner[record.owner_id].append(record)
            await self.cache.backend.set_many(
                {
                    self.cache.records_key(o): [_dump_record(r) for r in by_owner[o]]
                    for o in missing
                },
                self.cache.records_ttl_seconds,
            )
            records.extend(fetched)

        lower = as_utc(since)
        return [r for r in records if as_utc(r.bedtime) >= lower]


# ─── Lifecycle ───────────────────────────────────────────────────

# Singleton (initialized on startup, None when caching is disabled)
feed_cache: FeedCache | None = None


def init_cache(
    backend_name: str,
    redis_url: str = "",
    prefix: str = "sleep_tracker",
    followees_ttl_seconds: int = 3600,
    records_ttl_seconds: int = 300,
) -> FeedCache | None:
    global feed_cache
    if backend_name == "none":
        feed_cache = None
        return None
    backend: CacheBackend
    if backend_name == "redis":
        backend = RedisCache(redis_url)
    else:
        backend = InMemoryCache()
    feed_cache = FeedCache(
        backend, prefix, followees_ttl_seconds, records_ttl_seconds,
    )
    logger.info(
        "Feed cache enabled", extra={"cache_backend": backend_name},
    )
    return feed_cache


async def close_cache() -> None:
    global feed_cache
    if feed_cache and isinstance(feed_cache.backend, RedisCache):
        await feed_cache.backend.close()
    feed_cache = None


def get_feed_cache() -> FeedCache | None:
    """FastAPI dependency for the optional feed cache."""
    return feed_cache
