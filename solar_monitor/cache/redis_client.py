"""
Redis client for the latest-snapshot cache.

The GET /api/solar-data response payload is cached per limit under
``solar:latest:{generation}:{limit}``. Writes (ingest, cleanup) bump the
generation counter and then drop the old snapshot keys, so a snapshot read
from the database before a write committed can never be served after it:
it is stored under a generation no reader asks for any more.

All operations are best-effort: connection failures and corrupt entries
are logged but do not propagate, and with no REDIS_URL configured every
call is a no-op.

CHANGELOG:
- 2026-10-17: Initial creation
- 2026-10-17: Generation counter for snapshot keys; corrupt entries are misses

TODO:
- None
"""

import json
import logging

import redis.asyncio as redis

from solar_monitor.config import get_settings

logger = logging.getLogger(__name__)

SNAPSHOT_KEY_PREFIX = "solar:latest:"
GENERATION_KEY = "solar:snapshot-generation"


def snapshot_key(limit: int, generation: int) -> str:
    return f"{SNAPSHOT_KEY_PREFIX}{generation}:{limit}"


async def get_redis() -> redis.Redis | None:
    """Create an async Redis client from settings.

    Returns:
        redis.Redis | None: Async Redis client, or None when caching is
            disabled.
    """
    url = get_settings().redis_url
    if not url:
        return None
    return redis.from_url(url)


async def get_snapshot_generation() -> int | None:
    """Return the current snapshot generation.

    Returns:
        int | None: The counter (0 before the first write), or None when the
            cache is disabled or unreachable.
    """
    try:
        client = await get_redis()
        if client is None:
            return None
        try:
            raw = await client.get(GENERATION_KEY)
        finally:
            await client.aclose()
        return int(raw) if raw is not None else 0
    except Exception:
        logger.warning(
            "Redis read failed for key %s, skipping cache", GENERATION_KEY, exc_info=True
        )
        return None


async def get_cached_snapshot(limit: int, generation: int | None) -> list[dict] | None:
    """Return the cached snapshot payload for ``limit``, or None on miss."""
    if generation is None:
        return None
    key = snapshot_key(limit, generation)
    try:
        client = await get_redis()
        if client is None:
            return None
        try:
            cached = await client.get(key)
        finally:
            await client.aclose()
        if cached is None:
            return None
        data = json.loads(cached)
        if not isinstance(data, list):
            raise TypeError(f"expected a list, got {type(data).__name__}")
        return data
    except Exception:
        logger.warning("Redis read failed for key %s, falling back to DB", key, exc_info=True)
        return None


async def cache_snapshot(limit: int, generation: int | None, data: list[dict]) -> None:
    """Store a snapshot payload under ``generation`` with the configured TTL."""
    if generation is None:
        return
    key = snapshot_key(limit, generation)
    try:
        client = await get_redis()
        if client is None:
            return
        try:
            await client.set(key, json.dumps(data), ex=get_settings().cache_ttl_s)
        finally:
            await client.aclose()
    except Exception:
        logger.warning("Redis write failed for key %s", key, exc_info=True)


async def invalidate_snapshot_cache() -> None:
    """Advance the snapshot generation and delete every cached snapshot key."""
    try:
        client = await get_redis()
        if client is None:
            return
        try:
            await client.incr(GENERATION_KEY)
            keys = [key async for key in client.scan_iter(match=f"{SNAPSHOT_KEY_PREFIX}*")]
            if keys:
                await client.delete(*keys)
        finally:
            await client.aclose()
    except Exception:
        logger.warning("Failed to invalidate snapshot cache", exc_info=True)
