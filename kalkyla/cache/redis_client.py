"""
Redis cache for slow-changing reference data (quarterly electricity prices).
Challenge: Fail gracefully when Redis is down; the database is always the source of truth.
Design: Single lazily created client; helpers return None/False instead of raising.
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis

from kalkyla.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

_redis: Redis | None = None


async def get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=1,
            socket_timeout=1,
        )
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None


async def cache_get_json(key: str) -> Any | None:
    """Cached JSON value, or None on miss or error."""
    try:
        client = await get_redis()
        raw = await client.get(key)
    except Exception as exc:
        logger.debug("Cache read failed for %s: %s", key, exc)
        return None
    return json.loads(raw) if raw else None


async def cache_set_json(key: str, value: Any, ttl_seconds: int = 300) -> bool:
    try:
        client = await get_redis()
        await client.setex(key, ttl_seconds, json.dumps(value, default=str))
        return True
    except Exception as exc:
        logger.debug("Cache write failed for %s: %s", key, exc)
        return False


async def cache_delete(*keys: str) -> bool:
    try:
        client = await get_redis()
        await client.delete(*keys)
        return True
    except Exception as exc:
        logger.debug("Cache delete failed: %s", exc)
        return False
