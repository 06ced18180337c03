"""
Redis caching service for read-heavy listings.

CACHING STRATEGY
================

What we cache (JSON-serialized response bodies):
  - Event listings, keyed by the normalized query:   "events:list:<query>"
  - Active categories:                                "categories:list"
  - A user's bookings, keyed per user:                "bookings:user=<id>:<flags>"

Invalidation strategy:
  - Routes queue patterns on the DB session; they run only after commit
  - Event create/update/delete/seat changes and every booking mutation
    delete "events:*" keys (available seat counts changed)
  - Booking mutations also delete the owner's "bookings:user=<id>:*" keys
  - Category mutations delete "categories:*"
  - TTL-based expiry as safety net

  All keys live under one namespace prefix so invalidation is a SCAN
  over a pattern followed by DEL.

Why NOT cache single events:
  - The event page shows live seat availability; stale data would let
    users pick seats that are already gone.

When Redis is disabled or unreachable every function degrades to a
no-op and callers fall through to the database.
"""

import json
from typing import Any, Optional
from urllib.parse import urlencode

import redis.asyncio as redis
from sqlalchemy.ext.asyncio import AsyncSession

from event_booking.core.config import get_settings
from event_booking.core.logging import get_logger
from event_booking.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

KEY_PREFIX = "event_booking:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def event_list_key(params: dict[str, Any]) -> str:
    """Build a stable key from listing filters; unset filters are dropped."""
    present = sorted((k, str(v)) for k, v in params.items() if v is not None)
    return f"events:list:{urlencode(present)}"


def category_list_key() -> str:
    return "categories:list"


def user_bookings_key(user_id: int, include_cancelled: bool) -> str:
    return f"bookings:user={user_id}:cancelled={include_cancelled}"


async def get_cached(key: str) -> Optional[Any]:
    client = await get_redis()
    if not client:
        return None

    full_key = KEY_PREFIX + key
    try:
        data = await client.get(full_key)
        if data:
            logger.debug("cache_hit", key=full_key)
            record_cache_operation("get", "hit")
            return json.loads(data)
        logger.debug("cache_miss", key=full_key)
        record_cache_operation("get", "miss")
    except Exception as e:
        logger.error("cache_get_error", key=full_key, error=str(e))
        record_cache_operation("get", "error")

    return None


async def set_cached(key: str, data: Any, ttl: Optional[int] = None) -> None:
    client = await get_redis()
    if not client:
        return

    full_key = KEY_PREFIX + key
    ttl = ttl or settings.REDIS_CACHE_TTL
    try:
        await client.setex(full_key, ttl, json.dumps(data, default=str))
        logger.debug("cache_set", key=full_key, ttl=ttl)
        record_cache_operation("set", "ok")
    except Exception as e:
        logger.error("cache_set_error", key=full_key, error=str(e))
        record_cache_operation("set", "error")


async def invalidate(pattern: str) -> int:
    """Delete every cached key matching `pattern` (glob, without the namespace prefix)."""
    client = await get_redis()
    if not client:
        return 0

    deleted = 0
    try:
        async for key in client.scan_iter(match=KEY_PREFIX + pattern, count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", pattern=pattern, keys_deleted=deleted)
        record_cache_operation("invalidate", "ok")
    except Exception as e:
        logger.error("cache_invalidation_error", pattern=pattern, error=str(e))
        record_cache_operation("invalidate", "error")
    return deleted


EVENTS_PATTERN = "events:*"
CATEGORIES_PATTERN = "categories:*"

# Session.info key holding patterns waiting for the transaction to commit
_PENDING = "pending_cache_invalidations"


def user_bookings_pattern(user_id: int) -> str:
    return f"bookings:user={user_id}:*"


def invalidate_after_commit(db: AsyncSession, *patterns: str) -> None:
    """
    Queue patterns on the session. `get_db` deletes them once the request's
    transaction has committed and drops them on rollback, so a concurrent
    read can never re-cache pre-commit state.
    """
    db.info.setdefault(_PENDING, set()).update(patterns)


def invalidate_event_cache(db: AsyncSession) -> None:
    invalidate_after_commit(db, EVENTS_PATTERN)


def invalidate_category_cache(db: AsyncSession) -> None:
    invalidate_after_commit(db, CATEGORIES_PATTERN)


def invalidate_user_bookings(db: AsyncSession, user_id: int) -> None:
    invalidate_after_commit(db, user_bookings_pattern(user_id))


async def run_pending_invalidations(db: AsyncSession) -> None:
    for pattern in sorted(db.info.pop(_PENDING, ())):
        await invalidate(pattern)


def discard_pending_invalidations(db: AsyncSession) -> None:
    db.info.pop(_PENDING, None)


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
