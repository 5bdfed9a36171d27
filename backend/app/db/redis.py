"""
Redis Connection and Utilities

Provides Redis connection pooling and a per-user record store used as the
session/goal storage backend.

Layout:
    Each user's records of one kind live in a single hash:
        {key_prefix}:{kind}:{user_id}  →  {record_id: json}

Usage:
    from app.db.redis import get_redis, UserRecordStore

    # Get Redis connection
    redis = await get_redis()
    await redis.ping()

    # Per-user records
    store = UserRecordStore("sessions")
    await store.put("user-1", "s-1", {"id": "s-1"})
    records = await store.get_all("user-1")
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis

from app.config import settings, yaml_config

logger = logging.getLogger(__name__)

# Get Redis configuration from yaml config
redis_config: dict[str, Any] = yaml_config.get("redis", {})
KEY_PREFIX: str = redis_config.get("key_prefix", "study")


# Connection pool (lazily initialized)
_redis_pool: Optional[redis.ConnectionPool] = None


async def get_redis_pool() -> redis.ConnectionPool:
    """Get or create the Redis connection pool."""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.ConnectionPool.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
        )
    return _redis_pool


async def get_redis() -> redis.Redis:
    """
    Get a Redis connection from the pool.

    Usage:
        redis = await get_redis()
        await redis.hgetall("study:sessions:user-1")
    """
    pool = await get_redis_pool()
    return redis.Redis(connection_pool=pool)


async def close_redis_pool() -> None:
    """Close the Redis connection pool."""
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.disconnect()
        _redis_pool = None


class UserRecordStore:
    """
    JSON records of one kind, grouped per user in a Redis hash.

    Records that fail to decode are skipped with a warning rather than
    failing the whole read.
    """

    def __init__(self, kind: str, prefix: str = KEY_PREFIX) -> None:
        self.kind = kind
        self.prefix = prefix

    def _make_key(self, user_id: str) -> str:
        """Generate the hash key for a user."""
        return f"{self.prefix}:{self.kind}:{user_id}"

    async def get_all(self, user_id: str) -> dict[str, dict[str, Any]]:
        """Get every record for a user, keyed by record id."""
        r = await get_redis()
        raw = await r.hgetall(self._make_key(user_id))

        records: dict[str, dict[str, Any]] = {}
        for record_id, value in (raw or {}).items():
            try:
                records[record_id] = json.loads(value)
            except (TypeError, json.JSONDecodeError):
                logger.warning(
                    f"Skipping undecodable {self.kind} record {record_id} for user {user_id}"
                )
        return records

    async def get(self, user_id: str, record_id: str) -> Optional[dict[str, Any]]:
        """Get a single record, or None if missing."""
        r = await get_redis()
        value = await r.hget(self._make_key(user_id), record_id)
        if value is None:
            return None
        return json.loads(value)

    async def put(self, user_id: str, record_id: str, data: dict[str, Any]) -> None:
        """Create or replace a record."""
        r = await get_redis()
        await r.hset(self._make_key(user_id), record_id, json.dumps(data))

    async def put_many(self, user_id: str, records: dict[str, dict[str, Any]]) -> None:
        """Create or replace several records in one round trip."""
        if not records:
            return
        r = await get_redis()
        await r.hset(
            self._make_key(user_id),
            mapping={record_id: json.dumps(data) for record_id, data in records.items()},
        )

    async def delete(self, user_id: str, record_id: str) -> bool:
        """Delete a record. Returns whether it existed."""
        r = await get_redis()
        removed = await r.hdel(self._make_key(user_id), record_id)
        return bool(removed)
