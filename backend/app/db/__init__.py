"""Storage connections package (Redis)."""

from app.db.redis import UserRecordStore, close_redis_pool, get_redis

__all__ = ["UserRecordStore", "close_redis_pool", "get_redis"]
