"""Services package: session and goal storage, goal tracking, and study analytics."""

from app.services.sessions import SessionRepository
from app.services.storage import (
    InMemoryRecordStore,
    RecordStore,
    RedisRecordStore,
    get_record_store,
)

__all__ = [
    "SessionRepository",
    "RecordStore",
    "InMemoryRecordStore",
    "RedisRecordStore",
    "get_record_store",
]
