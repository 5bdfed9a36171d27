"""
Storage Service

Backends for per-user record storage. Sessions and goals are both stored as
JSON-compatible dicts keyed by (kind, user_id, record_id); the repositories
in app.services.sessions and app.services.goals.repository add the domain
semantics on top.

Backends:
    - InMemoryRecordStore: process-local dicts (development, tests)
    - RedisRecordStore: one Redis hash per user and kind (app.db.redis)

The backend is chosen by settings.STORAGE_BACKEND ("memory" | "redis").

Usage:
    from app.services.storage import get_record_store

    store = get_record_store()
    await store.put("sessions", user_id, session.id, session.model_dump(mode="json"))
    records = await store.get_all("sessions", user_id)
"""

import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Optional

from redis.exceptions import RedisError

from app.config import settings
from app.db.redis import UserRecordStore
from app.middleware.error_handling import StorageError

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class RecordStore(ABC):
    """
    Abstract per-user record store.

    Implementations must return copies: callers may mutate the records they
    receive without affecting stored state.
    """

    @abstractmethod
    async def get_all(self, kind: str, user_id: str) -> dict[str, Record]:
        """Get every record of a kind for a user, keyed by record id."""

    @abstractmethod
    async def get(self, kind: str, user_id: str, record_id: str) -> Optional[Record]:
        """Get one record, or None if missing."""

    @abstractmethod
    async def put(self, kind: str, user_id: str, record_id: str, data: Record) -> None:
        """Create or replace a record."""

    @abstractmethod
    async def put_many(self, kind: str, user_id: str, records: dict[str, Record]) -> None:
        """Create or replace several records."""

    @abstractmethod
    async def delete(self, kind: str, user_id: str, record_id: str) -> bool:
        """Delete a record. Returns whether it existed."""


class InMemoryRecordStore(RecordStore):
    """Process-local record store guarded by an asyncio lock."""

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], dict[str, Record]] = {}
        self._lock = asyncio.Lock()

    async def get_all(self, kind: str, user_id: str) -> dict[str, Record]:
        async with self._lock:
            return copy.deepcopy(self._data.get((kind, user_id), {}))

    async def get(self, kind: str, user_id: str, record_id: str) -> Optional[Record]:
        async with self._lock:
            record = self._data.get((kind, user_id), {}).get(record_id)
            return copy.deepcopy(record) if record is not None else None

    async def put(self, kind: str, user_id: str, record_id: str, data: Record) -> None:
        async with self._lock:
            self._data.setdefault((kind, user_id), {})[record_id] = copy.deepcopy(data)

    async def put_many(self, kind: str, user_id: str, records: dict[str, Record]) -> None:
        async with self._lock:
            bucket = self._data.setdefault((kind, user_id), {})
            for record_id, data in records.items():
                bucket[record_id] = copy.deepcopy(data)

    async def delete(self, kind: str, user_id: str, record_id: str) -> bool:
        async with self._lock:
            return self._data.get((kind, user_id), {}).pop(record_id, None) is not None


class RedisRecordStore(RecordStore):
    """
    Redis-backed record store.

    Connection and protocol failures surface as StorageError (503).
    """

    def __init__(self) -> None:
        self._stores: dict[str, UserRecordStore] = {}

    def _store(self, kind: str) -> UserRecordStore:
        if kind not in self._stores:
            self._stores[kind] = UserRecordStore(kind)
        return self._stores[kind]

    async def get_all(self, kind: str, user_id: str) -> dict[str, Record]:
        try:
            return await self._store(kind).get_all(user_id)
        except RedisError as e:
            logger.error(f"Failed to read {kind} for user {user_id}: {e}")
            raise StorageError(f"Could not read {kind}") from e

    async def get(self, kind: str, user_id: str, record_id: str) -> Optional[Record]:
        try:
            return await self._store(kind).get(user_id, record_id)
        except RedisError as e:
            logger.error(f"Failed to read {kind} record {record_id}: {e}")
            raise StorageError(f"Could not read {kind}") from e

    async def put(self, kind: str, user_id: str, record_id: str, data: Record) -> None:
        try:
            await self._store(kind).put(user_id, record_id, data)
        except RedisError as e:
            logger.error(f"Failed to write {kind} record {record_id}: {e}")
            raise StorageError(f"Could not save {kind}") from e

    async def put_many(self, kind: str, user_id: str, records: dict[str, Record]) -> None:
        try:
            await self._store(kind).put_many(user_id, records)
        except RedisError as e:
            logger.error(f"Failed to write {len(records)} {kind} records: {e}")
            raise StorageError(f"Could not save {kind}") from e

    async def delete(self, kind: str, user_id: str, record_id: str) -> bool:
        try:
            return await self._store(kind).delete(user_id, record_id)
        except RedisError as e:
            logger.error(f"Failed to delete {kind} record {record_id}: {e}")
            raise StorageError(f"Could not delete {kind}") from e


@lru_cache()
def get_record_store() -> RecordStore:
    """Get the configured record store (cached singleton)."""
    if settings.uses_redis:
        logger.info("Using Redis record store")
        return RedisRecordStore()
    logger.info("Using in-memory record store")
    return InMemoryRecordStore()
