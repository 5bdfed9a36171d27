"""
Unit Tests for the Record Store Backends.

Tests for:
- InMemoryRecordStore isolation and copy semantics
- RedisRecordStore delegation and error translation (StorageError)
- Backend selection from settings
"""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.middleware.error_handling import StorageError
from app.services.storage import (
    InMemoryRecordStore,
    RedisRecordStore,
    get_record_store,
)


class TestInMemoryRecordStore:
    """Tests for InMemoryRecordStore."""

    @pytest.mark.asyncio
    async def test_put_and_get(self, memory_store) -> None:
        """Stored records can be read back."""
        await memory_store.put("sessions", "u", "s-1", {"id": "s-1"})

        assert await memory_store.get("sessions", "u", "s-1") == {"id": "s-1"}
        assert await memory_store.get("sessions", "u", "missing") is None

    @pytest.mark.asyncio
    async def test_kinds_and_users_isolated(self, memory_store) -> None:
        """Records are scoped to (kind, user)."""
        await memory_store.put("sessions", "u", "x", {"id": "x"})

        assert await memory_store.get_all("goals", "u") == {}
        assert await memory_store.get_all("sessions", "other") == {}

    @pytest.mark.asyncio
    async def test_returns_copies(self, memory_store) -> None:
        """Mutating returned records doesn't change stored state."""
        await memory_store.put("sessions", "u", "s-1", {"id": "s-1", "tags": []})

        record = await memory_store.get("sessions", "u", "s-1")
        record["tags"].append("changed")
        all_records = await memory_store.get_all("sessions", "u")
        all_records["s-1"]["id"] = "changed"

        assert await memory_store.get("sessions", "u", "s-1") == {"id": "s-1", "tags": []}

    @pytest.mark.asyncio
    async def test_put_many_and_delete(self, memory_store) -> None:
        """put_many stores every record; delete reports existence."""
        await memory_store.put_many("goals", "u", {"a": {"id": "a"}, "b": {"id": "b"}})

        assert set(await memory_store.get_all("goals", "u")) == {"a", "b"}
        assert await memory_store.delete("goals", "u", "a") is True
        assert await memory_store.delete("goals", "u", "a") is False


class TestRedisRecordStore:
    """Tests for RedisRecordStore."""

    @pytest.mark.asyncio
    async def test_delegates_to_user_record_store(self, mock_redis) -> None:
        """Reads go through the per-kind Redis hash."""
        store = RedisRecordStore()

        with patch("app.db.redis.get_redis", return_value=mock_redis):
            mock_redis.hget = AsyncMock(return_value='{"id": "g-1"}')

            assert await store.get("goals", "u", "g-1") == {"id": "g-1"}
            assert mock_redis.hget.call_args[0][0].endswith(":goals:u")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["get_all", "get", "put", "put_many", "delete"])
    async def test_redis_errors_become_storage_errors(self, mock_redis, operation: str) -> None:
        """Connection failures surface as StorageError (503)."""
        store = RedisRecordStore()
        failure = AsyncMock(side_effect=RedisConnectionError("down"))
        mock_redis.hgetall = failure
        mock_redis.hget = failure
        mock_redis.hset = failure
        mock_redis.hdel = failure
        calls = {
            "get_all": lambda: store.get_all("sessions", "u"),
            "get": lambda: store.get("sessions", "u", "s-1"),
            "put": lambda: store.put("sessions", "u", "s-1", {"id": "s-1"}),
            "put_many": lambda: store.put_many("sessions", "u", {"s-1": {"id": "s-1"}}),
            "delete": lambda: store.delete("sessions", "u", "s-1"),
        }

        with patch("app.db.redis.get_redis", return_value=mock_redis):
            with pytest.raises(StorageError) as exc_info:
                await calls[operation]()

        assert exc_info.value.status_code == 503


class TestGetRecordStore:
    """Tests for backend selection."""

    @pytest.mark.parametrize(
        "uses_redis,expected",
        [
            pytest.param(False, InMemoryRecordStore, id="memory"),
            pytest.param(True, RedisRecordStore, id="redis"),
        ],
    )
    def test_backend_from_settings(self, uses_redis: bool, expected: type) -> None:
        """STORAGE_BACKEND picks the store implementation."""
        get_record_store.cache_clear()
        try:
            with patch("app.services.storage.settings") as mock_settings:
                mock_settings.uses_redis = uses_redis
                assert isinstance(get_record_store(), expected)
        finally:
            get_record_store.cache_clear()
