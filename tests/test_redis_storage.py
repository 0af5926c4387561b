"""Tests for RedisSessionStorage."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import phpserialize
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from elgg_session import Session, SessionConfig, SessionError, SessionLockError, SessionStartError
from elgg_session.storage import RedisSessionStorage

SESSION_ID = "a1b2c3d4e5f6a7b8c9d0e1f2a3b4c5d6"


def data_calls(mock_redis: AsyncMock) -> list[Any]:
    """SET calls that wrote session data rather than a lock."""
    return [c for c in mock_redis.set.call_args_list if "_LOCK" not in str(c[0][0])]


class TestRedisStorageInit:
    """Tests for RedisSessionStorage initialization."""

    def test_init_registers_lua_script(self, mock_redis: AsyncMock) -> None:
        """Test that __init__ registers the Lua release lock script."""
        storage = RedisSessionStorage(mock_redis)
        assert storage._release_lock_script is not None

    def test_key_formats(self, redis_storage: RedisSessionStorage) -> None:
        """Test that keys follow PHP's redis session handler format."""
        assert redis_storage._session_key("abc123") == "PHPREDIS_SESSION:abc123"
        assert redis_storage._lock_key("abc123") == "PHPREDIS_SESSION:abc123_LOCK"

    def test_custom_prefix(self, mock_redis: AsyncMock) -> None:
        storage = RedisSessionStorage(
            mock_redis, SessionConfig(session_prefix="S:", lock_suffix=":L")
        )
        assert storage._lock_key("abc") == "S:abc:L"


class TestRedisStorageStart:
    """Tests for start()."""

    @pytest.mark.asyncio
    async def test_start_acquires_lock_and_loads(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        mock_redis.get.return_value = phpserialize.dumps({"user": 123, "cart": [1, 2, 3]})
        redis_storage.set_id(SESSION_ID)

        assert await redis_storage.start() is True

        lock_call = mock_redis.set.call_args_list[0]
        assert lock_call[0][0] == f"PHPREDIS_SESSION:{SESSION_ID}_LOCK"
        assert lock_call[1]["nx"] is True
        assert lock_call[1]["px"] == 10000
        mock_redis.get.assert_awaited_once_with(f"PHPREDIS_SESSION:{SESSION_ID}")
        assert redis_storage.get("user") == 123
        assert redis_storage.get("cart") == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_start_without_id_generates_one(
        self, redis_storage: RedisSessionStorage
    ) -> None:
        await redis_storage.start()

        session_id = redis_storage.get_id()
        assert session_id is not None
        assert len(session_id) == 32
        assert redis_storage.all() == {}

    @pytest.mark.asyncio
    async def test_start_twice_is_idempotent(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        await redis_storage.start()
        await redis_storage.start()

        assert mock_redis.set.await_count == 1

    @pytest.mark.asyncio
    async def test_lock_timeout_raises_error(self, mock_redis: AsyncMock) -> None:
        """Test start() raises SessionLockError when lock cannot be acquired."""
        mock_redis.set.return_value = False  # Lock never acquired
        storage = RedisSessionStorage(mock_redis, SessionConfig(lock_timeout=0.1))

        with pytest.raises(SessionLockError):
            await storage.start()

        assert not storage.is_started()

    @pytest.mark.asyncio
    async def test_lock_retries_on_contention(self, mock_redis: AsyncMock) -> None:
        """Test start() retries when lock is held by another process."""
        mock_redis.set.side_effect = [False, False, True]
        storage = RedisSessionStorage(mock_redis, SessionConfig(lock_timeout=1.0))

        await storage.start()

        assert mock_redis.set.await_count == 3

    @pytest.mark.asyncio
    async def test_redis_error_becomes_start_error(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        mock_redis.set.side_effect = RedisConnectionError("down")

        with pytest.raises(SessionStartError) as exc_info:
            await redis_storage.start()

        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_load_failure_releases_lock(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        """If the data cannot be read after locking, the lock is given back."""
        mock_redis.get.side_effect = RedisConnectionError("down")
        redis_storage.set_id(SESSION_ID)

        with pytest.raises(SessionStartError):
            await redis_storage.start()

        release = redis_storage._release_lock_script
        release.assert_awaited_once()
        assert release.await_args.kwargs["keys"] == [f"PHPREDIS_SESSION:{SESSION_ID}_LOCK"]
        assert redis_storage._lock_token is None
        assert not redis_storage.is_started()

    @pytest.mark.asyncio
    async def test_corrupt_payload_releases_lock(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        mock_redis.get.return_value = b"a:1:{s:4:\"user\";"

        with pytest.raises(SessionStartError):
            await redis_storage.start()

        redis_storage._release_lock_script.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_start_succeeds_after_failed_load(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        mock_redis.get.side_effect = [RedisConnectionError("down"), None]
        redis_storage.set_id(SESSION_ID)

        with pytest.raises(SessionStartError):
            await redis_storage.start()
        assert await redis_storage.start() is True

        await redis_storage.save()
        assert redis_storage._release_lock_script.await_count == 2

    @pytest.mark.asyncio
    async def test_uses_unique_lock_tokens(self, mock_redis: AsyncMock) -> None:
        first = RedisSessionStorage(mock_redis)
        second = RedisSessionStorage(mock_redis)
        await first.start()
        await second.start()

        tokens = [c[0][1] for c in mock_redis.set.call_args_list]
        assert tokens[0] != tokens[1]
        assert len(tokens[0]) == 32


class TestRedisStorageSave:
    """Tests for save()."""

    @pytest.mark.asyncio
    async def test_save_writes_and_releases_lock(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        redis_storage.set_id(SESSION_ID)
        await redis_storage.start()
        redis_storage.set("cart_count", 99)

        await redis_storage.save()

        calls = data_calls(mock_redis)
        assert len(calls) == 1
        assert calls[0][0][0] == f"PHPREDIS_SESSION:{SESSION_ID}"
        assert calls[0][1]["ex"] == 3600
        saved = phpserialize.loads(calls[0][0][1], decode_strings=True)
        assert saved == {"cart_count": 99}
        redis_storage._release_lock_script.assert_awaited_once()
        assert not redis_storage.is_started()

    @pytest.mark.asyncio
    async def test_save_releases_lock_when_write_fails(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        await redis_storage.start()
        mock_redis.set.side_effect = RedisConnectionError("down")

        with pytest.raises(RedisConnectionError):
            await redis_storage.save()

        redis_storage._release_lock_script.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_save_requires_started(self, redis_storage: RedisSessionStorage) -> None:
        with pytest.raises(SessionError, match="not started"):
            await redis_storage.save()


class TestRedisStorageRegenerate:
    """Tests for regenerate()."""

    @pytest.mark.asyncio
    async def test_regenerate_moves_lock_and_keeps_data(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        redis_storage.set_id(SESSION_ID)
        await redis_storage.start()
        redis_storage.set("cart", [1, 2, 3])

        assert await redis_storage.regenerate() is True

        new_id = redis_storage.get_id()
        assert new_id != SESSION_ID
        assert redis_storage.get("cart") == [1, 2, 3]
        mock_redis.delete.assert_not_awaited()
        release = redis_storage._release_lock_script
        release.assert_awaited_once()
        assert release.await_args.kwargs["keys"] == [f"PHPREDIS_SESSION:{SESSION_ID}_LOCK"]

        await redis_storage.save()
        assert data_calls(mock_redis)[0][0][0] == f"PHPREDIS_SESSION:{new_id}"

    @pytest.mark.asyncio
    async def test_regenerate_destroy_deletes_old_data(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        redis_storage.set_id(SESSION_ID)
        await redis_storage.start()

        await redis_storage.regenerate(destroy=True)

        mock_redis.delete.assert_awaited_once_with(f"PHPREDIS_SESSION:{SESSION_ID}")

    @pytest.mark.asyncio
    async def test_failed_destroy_keeps_old_id_and_releases_new_lock(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        redis_storage.set_id(SESSION_ID)
        await redis_storage.start()
        mock_redis.delete.side_effect = RedisConnectionError("down")

        with pytest.raises(RedisConnectionError):
            await redis_storage.regenerate(destroy=True)

        assert redis_storage.get_id() == SESSION_ID
        assert redis_storage.is_started()
        release = redis_storage._release_lock_script
        new_lock_key = mock_redis.set.call_args_list[1][0][0]
        assert release.await_args.kwargs["keys"] == [new_lock_key]

        await redis_storage.save()
        assert release.await_args.kwargs["keys"] == [f"PHPREDIS_SESSION:{SESSION_ID}_LOCK"]
        assert release.await_count == 2


class TestRedisStorageWithSession:
    """The façade over Redis storage."""

    @pytest.mark.asyncio
    async def test_token_is_persisted(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        session = Session(redis_storage)
        await session.start()
        token = session.get("__elgg_session")

        await session.save()

        saved = phpserialize.loads(data_calls(mock_redis)[0][0][1], decode_strings=True)
        assert saved["__elgg_session"] == token

    @pytest.mark.asyncio
    async def test_existing_token_is_kept(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        mock_redis.get.return_value = phpserialize.dumps({"__elgg_session": "abc"})
        session = Session(redis_storage)

        await session.start()

        assert session.get("__elgg_session") == "abc"

    @pytest.mark.asyncio
    async def test_empty_payload_loads_as_empty_dict(
        self, redis_storage: RedisSessionStorage, mock_redis: AsyncMock
    ) -> None:
        mock_redis.get.return_value = phpserialize.dumps({})

        await redis_storage.start()

        assert redis_storage.all() == {}
