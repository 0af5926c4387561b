"""Redis session storage compatible with PHP's redis session handler.

Python and PHP can share sessions through this backend: the data key is
``{session_prefix}{session_id}``, the payload is PHP-serialized with
``phpserialize``, and the session is locked between ``start`` and ``save``
with the same ``SET NX PX`` lock and Lua release script PHP uses.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import secrets
from typing import Any

import phpserialize
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..config import SessionConfig
from ..constants import LOCK_RETRY_INTERVAL, RELEASE_LOCK_SCRIPT
from ..exceptions import SessionError, SessionLockError, SessionStartError
from .base import AttributeStorage, generate_session_id


def _array_hook(items: list[tuple[Any, Any]]) -> Any:
    """Turn PHP arrays with keys 0..n-1 back into lists."""
    if all(key == index for index, (key, _) in enumerate(items)):
        return [value for _, value in items]
    return dict(items)


class RedisSessionStorage(AttributeStorage):
    """Async Redis-backed session storage.

    Usage:
        config = SessionConfig(session_expire=3600, lock_timeout=10.0)
        storage = RedisSessionStorage(redis_client, config)
        storage.set_id(session_id_from_cookie)
        session = Session(storage)

        await session.start()   # lock acquired, data loaded
        session.set("cart_count", 5)
        await session.save()    # data written, lock released
    """

    def __init__(
        self,
        redis: Redis,
        config: SessionConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the storage.

        Args:
            redis: Async Redis client instance.
            config: Session configuration. Uses defaults if None.
            logger: Optional logger for debugging.
        """
        super().__init__(config, logger)
        self._redis = redis
        self._release_lock_script = self._redis.register_script(RELEASE_LOCK_SCRIPT)
        self._lock_token: str | None = None

    def _session_key(self, session_id: str) -> str:
        """Build Redis key for session data."""
        return f"{self._config.session_prefix}{session_id}"

    def _lock_key(self, session_id: str) -> str:
        """Build Redis key for session lock (PHP compatible format)."""
        return f"{self._session_key(session_id)}{self._config.lock_suffix}"

    def _decode_session(self, raw: bytes) -> dict[str, Any]:
        """Decode raw PHP-serialized session data."""
        data = phpserialize.loads(
            raw,
            decode_strings=True,
            object_hook=lambda _name, d: dict(d),
            array_hook=_array_hook,
        )
        if isinstance(data, list):
            # Empty (or purely numeric) top-level array
            data = dict(enumerate(data))
        return data

    async def _acquire_lock(self, session_id: str) -> str:
        """Acquire the session lock, matching PHP's SET NX PX pattern.

        Returns:
            The token that owns the lock.

        Raises:
            SessionLockError: If the lock is not acquired within the timeout.
        """
        lock_key = self._lock_key(session_id)
        token = secrets.token_hex(16)
        loop = asyncio.get_running_loop()
        start = loop.time()
        while loop.time() - start < self._config.lock_timeout:
            result = await self._redis.set(
                lock_key,
                token,
                nx=True,
                px=int(self._config.lock_timeout * 1000),
            )
            if result:
                if self._logger:
                    self._logger.debug("Session lock acquired: %s", session_id[:8] + "...")
                return token
            await asyncio.sleep(LOCK_RETRY_INTERVAL)
        raise SessionLockError(session_id, self._config.lock_timeout)

    async def _release_lock(self, session_id: str, token: str) -> None:
        """Release the lock using the Lua script (same as PHP)."""
        await self._release_lock_script(keys=[self._lock_key(session_id)], args=[token])

    async def start(self) -> bool:
        """Lock and load the session, creating a new id if none was set.

        The lock is released again if the session data cannot be loaded.

        Raises:
            SessionLockError: If another process holds the lock past the timeout.
            SessionStartError: If Redis cannot be reached or the stored
                payload cannot be decoded.
        """
        if self._started:
            return True
        if not self._id:
            self._id = generate_session_id()
        try:
            token = await self._acquire_lock(self._id)
        except RedisError as exc:
            raise SessionStartError(self._id) from exc

        try:
            raw = await self._redis.get(self._session_key(self._id))
            attributes = self._decode_session(raw) if raw else {}
        except (RedisError, ValueError) as exc:
            with contextlib.suppress(RedisError):
                await self._release_lock(self._id, token)
            raise SessionStartError(self._id) from exc

        self._lock_token = token
        self._attributes = attributes
        self._started = True
        if self._logger:
            self._logger.debug("Session started: %s", self._short_id())
        return True

    async def regenerate(self, destroy: bool = False) -> bool:
        """Move the session to a new id; attributes are written on ``save``.

        With ``destroy`` the old data key is deleted right away, otherwise it
        is left to expire. If the delete fails the session stays on its old
        id and the new lock is released.
        """
        if not self._started:
            await self.start()
        old_id = self._id
        old_token = self._lock_token
        new_id = generate_session_id()

        new_token = await self._acquire_lock(new_id)
        if destroy:
            try:
                await self._redis.delete(self._session_key(old_id))
            except RedisError:
                with contextlib.suppress(RedisError):
                    await self._release_lock(new_id, new_token)
                raise
        self._id = new_id
        self._lock_token = new_token
        if old_token:
            await self._release_lock(old_id, old_token)

        if self._logger:
            self._logger.info(
                "Session id regenerated: %s -> %s, destroy=%s",
                old_id[:8] + "...",
                self._short_id(),
                destroy,
            )
        return True

    async def save(self) -> None:
        """Write session data and release the lock.

        Raises:
            SessionError: If the session is not started.
        """
        if not self._started:
            raise SessionError("Cannot save a session that is not started")
        try:
            await self._redis.set(
                self._session_key(self._id),
                phpserialize.dumps(self._attributes),
                ex=self._config.session_expire,
            )
        finally:
            if self._lock_token:
                await self._release_lock(self._id, self._lock_token)
            self._lock_token = None
            self._started = False
        if self._logger:
            self._logger.debug("Session saved and lock released: %s", self._short_id())

