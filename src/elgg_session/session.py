"""Elgg session façade.

Reserved keys: last_forward_from, msg, sticky_forms, user, guid, id, code,
name, username

Mapping-style access was deprecated in 1.9. Use ``session.get("foo")``
rather than ``session["foo"]``. The mapping accessors read and write a
separate legacy store, not the session storage, so values set one way are
not visible the other way. Nested access like ``session["foo"]["bar"]``
does not write through.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import MutableMapping
from typing import Any

from .constants import LEGACY_ACCESS_DEPRECATED_IN, SESSION_TOKEN_KEY
from .deprecation import deprecated_notice
from .hooks import PluginHookService
from .storage.base import SessionStorage


class Session:
    """Uniform access to session attributes and lifecycle.

    Usage:
        session = Session(MockSessionStorage())
        await session.start()
        session.set("cart", [1, 2, 3])

        # On login, drop the old id to prevent session fixation
        await session.migrate(destroy=True)

        await session.save()
    """

    def __init__(
        self,
        storage: SessionStorage,
        hooks: PluginHookService | None = None,
        legacy_store: MutableMapping[str, Any] | None = None,
        logger: logging.Logger | None = None,
        token_key: str = SESSION_TOKEN_KEY,
    ) -> None:
        """Initialize the session.

        Args:
            storage: The storage engine.
            hooks: Hook service consulted by the deprecated ``session[key]``
                lookup for missing keys.
            legacy_store: Request-scoped store behind the deprecated mapping
                accessors. A fresh dict is used if None.
            logger: Optional logger for lifecycle events and deprecation notices.
            token_key: Attribute that holds the anti-forgery token seed.
        """
        self._storage = storage
        self._hooks = hooks
        self._legacy_store: MutableMapping[str, Any] = (
            legacy_store if legacy_store is not None else {}
        )
        self._logger = logger
        self._token_key = token_key

    @property
    def storage(self) -> SessionStorage:
        return self._storage

    async def start(self) -> bool:
        """Start the session.

        Raises:
            SessionStartError: If the storage cannot be opened.
            SessionLockError: If the storage lock cannot be acquired.
        """
        result = await self._storage.start()
        self._generate_session_token()
        return result

    async def migrate(self, destroy: bool = False) -> bool:
        """Migrate the session to a new id while keeping its attributes.

        Args:
            destroy: Whether to delete the old session data now or leave it
                to expire.
        """
        return await self._storage.regenerate(destroy)

    async def invalidate(self) -> bool:
        """Clear all attributes and move to a new id, deleting the old data."""
        self._storage.clear()
        result = await self.migrate(True)
        self._generate_session_token()
        if self._logger:
            self._logger.info("Session invalidated")
        return result

    async def save(self) -> None:
        """Persist the attributes and close the storage."""
        await self._storage.save()

    def is_started(self) -> bool:
        return self._storage.is_started()

    def get_id(self) -> str | None:
        return self._storage.get_id()

    def set_id(self, session_id: str) -> None:
        self._storage.set_id(session_id)

    def get_name(self) -> str:
        return self._storage.get_name()

    def set_name(self, name: str) -> None:
        self._storage.set_name(name)

    def get(self, name: str, default: Any = None) -> Any:
        return self._storage.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._storage.set(name, value)

    def remove(self, name: str) -> Any:
        """Remove an attribute and return its value, or None if it was not set."""
        return self._storage.remove(name)

    def has(self, name: str) -> bool:
        return self._storage.has(name)

    def all(self) -> dict[str, Any]:
        return self._storage.all()

    def delete(self, key: str) -> None:
        """Deprecated alias of ``remove``."""
        self._deprecated("Session.delete() has been deprecated. Use remove()")
        self.remove(key)

    def _generate_session_token(self) -> None:
        # Server-side seed for CSRF tokens; never overwrite an existing one
        if not self.has(self._token_key):
            self.set(self._token_key, secrets.token_hex(16))

    def _deprecated(self, message: str) -> None:
        deprecated_notice(
            message,
            LEGACY_ACCESS_DEPRECATED_IN,
            logger=self._logger,
            stacklevel=4,
        )

    # Not a collection; keep iter() from falling back to __getitem__
    __iter__ = None

    def __setitem__(self, key: str, value: Any) -> None:
        self._deprecated("session[key] = value has been deprecated. Use set()")
        self._legacy_store[key] = value

    def __getitem__(self, key: str) -> Any:
        """Return a legacy value, asking the ``session:get`` hook if it is missing.

        Whatever the hook returns, including None, is stored for later lookups.
        """
        self._deprecated("session[key] has been deprecated. Use get()")

        value = self._legacy_store.get(key)
        if value is not None:
            return value

        orig_value = None
        if self._hooks is not None:
            value = self._hooks.trigger("session:get", key, None, orig_value)
        if value is not orig_value:
            self._deprecated("Plugin hook session:get has been deprecated")

        self._legacy_store[key] = value
        return value

    def __delitem__(self, key: str) -> None:
        self._deprecated("del session[key] has been deprecated. Use remove()")
        self._legacy_store.pop(key, None)

    def __contains__(self, key: object) -> bool:
        self._deprecated("key in session has been deprecated. Use has()")

        if self._legacy_store.get(key) is not None:  # type: ignore[call-overload]
            return True
        return bool(self[key])  # type: ignore[index]
