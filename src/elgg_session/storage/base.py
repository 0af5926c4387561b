"""Storage backend contract and the attribute handling shared by backends."""

from __future__ import annotations

import logging
import secrets
from typing import Any, Protocol, runtime_checkable

from ..config import SessionConfig


@runtime_checkable
class SessionStorage(Protocol):
    """What ``Session`` needs from a storage backend.

    Lifecycle methods that may perform I/O are coroutines; attribute
    access works on data already loaded by ``start``.
    """

    async def start(self) -> bool: ...

    async def regenerate(self, destroy: bool = False) -> bool: ...

    async def save(self) -> None: ...

    def clear(self) -> None: ...

    def is_started(self) -> bool: ...

    def get_id(self) -> str | None: ...

    def set_id(self, session_id: str) -> None: ...

    def get_name(self) -> str: ...

    def set_name(self, name: str) -> None: ...

    def get(self, name: str, default: Any = None) -> Any: ...

    def set(self, name: str, value: Any) -> None: ...

    def remove(self, name: str) -> Any: ...

    def has(self, name: str) -> bool: ...

    def all(self) -> dict[str, Any]: ...


def generate_session_id() -> str:
    """Return a new 32-character hex session id."""
    return secrets.token_hex(16)


class AttributeStorage:
    """Attribute bag, id and name bookkeeping for concrete backends.

    Subclasses implement ``start``, ``regenerate`` and ``save``.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config or SessionConfig()
        self._logger = logger
        self._attributes: dict[str, Any] = {}
        self._id: str | None = None
        self._name = self._config.session_name
        self._started = False

    def is_started(self) -> bool:
        return self._started

    def get_id(self) -> str | None:
        return self._id

    def set_id(self, session_id: str) -> None:
        if self._started:
            if self._logger:
                self._logger.debug("Ignoring set_id on a started session")
            return
        self._id = session_id

    def get_name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        if self._started:
            if self._logger:
                self._logger.debug("Ignoring set_name on a started session")
            return
        self._name = name

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._attributes[name] = value

    def remove(self, name: str) -> Any:
        return self._attributes.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._attributes

    def all(self) -> dict[str, Any]:
        return dict(self._attributes)

    def clear(self) -> None:
        self._attributes.clear()

    def _short_id(self) -> str:
        session_id = self._id or ""
        return session_id[:8] + "..." if len(session_id) > 8 else session_id
