"""In-memory session storage.

Sessions live in a plain dict keyed by session id. Pass the same dict to
several storages to simulate consecutive requests sharing a backend.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import SessionConfig
from ..exceptions import SessionError
from .base import AttributeStorage, generate_session_id


class MockSessionStorage(AttributeStorage):
    """Storage keeping persisted sessions in process memory.

    Usage:
        sessions: dict[str, dict[str, Any]] = {}
        storage = MockSessionStorage(sessions)
        session = Session(storage)
        await session.start()
        session.set("cart", [1, 2, 3])
        await session.save()  # sessions[storage.get_id()] now holds the cart
    """

    def __init__(
        self,
        sessions: dict[str, dict[str, Any]] | None = None,
        config: SessionConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config, logger)
        self.sessions = sessions if sessions is not None else {}

    async def start(self) -> bool:
        if self._started:
            return True
        if not self._id:
            self._id = generate_session_id()
        self._attributes = dict(self.sessions.get(self._id, {}))
        self._started = True
        if self._logger:
            self._logger.debug("Session started: %s", self._short_id())
        return True

    async def regenerate(self, destroy: bool = False) -> bool:
        if not self._started:
            await self.start()
        if destroy:
            self.sessions.pop(self._id, None)
        self._id = generate_session_id()
        if self._logger:
            self._logger.debug(
                "Session id regenerated: %s, destroy=%s", self._short_id(), destroy
            )
        return True

    async def save(self) -> None:
        if not self._started:
            raise SessionError("Cannot save a session that is not started")
        self.sessions[self._id] = dict(self._attributes)
        self._started = False
        if self._logger:
            self._logger.debug("Session saved: %s", self._short_id())
