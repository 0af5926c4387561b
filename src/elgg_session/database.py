"""Database service backed by Redis.

The connection pool is created on first use of ``client``, never when the
service object is built, so resolving the service costs nothing until a
command is actually sent.
"""

from __future__ import annotations

import logging

from redis.asyncio import Redis

from .config import ServiceConfig


class Database:
    def __init__(
        self,
        config: ServiceConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config or ServiceConfig()
        self._logger = logger
        self._client: Redis | None = None

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = Redis.from_url(self._config.redis_url)
            if self._logger:
                self._logger.debug("Redis client created for %s", self._safe_url())
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        if self._logger:
            self._logger.debug("Redis client closed")

    def _safe_url(self) -> str:
        # Drop credentials from the URL before logging it
        scheme, sep, rest = self._config.redis_url.partition("://")
        return f"{scheme}{sep}{rest.rsplit('@', 1)[-1]}"
