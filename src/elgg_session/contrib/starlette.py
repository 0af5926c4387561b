"""Starlette/FastAPI middleware for Elgg sessions.

Builds a fresh ``ServiceProvider`` and ``Session`` for every request,
starts the session from the session cookie, and exposes both in
``request.state`` and in contextvars for DI access. The session is saved
(and its lock released) when the request finishes, even on error.

Install with: pip install elgg-session[starlette]
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..autoload import AutoloadManager
from ..config import ServiceConfig, SessionConfig
from ..context import set_current_services, set_current_session
from ..sanitize import sanitize_session_id
from ..services import ServiceProvider
from ..session import Session
from ..storage import RedisSessionStorage, SessionStorage

StorageFactory = Callable[[ServiceProvider], SessionStorage]


class ElggSessionMiddleware(BaseHTTPMiddleware):
    """Middleware to set up the per-request session and services.

    Sets:
    - request.state.session / request.state.services (direct access in routes)
    - contextvars (``get_current_session()`` / ``get_current_services()``)

    Usage:
        from fastapi import FastAPI
        from elgg_session.contrib.starlette import ElggSessionMiddleware

        app = FastAPI()
        app.add_middleware(ElggSessionMiddleware, redis=Redis.from_url(url))

        # Or with logging:
        import logging
        logger = logging.getLogger("session")
        app.add_middleware(ElggSessionMiddleware, redis=redis, logger=logger)
    """

    def __init__(
        self,
        app: ASGIApp,
        redis: Redis | None = None,
        session_config: SessionConfig | None = None,
        service_config: ServiceConfig | None = None,
        autoload_manager: AutoloadManager | None = None,
        storage_factory: StorageFactory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application.
            redis: Shared Redis client for session storage. If None, each
                request uses (and closes) the ``db`` service's client.
            session_config: Session configuration (cookie name, expiry...).
            service_config: Configuration for the per-request services.
            autoload_manager: Class loader handed to every provider.
            storage_factory: Builds the storage for a request; overrides
                the Redis storage.
            logger: Optional logger for debugging.
        """
        super().__init__(app)
        self._redis = redis
        self._session_config = session_config or SessionConfig()
        self._service_config = service_config or ServiceConfig()
        self._autoload_manager = autoload_manager or AutoloadManager()
        self._storage_factory = storage_factory
        self._logger = logger

    def _build_storage(self, services: ServiceProvider) -> SessionStorage:
        if self._storage_factory is not None:
            return self._storage_factory(services)
        redis = self._redis if self._redis is not None else services.db.client
        return RedisSessionStorage(redis, self._session_config, logger=self._logger)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process the request inside a started session."""
        services = ServiceProvider(self._autoload_manager, self._service_config)
        storage = self._build_storage(services)
        session = Session(
            storage,
            hooks=services.hooks,
            logger=self._logger,
            token_key=self._session_config.token_key,
        )

        cookie_name = self._session_config.session_name
        cookie_id = sanitize_session_id(
            request.cookies.get(cookie_name), self._session_config, logger=self._logger
        )
        if cookie_id:
            session.set_id(cookie_id)

        try:
            await session.start()
            request.state.session = session
            request.state.services = services
            set_current_session(session)
            set_current_services(services)
            if self._logger:
                self._logger.debug("Session context set: %s", session.get_id()[:8] + "...")

            try:
                response = await call_next(request)
            finally:
                if session.is_started():
                    await session.save()
        finally:
            set_current_session(None)
            set_current_services(None)
            if self._redis is None and services.is_resolved("db"):
                await services.db.close()

        session_id = session.get_id()
        if session_id and session_id != cookie_id:
            response.set_cookie(
                cookie_name,
                session_id,
                max_age=self._session_config.session_expire,
                path="/",
                httponly=True,
                samesite="lax",
            )
        return response
