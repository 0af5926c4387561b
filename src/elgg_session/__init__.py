"""Elgg session façade and service provider.

A session façade over pluggable storage (in-memory or PHP-compatible
Redis), plus a container that lazily builds and memoizes the shared
services of a request.

Basic usage:
    from elgg_session import Session, SessionConfig
    from elgg_session.storage import RedisSessionStorage
    from redis.asyncio import Redis

    redis = Redis.from_url("redis://localhost:6379")
    storage = RedisSessionStorage(redis, SessionConfig(session_expire=3600))
    session = Session(storage)

    await session.start()
    session.set("cart", [1, 2, 3])
    await session.migrate(destroy=True)
    await session.save()

Services:
    from elgg_session import AutoloadManager, ServiceProvider

    services = ServiceProvider(AutoloadManager())
    services.hooks.register_handler("session:get", "all", handler)

With FastAPI/Starlette:
    from elgg_session.contrib.starlette import ElggSessionMiddleware

    app = FastAPI()
    app.add_middleware(ElggSessionMiddleware, redis=redis)

    # Inside a request
    session = get_current_session()
"""

from __future__ import annotations

from .autoload import AutoloadManager
from .cache import VolatileMetadataCache
from .config import ServiceConfig, SessionConfig
from .constants import (
    DEFAULT_LOCK_TIMEOUT,
    DEFAULT_SESSION_EXPIRE,
    DEFAULT_SESSION_NAME,
    GENERATED_SESSION_ID_PATTERN,
    LOCK_RETRY_INTERVAL,
    LOCK_SUFFIX,
    RELEASE_LOCK_SCRIPT,
    RESERVED_KEYS,
    SESSION_ID_PATTERN,
    SESSION_PREFIX,
    SESSION_TOKEN_KEY,
)
from .context import (
    get_current_services,
    get_current_session,
    set_current_services,
    set_current_session,
)
from .database import Database
from .deprecation import deprecated_notice
from .exceptions import (
    ElggSessionError,
    ServiceNotFoundError,
    SessionContextError,
    SessionError,
    SessionLockError,
    SessionStartError,
)
from .hooks import PluginHookService
from .logger import Logger
from .sanitize import sanitize_session_id
from .services import ServiceProvider
from .session import Session

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "Session",
    "ServiceProvider",
    "SessionConfig",
    "ServiceConfig",
    # Services
    "AutoloadManager",
    "Database",
    "Logger",
    "PluginHookService",
    "VolatileMetadataCache",
    # Exceptions
    "ElggSessionError",
    "SessionError",
    "SessionStartError",
    "SessionLockError",
    "SessionContextError",
    "ServiceNotFoundError",
    # Context helpers
    "set_current_session",
    "get_current_session",
    "set_current_services",
    "get_current_services",
    # Utility functions
    "sanitize_session_id",
    "deprecated_notice",
    # Constants
    "SESSION_PREFIX",
    "LOCK_SUFFIX",
    "SESSION_TOKEN_KEY",
    "RESERVED_KEYS",
    "DEFAULT_SESSION_NAME",
    "DEFAULT_SESSION_EXPIRE",
    "DEFAULT_LOCK_TIMEOUT",
    "LOCK_RETRY_INTERVAL",
    "RELEASE_LOCK_SCRIPT",
    "SESSION_ID_PATTERN",
    "GENERATED_SESSION_ID_PATTERN",
]
