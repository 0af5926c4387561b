"""Configuration dataclasses for sessions and shared services.

Configuration objects replace global settings access, so a session or a
service provider can be built with nothing but its arguments.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .constants import (
    DEFAULT_LOCK_TIMEOUT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOGGER_NAME,
    DEFAULT_REDIS_URL,
    DEFAULT_SESSION_EXPIRE,
    DEFAULT_SESSION_NAME,
    LOCK_SUFFIX,
    SESSION_ID_PATTERN,
    SESSION_PREFIX,
    SESSION_TOKEN_KEY,
)
from .logger import LEVELS


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for session handling.

    Attributes:
        session_name: Session (and cookie) name.
        session_expire: Session expiration time in seconds.
        lock_timeout: Lock acquisition timeout in seconds.
        session_prefix: Redis key prefix for session data.
        lock_suffix: Redis key suffix for lock keys.
        token_key: Attribute holding the anti-forgery token seed.
        session_id_pattern: Cookie values must fully match this to be
            used as a session id.

    Example:
        >>> config = SessionConfig(
        ...     session_expire=3600,  # 1 hour
        ...     lock_timeout=10.0,
        ... )
        >>> storage = RedisSessionStorage(redis_client, config)
    """

    session_name: str = DEFAULT_SESSION_NAME
    session_expire: int = DEFAULT_SESSION_EXPIRE
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT
    session_prefix: str = SESSION_PREFIX
    lock_suffix: str = LOCK_SUFFIX
    token_key: str = SESSION_TOKEN_KEY
    session_id_pattern: re.Pattern[str] = SESSION_ID_PATTERN

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.session_name:
            raise ValueError("session_name cannot be empty")
        if self.session_expire <= 0:
            raise ValueError("session_expire must be positive")
        if self.lock_timeout <= 0:
            raise ValueError("lock_timeout must be positive")
        if not self.session_prefix:
            raise ValueError("session_prefix cannot be empty")
        if not self.token_key:
            raise ValueError("token_key cannot be empty")


@dataclass(frozen=True)
class ServiceConfig:
    """Configuration for the shared services built by ``ServiceProvider``.

    Attributes:
        redis_url: Connection URL for the ``db`` service.
        logger_name: Name of the stdlib logger wrapped by the ``logger`` service.
        log_level: Initial level of the ``logger`` service.
    """

    redis_url: str = DEFAULT_REDIS_URL
    logger_name: str = DEFAULT_LOGGER_NAME
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if not self.redis_url:
            raise ValueError("redis_url cannot be empty")
        if self.log_level.upper() not in LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LEVELS)}")
