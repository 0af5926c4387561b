"""Session storage backends."""

from __future__ import annotations

from .base import AttributeStorage, SessionStorage, generate_session_id
from .memory import MockSessionStorage
from .redis_storage import RedisSessionStorage

__all__ = [
    "AttributeStorage",
    "SessionStorage",
    "MockSessionStorage",
    "RedisSessionStorage",
    "generate_session_id",
]
