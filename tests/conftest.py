"""Test fixtures for elgg-session package."""

from __future__ import annotations

from typing import Any, Generator
from unittest.mock import AsyncMock

import pytest

from elgg_session import (
    AutoloadManager,
    ServiceProvider,
    Session,
    SessionConfig,
    set_current_services,
    set_current_session,
)
from elgg_session.storage import MockSessionStorage, RedisSessionStorage


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Create a mock Redis client for testing."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    # Mock the register_script method to return a callable
    mock_script = AsyncMock(return_value=1)
    redis.register_script = lambda script: mock_script
    return redis


@pytest.fixture
def config() -> SessionConfig:
    """Create a default SessionConfig for testing."""
    return SessionConfig(
        session_expire=3600,
        lock_timeout=10.0,
    )


@pytest.fixture
def sessions() -> dict[str, dict[str, Any]]:
    """Backing dict shared by in-memory storages."""
    return {}


@pytest.fixture
def storage(sessions: dict[str, dict[str, Any]], config: SessionConfig) -> MockSessionStorage:
    return MockSessionStorage(sessions, config)


@pytest.fixture
def redis_storage(mock_redis: AsyncMock, config: SessionConfig) -> RedisSessionStorage:
    """Create a RedisSessionStorage with mocked Redis."""
    return RedisSessionStorage(mock_redis, config)


@pytest.fixture
def session(storage: MockSessionStorage) -> Session:
    return Session(storage)


@pytest.fixture
def services() -> ServiceProvider:
    return ServiceProvider(AutoloadManager())


@pytest.fixture(autouse=True)
def clear_context() -> Generator[None, None, None]:
    """Make sure no request context leaks between tests."""
    set_current_session(None)
    set_current_services(None)
    yield
    set_current_session(None)
    set_current_services(None)
