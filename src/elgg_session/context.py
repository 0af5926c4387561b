"""Context variable helpers for the per-request session and services.

Uses Python's contextvars to store the current request's session and
service provider, enabling dependency injection without explicit
parameter passing.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING

from .exceptions import SessionContextError

if TYPE_CHECKING:
    from .services import ServiceProvider
    from .session import Session

# ContextVars for current request's session and services (DI pattern)
_current_session: ContextVar[Session | None] = ContextVar("elgg_session", default=None)
_current_services: ContextVar[ServiceProvider | None] = ContextVar(
    "elgg_services", default=None
)


def set_current_session(session: Session | None) -> None:
    """Set the session for the current request (called by middleware).

    Args:
        session: The session to set, or None to clear.
    """
    _current_session.set(session)


def get_current_session() -> Session:
    """Get the session for the current request.

    Raises:
        SessionContextError: If no session has been set.
    """
    session = _current_session.get()
    if session is None:
        raise SessionContextError()
    return session


def set_current_services(services: ServiceProvider | None) -> None:
    """Set the service provider for the current request."""
    _current_services.set(services)


def get_current_services() -> ServiceProvider | None:
    """Get the service provider for the current request, or None."""
    return _current_services.get()
