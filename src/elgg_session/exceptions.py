"""Custom exceptions for Elgg session management and services.

Provides a hierarchy of exceptions for better error handling
in session and container operations.
"""

from __future__ import annotations


class ElggSessionError(Exception):
    """Base exception for every error raised by this package."""


class SessionError(ElggSessionError):
    """Base exception for session-related errors.

    All session-specific exceptions inherit from this class,
    allowing callers to catch all session errors with a single except clause.
    """


class SessionStartError(SessionError):
    """Raised when the session storage cannot be opened.

    Attributes:
        session_id: The session ID being started (truncated for security),
            or None if no ID had been assigned yet.
    """

    def __init__(
        self,
        session_id: str | None = None,
        message: str | None = None,
    ) -> None:
        if session_id is not None and len(session_id) > 8:
            session_id = session_id[:8] + "..."
        self.session_id = session_id
        if message is None:
            message = f"Failed to start the session {session_id or ''}".rstrip()
        super().__init__(message)


class SessionLockError(SessionError):
    """Raised when session lock cannot be acquired.

    This typically occurs when:
    - Another process holds the lock for too long
    - Lock timeout is reached

    Attributes:
        session_id: The session ID that couldn't be locked (truncated for security).
        timeout: The timeout value that was exceeded.
    """

    def __init__(
        self,
        session_id: str,
        timeout: float,
        message: str | None = None,
    ) -> None:
        self.session_id = session_id[:8] + "..." if len(session_id) > 8 else session_id
        self.timeout = timeout
        if message is None:
            message = f"Could not acquire session lock for {self.session_id} within {timeout}s"
        super().__init__(message)


class SessionContextError(SessionError):
    """Raised when no session is available in the current context.

    This occurs when code asks for the request's session outside of a
    request handled by ``ElggSessionMiddleware``.
    """

    def __init__(self, message: str | None = None) -> None:
        if message is None:
            message = "No session in context - middleware not set up"
        super().__init__(message)


class ServiceNotFoundError(ElggSessionError, KeyError):
    """Raised when a service key has no registered factory.

    Attributes:
        name: The unknown service key.
    """

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        if message is None:
            message = f"Service not found: {name}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])
