"""Session cookie validation.

A cookie value is only used as a session id if it matches the configured
id pattern. Anything else starts a fresh session.
"""

from __future__ import annotations

import logging

from .config import SessionConfig


def sanitize_session_id(
    raw: str | None,
    config: SessionConfig | None = None,
    logger: logging.Logger | None = None,
) -> str | None:
    """Return the cookie value if it is a usable session id, else None.

    Surrounding whitespace is ignored. The default pattern accepts any
    26-128 character alphanumeric id so sessions opened by PHP can be
    resumed; set ``session_id_pattern=GENERATED_SESSION_ID_PATTERN`` to
    accept only ids made by ``generate_session_id``.

    Example:
        >>> sanitize_session_id(" a1b2c3d4e5f6a7b8c9d0e1f2a3b4c5d6 ")
        'a1b2c3d4e5f6a7b8c9d0e1f2a3b4c5d6'
        >>> sanitize_session_id("../../etc/passwd") is None
        True
    """
    if raw is None:
        return None
    candidate = raw.strip()
    pattern = (config or SessionConfig()).session_id_pattern
    if pattern.fullmatch(candidate):
        return candidate
    # Never log the value itself; it is attacker controlled
    if logger and candidate:
        logger.warning("Rejected session cookie: length=%d", len(candidate))
    return None
