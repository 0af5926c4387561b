"""Constants for Elgg session management.

Redis key layout matches PHP's redis session handler so that a PHP
front end and this package can share the same sessions.
"""

from __future__ import annotations

import re
from typing import Final

# PHP redis session handler default prefix (configurable via session.save_path?prefix=)
SESSION_PREFIX: Final[str] = "PHPREDIS_SESSION:"

# PHP redis lock key suffix: {session_key}_LOCK
LOCK_SUFFIX: Final[str] = "_LOCK"

# Name of the session cookie
DEFAULT_SESSION_NAME: Final[str] = "Elgg"

# Attribute holding the server-side token used to build CSRF tokens
SESSION_TOKEN_KEY: Final[str] = "__elgg_session"

# Keys used by core; callers should not store free-form data under them
RESERVED_KEYS: frozenset[str] = frozenset(
    {
        "last_forward_from",
        "msg",
        "sticky_forms",
        "user",
        "guid",
        "id",
        "code",
        "name",
        "username",
    }
)

# Release the lock only if we still own it (same as PHP)
RELEASE_LOCK_SCRIPT: Final[str] = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

# Default session ids: 26-128 alphanumeric characters (PHP compatible)
SESSION_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z0-9]{26,128}$")

# Ids produced by generate_session_id: 32 lowercase hex characters
GENERATED_SESSION_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9a-f]{32}$")

# Default session expiration in seconds (24 hours, matching PHP default)
DEFAULT_SESSION_EXPIRE: Final[int] = 86400

# Default lock timeout in seconds
DEFAULT_LOCK_TIMEOUT: Final[float] = 30.0

# Lock retry interval in seconds (like PHP)
LOCK_RETRY_INTERVAL: Final[float] = 0.05

# Version in which mapping-style session access was deprecated
LEGACY_ACCESS_DEPRECATED_IN: Final[str] = "1.9"

DEFAULT_REDIS_URL: Final[str] = "redis://localhost:6379/0"

DEFAULT_LOGGER_NAME: Final[str] = "elgg"

DEFAULT_LOG_LEVEL: Final[str] = "NOTICE"
