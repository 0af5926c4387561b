"""Deprecation notices for retained-for-compatibility entry points."""

from __future__ import annotations

import logging
import warnings


def deprecated_notice(
    message: str,
    version: str,
    logger: logging.Logger | None = None,
    stacklevel: int = 3,
) -> None:
    """Report use of a deprecated entry point.

    Issues a ``DeprecationWarning`` and, when a logger is supplied, logs the
    same text at WARNING. Never raises unless warnings are configured as
    errors by the caller.

    Args:
        message: What was used and what replaces it.
        version: Version in which the entry point was deprecated.
        logger: Optional logger to mirror the notice to.
        stacklevel: Passed to ``warnings.warn``; the default points at the
            caller of the deprecated method.
    """
    text = f"Deprecated in {version}: {message}"
    warnings.warn(text, DeprecationWarning, stacklevel=stacklevel)
    if logger:
        logger.warning("%s", text)
