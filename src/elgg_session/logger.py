"""Logger service.

Wraps a stdlib ``logging.Logger`` with the level names used across the
platform (``OFF``, ``ERROR``, ``WARNING``, ``NOTICE``, ``INFO``) so code can
ask for a level threshold without knowing the logging backend.
"""

from __future__ import annotations

import logging
import pprint
from typing import Any, Final

OFF: Final[int] = 0
ERROR: Final[int] = 400
WARNING: Final[int] = 300
NOTICE: Final[int] = 250
INFO: Final[int] = 200

LEVELS: dict[str, int] = {
    "OFF": OFF,
    "ERROR": ERROR,
    "WARNING": WARNING,
    "NOTICE": NOTICE,
    "INFO": INFO,
}

# NOTICE sits between INFO and WARNING in stdlib terms
NOTICE_STDLIB_LEVEL: Final[int] = 25
logging.addLevelName(NOTICE_STDLIB_LEVEL, "NOTICE")

_STDLIB_LEVELS: dict[int, int] = {
    ERROR: logging.ERROR,
    WARNING: logging.WARNING,
    NOTICE: NOTICE_STDLIB_LEVEL,
    INFO: logging.INFO,
}


def _to_level(level: int | str) -> int:
    if isinstance(level, str):
        try:
            return LEVELS[level.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {level}") from None
    if level != OFF and level not in _STDLIB_LEVELS:
        raise ValueError(f"Unknown log level: {level}")
    return level


class Logger:
    """Level-filtered logger shared through the service provider.

    Messages below the current threshold are dropped before reaching
    ``logging``; with ``OFF`` nothing is logged at all.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: int | str = NOTICE,
    ) -> None:
        self._logger = logger or logging.getLogger("elgg")
        self._level = _to_level(level)

    @property
    def stdlib_logger(self) -> logging.Logger:
        return self._logger

    def get_level(self) -> int:
        return self._level

    def set_level(self, level: int | str) -> None:
        self._level = _to_level(level)

    def log(self, message: Any, level: int | str = NOTICE) -> bool:
        """Log a message if ``level`` passes the threshold.

        Returns:
            True if the message was handed to the stdlib logger.
        """
        level = _to_level(level)
        if self._level == OFF or level == OFF or level < self._level:
            return False
        if not isinstance(message, str):
            message = pprint.pformat(message)
        self._logger.log(_STDLIB_LEVELS[level], "%s", message)
        return True

    def error(self, message: Any) -> bool:
        return self.log(message, ERROR)

    def warn(self, message: Any) -> bool:
        return self.log(message, WARNING)

    def notice(self, message: Any) -> bool:
        return self.log(message, NOTICE)

    def info(self, message: Any) -> bool:
        return self.log(message, INFO)

    def dump(self, data: Any) -> str:
        """Pretty-print ``data`` at INFO and return the rendered text."""
        rendered = pprint.pformat(data)
        self.log(rendered, INFO)
        return rendered
