"""Plugin hook service.

Handlers are registered for a ``(hook, type)`` pair and called in priority
order with ``(hook, type, returnvalue, params)``. A handler that returns
something other than None replaces the value passed to the next handler
and, eventually, to the caller of ``trigger``. The type ``"all"`` matches
every type and the hook ``"all"`` matches every hook.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

HookHandler = Callable[[str, str, Any, Any], Any]

DEFAULT_PRIORITY = 500


class PluginHookService:
    """Registry and dispatcher for plugin hooks."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        # (hook, type) -> priority -> handlers in registration order
        self._handlers: dict[tuple[str, str], dict[int, list[HookHandler]]] = {}
        self._logger = logger

    def register_handler(
        self,
        hook: str,
        type: str,
        callback: HookHandler,
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        """Register ``callback`` for ``hook``/``type``.

        Returns:
            False if ``callback`` is not callable, True otherwise.
        """
        if not hook or not type or not callable(callback):
            return False
        by_priority = self._handlers.setdefault((hook, type), {})
        by_priority.setdefault(priority, []).append(callback)
        return True

    def unregister_handler(self, hook: str, type: str, callback: HookHandler) -> bool:
        """Remove the first registration of ``callback`` for ``hook``/``type``."""
        by_priority = self._handlers.get((hook, type), {})
        for priority in sorted(by_priority):
            handlers = by_priority[priority]
            if callback in handlers:
                handlers.remove(callback)
                if not handlers:
                    del by_priority[priority]
                return True
        return False

    def has_handler(self, hook: str, type: str) -> bool:
        return bool(self._handlers.get((hook, type)))

    def get_ordered_handlers(self, hook: str, type: str) -> list[HookHandler]:
        """Handlers for a hook, most specific registrations first within a priority."""
        merged: dict[int, list[HookHandler]] = {}
        keys = dict.fromkeys([(hook, type), ("all", type), (hook, "all"), ("all", "all")])
        for key in keys:
            for priority, handlers in self._handlers.get(key, {}).items():
                merged.setdefault(priority, []).extend(handlers)
        ordered: list[HookHandler] = []
        for priority in sorted(merged):
            ordered.extend(merged[priority])
        return ordered

    def trigger(
        self,
        hook: str,
        type: str,
        params: Any = None,
        returnvalue: Any = None,
    ) -> Any:
        """Run the handlers for ``hook``/``type`` and return the final value."""
        for handler in self.get_ordered_handlers(hook, type):
            result = handler(hook, type, returnvalue, params)
            if result is not None:
                returnvalue = result
        if self._logger:
            self._logger.debug("Triggered hook %s:%s", hook, type)
        return returnvalue
