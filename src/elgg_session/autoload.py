"""Lazy class loader.

Maps short class names to ``"package.module:Attribute"`` import paths and
imports them on first use, the way entry points are resolved. The map can
be exported and restored so a warm map survives between processes.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any


class AutoloadManager:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._class_map: dict[str, str] = {}
        self._loaded: dict[str, Any] = {}
        self._logger = logger

    def register(self, name: str, path: str) -> None:
        """Map ``name`` to an import path of the form ``module:attribute``."""
        module, sep, attr = path.partition(":")
        if not module or not sep or not attr:
            raise ValueError(f"Invalid import path for {name}: {path!r}")
        self._class_map[name] = path
        self._loaded.pop(name, None)

    def add_classes(self, module_name: str) -> list[str]:
        """Register every public class defined in ``module_name``.

        Returns:
            The names that were registered.
        """
        module = importlib.import_module(module_name)
        names = []
        for attr, value in vars(module).items():
            if attr.startswith("_") or not isinstance(value, type):
                continue
            if value.__module__ != module.__name__:
                continue
            self._class_map[attr] = f"{module_name}:{attr}"
            self._loaded[attr] = value
            names.append(attr)
        return names

    def load(self, name: str) -> Any:
        """Import and return the object registered under ``name``.

        Raises:
            LookupError: If ``name`` is not in the class map.
            ImportError: If the mapped module cannot be imported.
            AttributeError: If the module lacks the mapped attribute.
        """
        if name in self._loaded:
            return self._loaded[name]
        try:
            path = self._class_map[name]
        except KeyError:
            raise LookupError(f"No class registered as {name}") from None
        module_name, _, attr = path.partition(":")
        value = getattr(importlib.import_module(module_name), attr)
        self._loaded[name] = value
        if self._logger:
            self._logger.debug("Autoloaded %s from %s", name, path)
        return value

    def is_registered(self, name: str) -> bool:
        return name in self._class_map

    def get_class_map(self) -> dict[str, str]:
        return dict(self._class_map)

    def set_class_map(self, class_map: dict[str, str]) -> None:
        """Replace the class map; previously imported objects are forgotten."""
        self._class_map = dict(class_map)
        self._loaded.clear()
