"""Volatile metadata cache.

Per-request cache of entity metadata values keyed by entity GUID and
metadata name. Nothing is persisted; the cache dies with the container
that built it.

A name can be in one of three states for a GUID: unknown (never loaded),
known with a value, or known to be empty (loaded from the database and
found missing). ``load`` returns None for both unknown and empty names;
``is_known`` tells them apart.
"""

from __future__ import annotations

from typing import Any


class VolatileMetadataCache:
    def __init__(self) -> None:
        self._values: dict[int, dict[str, Any]] = {}
        # GUIDs whose full metadata set has been loaded
        self._fully_loaded: set[int] = set()

    def save(self, entity_guid: int, name: str, value: Any, allow_multiple: bool = False) -> None:
        """Cache a value, appending to a list of values if ``allow_multiple``."""
        entity = self._values.setdefault(entity_guid, {})
        if allow_multiple and entity.get(name) is not None:
            existing = entity[name]
            if not isinstance(existing, list):
                existing = [existing]
            existing.append(value)
            value = existing
        entity[name] = value

    def load(self, entity_guid: int, name: str) -> Any:
        return self._values.get(entity_guid, {}).get(name)

    def mark_unknown(self, entity_guid: int, name: str) -> None:
        """Forget a single name, e.g. after it was changed in the database."""
        self._fully_loaded.discard(entity_guid)
        self._values.get(entity_guid, {}).pop(name, None)

    def mark_empty(self, entity_guid: int, name: str) -> None:
        self._values.setdefault(entity_guid, {})[name] = None

    def is_known(self, entity_guid: int, name: str) -> bool:
        if entity_guid in self._fully_loaded:
            return True
        return name in self._values.get(entity_guid, {})

    def is_loaded(self, entity_guid: int) -> bool:
        return entity_guid in self._fully_loaded

    def populate(self, entity_guid: int, values: dict[str, Any]) -> None:
        """Replace everything cached for an entity with its complete metadata set."""
        self._values[entity_guid] = dict(values)
        self._fully_loaded.add(entity_guid)

    def clear(self, entity_guid: int) -> None:
        self._values.pop(entity_guid, None)
        self._fully_loaded.discard(entity_guid)

    def clear_all(self) -> None:
        self._values.clear()
        self._fully_loaded.clear()
