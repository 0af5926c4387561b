"""Service provider: lazily built, per-container shared services.

Every known service is registered up front as a factory. The first
``resolve`` of a key runs its factory and caches the result; later calls
return that exact object. Nothing is built when the provider itself is
created, so a request that never touches ``db`` never opens a connection.

Usage:
    services = ServiceProvider(AutoloadManager())
    services.db is services.resolve("db")  # True
    services.resolve("mailer")  # raises ServiceNotFoundError
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from .autoload import AutoloadManager
from .cache import VolatileMetadataCache
from .config import ServiceConfig
from .database import Database
from .exceptions import ServiceNotFoundError
from .hooks import PluginHookService
from .logger import Logger

ServiceFactory = Callable[["ServiceProvider"], Any]


def _metadata_cache(services: ServiceProvider) -> VolatileMetadataCache:
    return VolatileMetadataCache()


def _db(services: ServiceProvider) -> Database:
    return Database(services.config, logger=services.logger.stdlib_logger)


def _hooks(services: ServiceProvider) -> PluginHookService:
    return PluginHookService(logger=services.logger.stdlib_logger)


def _logger(services: ServiceProvider) -> Logger:
    config = services.config
    return Logger(logging.getLogger(config.logger_name), config.log_level)


_FACTORIES: dict[str, ServiceFactory] = {
    "metadata_cache": _metadata_cache,
    "db": _db,
    "hooks": _hooks,
    "logger": _logger,
}


class ServiceProvider:
    """Composition root for one request (or one process).

    Not safe to share between concurrent requests: memoization is unguarded.
    """

    def __init__(
        self,
        autoload_manager: AutoloadManager,
        config: ServiceConfig | None = None,
    ) -> None:
        self.config = config or ServiceConfig()
        self._factories: dict[str, ServiceFactory] = dict(_FACTORIES)
        self._factories["autoload_manager"] = lambda _services: autoload_manager
        self._instances: dict[str, Any] = {}

    def resolve(self, name: str) -> Any:
        """Return the service registered as ``name``, building it on first use.

        Raises:
            ServiceNotFoundError: If no factory is registered for ``name``.
        """
        if name in self._instances:
            return self._instances[name]
        try:
            factory = self._factories[name]
        except KeyError:
            raise ServiceNotFoundError(name) from None
        instance = factory(self)
        self._instances[name] = instance
        return instance

    def is_resolved(self, name: str) -> bool:
        return name in self._instances

    def keys(self) -> Iterator[str]:
        return iter(self._factories)

    @property
    def metadata_cache(self) -> VolatileMetadataCache:
        return self.resolve("metadata_cache")

    @property
    def autoload_manager(self) -> AutoloadManager:
        return self.resolve("autoload_manager")

    @property
    def db(self) -> Database:
        return self.resolve("db")

    @property
    def hooks(self) -> PluginHookService:
        return self.resolve("hooks")

    @property
    def logger(self) -> Logger:
        return self.resolve("logger")
