"""Dependency Injection Container for the Ark game data mirror.

Provides a lightweight dependency injection system for wiring the game data
client, parser, provider and the services reading from it.

Usage:
    from utils.di_container import ServiceKeys, configure_container

    container = configure_container()
    provider = container.resolve(ServiceKeys.GAMEDATA_PROVIDER)
    await provider.sync_all()

    levels = container.resolve(ServiceKeys.LEVEL_SERVICE)
    info = levels.describe_level("Obt/Main/level_main_01-07", "1-7", "main_01-07")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DIContainerError(Exception):
    """Exception raised for DI container errors."""

    pass


class DIContainer:
    """Simple dependency injection container.

    Holds service instances and lazy factories. Thread-safe; a factory runs
    at most once and its result is cached.
    """

    def __init__(self) -> None:
        self._services: dict[str, Any] = {}
        self._factories: dict[str, Callable[[DIContainer], Any]] = {}
        self._lock = threading.RLock()

    def register(self, key: str, instance: Any) -> None:
        """Register a ready-made service instance under ``key``."""
        with self._lock:
            if key in self._services:
                logger.debug("Overwriting existing service: %s", key)
            self._services[key] = instance
            logger.debug("Registered service: %s", key)

    def register_factory(self, key: str, factory: Callable[[DIContainer], Any]) -> None:
        """Register a factory called with the container on first resolve."""
        with self._lock:
            if key in self._factories:
                logger.debug("Overwriting existing factory: %s", key)
            self._factories[key] = factory
            # Drop a cached instance so the new factory takes effect
            self._services.pop(key, None)
            logger.debug("Registered factory: %s", key)

    def resolve(self, key: str) -> Any:
        """Resolve a service by key.

        Raises:
            DIContainerError: If service is not registered
        """
        with self._lock:
            if key in self._services:
                return self._services[key]

            if key in self._factories:
                logger.debug("Creating service from factory: %s", key)
                instance = self._factories[key](self)
                self._services[key] = instance
                return instance

            available = sorted(set(self._services) | set(self._factories))
            raise DIContainerError(
                f"Service '{key}' not registered. Available: {available}"
            )

    def resolve_optional(self, key: str) -> Any | None:
        """Resolve a service by key, returning None if not found."""
        try:
            return self.resolve(key)
        except DIContainerError:
            return None

    def is_registered(self, key: str) -> bool:
        with self._lock:
            return key in self._services or key in self._factories

    def create(self, cls: type[T], **key_mappings: str) -> T:
        """Instantiate ``cls`` with constructor arguments resolved by key.

        Example:
            service = container.create(
                LevelService, gamedata_provider=ServiceKeys.GAMEDATA_PROVIDER
            )
        """
        resolved_args = {
            param_name: self.resolve(container_key)
            for param_name, container_key in key_mappings.items()
        }
        return cls(**resolved_args)

    def clear(self) -> None:
        """Clear all registered services and factories.

        Primarily for testing.
        """
        with self._lock:
            self._services.clear()
            self._factories.clear()
            logger.debug("Container cleared")

    def get_registered_keys(self) -> list[str]:
        with self._lock:
            return list(set(self._services.keys()) | set(self._factories.keys()))


class ServiceKeys:
    """Standard service key constants for the DI container."""

    # Configuration / infrastructure
    CONFIG = "config"
    METRICS = "metrics"

    # Game data
    GAMEDATA_CLIENT = "gamedata_client"
    GAMEDATA_PARSER = "gamedata_parser"
    GAMEDATA_PROVIDER = "gamedata_provider"

    # Business services
    LEVEL_SERVICE = "level_service"


# Global singleton container
_container_instance: DIContainer | None = None
_container_lock = threading.Lock()


def get_container() -> DIContainer:
    """Get the global DI container instance."""
    global _container_instance  # noqa: PLW0603
    if _container_instance is None:
        with _container_lock:
            if _container_instance is None:
                _container_instance = DIContainer()
    assert _container_instance is not None
    return _container_instance


def reset_container() -> None:
    """Reset the global container.

    Primarily for testing.
    """
    global _container_instance  # noqa: PLW0603
    with _container_lock:
        if _container_instance is not None:
            _container_instance.clear()
        _container_instance = None


def configure_container(container: DIContainer | None = None) -> DIContainer:
    """Configure the DI container with default service factories.

    Services are only instantiated when first resolved.

    Args:
        container: Container to configure (uses global if None)

    Returns:
        Configured container
    """
    if container is None:
        container = get_container()

    from utils.config import get_config
    from utils.metrics import get_metrics

    container.register(ServiceKeys.CONFIG, get_config())
    container.register(ServiceKeys.METRICS, get_metrics())

    def gamedata_client_factory(c: DIContainer) -> Any:
        from data.clients import GameDataClient

        config = c.resolve(ServiceKeys.CONFIG)
        return GameDataClient(
            config=config.gamedata,
            user_agent=config.app.computed_user_agent,
        )

    container.register_factory(ServiceKeys.GAMEDATA_CLIENT, gamedata_client_factory)

    def gamedata_parser_factory(c: DIContainer) -> Any:
        from data.parsers import GameDataJsonParser

        return GameDataJsonParser()

    container.register_factory(ServiceKeys.GAMEDATA_PARSER, gamedata_parser_factory)

    def gamedata_provider_factory(c: DIContainer) -> Any:
        from data import GameDataProvider

        return GameDataProvider(
            client=c.resolve(ServiceKeys.GAMEDATA_CLIENT),
            parser=c.resolve(ServiceKeys.GAMEDATA_PARSER),
            metrics=c.resolve(ServiceKeys.METRICS),
        )

    container.register_factory(
        ServiceKeys.GAMEDATA_PROVIDER, gamedata_provider_factory
    )

    def level_service_factory(c: DIContainer) -> Any:
        from services.level_service import LevelService

        return LevelService(gamedata_provider=c.resolve(ServiceKeys.GAMEDATA_PROVIDER))

    container.register_factory(ServiceKeys.LEVEL_SERVICE, level_service_factory)

    logger.info("DI container configured with default factories")
    return container
