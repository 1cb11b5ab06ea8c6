"""
Dependency Injection Container
================================

Simple service locator pattern for managing infrastructure dependencies.
Views reach domain services through this container so tests can swap the
image store or the event bus without patching module globals.

Usage:
    from infrastructure.container import container

    image_store = container.image_store()
    orders = container.order_service()
"""

import logging
from typing import Optional

from .events import EventBus, get_event_bus
from .images import ImageStoreFactory, ImageStoreInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton pattern.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._image_store: Optional[ImageStoreInterface] = None
            self._event_bus: Optional[EventBus] = None

            # Domain Services
            self._catalog_service = None
            self._order_service = None
            self._cascade_service = None
            self._account_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def image_store(self, backend: Optional[str] = None) -> ImageStoreInterface:
        """
        Get image store instance.

        Args:
            backend: 'cloudinary' or 'memory'. If None, uses configuration from settings

        Returns:
            ImageStoreInterface implementation (cached)
        """
        if self._image_store is None or backend is not None:
            self._image_store = ImageStoreFactory.create(backend)
            logger.debug(f"Created image store: {type(self._image_store).__name__}")

        return self._image_store

    def event_bus(self) -> EventBus:
        """Get event bus instance (cached)."""
        if self._event_bus is None:
            self._event_bus = get_event_bus()
            logger.debug(f"Using event bus: {type(self._event_bus).__name__}")
        return self._event_bus

    def cascade_service(self):
        """Get CascadeService instance."""
        if self._cascade_service is None:
            from marketplace.cascade.domain.services.cascade_service import CascadeService

            self._cascade_service = CascadeService(image_store=self.image_store(), event_bus=self.event_bus())
            logger.debug("Created CascadeService")
        return self._cascade_service

    def catalog_service(self):
        """Get CatalogService instance."""
        if self._catalog_service is None:
            from marketplace.catalog.domain.services.catalog_service import CatalogService

            # CatalogService delegates product deletion to CascadeService
            self._catalog_service = CatalogService(
                image_store=self.image_store(), cascade_service=self.cascade_service()
            )
            logger.debug("Created CatalogService")
        return self._catalog_service

    def order_service(self):
        """Get OrderService instance."""
        if self._order_service is None:
            from marketplace.ordering.domain.services.order_service import OrderService

            self._order_service = OrderService(event_bus=self.event_bus())
            logger.debug("Created OrderService")
        return self._order_service

    def account_service(self):
        """Get AccountService instance."""
        if self._account_service is None:
            from authentication.domain.services.account_service import AccountService

            self._account_service = AccountService(event_bus=self.event_bus())
            logger.debug("Created AccountService")
        return self._account_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._image_store = None
        self._event_bus = None
        self._catalog_service = None
        self._order_service = None
        self._cascade_service = None
        self._account_service = None
        logger.info("Service container reset")

    def configure_for_testing(self):
        """
        Configure container with in-memory infrastructure.

        Sets up:
            - In-memory image store (no network)
            - In-memory event bus (no Redis)
        """
        from .events import InMemoryEventBus

        self.reset()
        self._image_store = ImageStoreFactory.create("memory")
        self._event_bus = InMemoryEventBus()
        logger.info("Service container configured for testing")


# Global singleton instance
container = ServiceContainer()


# Convenience functions for quick access
def get_image_store() -> ImageStoreInterface:
    """Get image store from global container."""
    return container.image_store()


def get_container_event_bus() -> EventBus:
    """Get event bus from global container."""
    return container.event_bus()
