from .base import DomainEvent
from .cascade_events import AccountDeletedEvent, ProductDeletedEvent
from .order_events import OrderPlacedEvent, OrderStatusChangedEvent


__all__ = [
    "DomainEvent",
    "OrderPlacedEvent",
    "OrderStatusChangedEvent",
    "ProductDeletedEvent",
    "AccountDeletedEvent",
]
