from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class OrderPlacedEvent(DomainEvent):
    """Event: Order placed by a buyer."""

    def __init__(self, order_id: str, buyer_id: str, product_id: str, seller_id: str):
        super().__init__(
            event_type="order.placed",
            payload={
                "order_id": order_id,
                "buyer_id": buyer_id,
                "product_id": product_id,
                "seller_id": seller_id,
            },
        )


@dataclass
class OrderStatusChangedEvent(DomainEvent):
    """Event: Order moved to a new status by its buyer or seller."""

    def __init__(self, order_id: str, actor_id: str, role: str, from_status: str, to_status: str):
        super().__init__(
            event_type="order.status_changed",
            payload={
                "order_id": order_id,
                "actor_id": actor_id,
                "role": role,
                "from_status": from_status,
                "to_status": to_status,
            },
        )
