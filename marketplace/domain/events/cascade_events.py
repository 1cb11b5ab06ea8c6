from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class ProductDeletedEvent(DomainEvent):
    """Event: Product removed together with its orders and images."""

    def __init__(self, product_id: str, seller_id: str, orders_deleted: int, image_failures: int):
        super().__init__(
            event_type="product.deleted",
            payload={
                "product_id": product_id,
                "seller_id": seller_id,
                "orders_deleted": orders_deleted,
                "image_failures": image_failures,
            },
        )


@dataclass
class AccountDeletedEvent(DomainEvent):
    """Event: Account removed after its products and orders were purged."""

    def __init__(self, user_id: str, products_deleted: int, buyer_orders_deleted: int, failures: int):
        super().__init__(
            event_type="account.deleted",
            payload={
                "user_id": user_id,
                "products_deleted": products_deleted,
                "buyer_orders_deleted": buyer_orders_deleted,
                "failures": failures,
            },
        )
