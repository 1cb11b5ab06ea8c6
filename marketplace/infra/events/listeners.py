import logging

from infrastructure.events import get_event_bus


logger = logging.getLogger(__name__)


def handle_order_placed(event_data):
    """Handle order.placed event."""
    payload = event_data.get("payload", {})
    logger.info(
        f"[Marketplace Listener] Order {payload.get('order_id')} placed by {payload.get('buyer_id')} "
        f"for product {payload.get('product_id')} (seller {payload.get('seller_id')})"
    )


def handle_order_status_changed(event_data):
    """Handle order.status_changed event."""
    payload = event_data.get("payload", {})
    logger.info(
        f"[Marketplace Listener] Order {payload.get('order_id')}: "
        f"{payload.get('from_status')} -> {payload.get('to_status')} by {payload.get('role')}"
    )


def handle_product_deleted(event_data):
    """Handle product.deleted event."""
    payload = event_data.get("payload", {})
    if payload.get("image_failures"):
        logger.warning(
            f"[Marketplace Listener] Product {payload.get('product_id')} deleted with "
            f"{payload.get('image_failures')} image(s) left in the image store"
        )
    else:
        logger.info(f"[Marketplace Listener] Product {payload.get('product_id')} deleted")


def handle_account_deleted(event_data):
    """Handle account.deleted event."""
    payload = event_data.get("payload", {})
    logger.info(
        f"[Marketplace Listener] Account {payload.get('user_id')} deleted: "
        f"{payload.get('products_deleted')} products, {payload.get('buyer_orders_deleted')} buyer orders, "
        f"{payload.get('failures')} failed cleanup steps"
    )


def register_marketplace_listeners(event_bus=None):
    """Register all marketplace event listeners."""
    event_bus = event_bus or get_event_bus()
    event_bus.subscribe("order.placed", handle_order_placed)
    event_bus.subscribe("order.status_changed", handle_order_status_changed)
    event_bus.subscribe("product.deleted", handle_product_deleted)
    event_bus.subscribe("account.deleted", handle_account_deleted)
    logger.info("Marketplace event listeners registered")
