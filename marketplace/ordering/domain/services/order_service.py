"""
OrderService - Order Lifecycle Management

Handles order placement, retrieval, listing, status transitions and
deletion. Every transition is checked against the role-keyed state machine
and applied with a compare-and-set update on the single order row.
"""

from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from infrastructure.events import get_event_bus
from marketplace.catalog.domain.models.product import Product
from marketplace.domain.events import OrderPlacedEvent, OrderStatusChangedEvent
from marketplace.domain.policy import Role, require_role, resolve_order_role
from marketplace.infra.observability.metrics import (
    order_transition_rejections_total,
    order_transitions_total,
    orders_placed_total,
)
from marketplace.infra.observability.tracing import tracer
from marketplace.ordering.domain import state_machine
from marketplace.ordering.domain.models.order import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok


LIST_ROLES = ("all", "buyer", "seller")

# Compare-and-set retries before giving up on a hot row
MAX_TRANSITION_ATTEMPTS = 3


class OrderService(BaseService):
    """
    Service for managing order lifecycle.

    State Machine:
    pending ──(seller)──▶ confirmed ──(buyer)──▶ cancelled
       └──────────(buyer or seller)──────────────▶ cancelled
    """

    def __init__(self, event_bus=None):
        """
        Initialize OrderService.

        Args:
            event_bus: Event bus for publishing domain events (injected)
        """
        super().__init__()
        self.event_bus = event_bus or get_event_bus()

    def _load_order(self, order_id) -> Optional[Order]:
        try:
            return Order.objects.select_related("buyer", "product", "product__seller").get(id=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            return None

    def _publish(self, event):
        try:
            self.event_bus.publish(event.event_type, event.payload)
        except Exception as e:
            # Event publishing should not break business logic
            self.logger.error(f"Failed to publish {event.event_type}: {e}")

    @BaseService.log_performance
    def create_order(self, caller, product_id, status: Optional[str] = None) -> ServiceResult[Order]:
        """
        Place an order for a product.

        Args:
            caller: Authenticated user placing the order (becomes buyer)
            product_id: Product UUID
            status: Optional initial status; only "pending" is accepted

        Returns:
            ServiceResult with the created Order (buyer and product seller loaded)
        """
        with tracer.start_as_current_span("order_create") as span:
            if not getattr(caller, "is_authenticated", False):
                return service_err(ErrorCodes.UNAUTHENTICATED, "Authentication required to place an order")

            span.set_attribute("user.id", str(caller.id))

            if not product_id:
                return service_err(ErrorCodes.VALIDATION_ERROR, "product is required", errors={"product": "required"})

            if status is not None:
                if not state_machine.is_valid_status(status):
                    return service_err(
                        ErrorCodes.VALIDATION_ERROR,
                        f"Invalid status '{status}'",
                        errors={"status": f"must be one of: {', '.join(state_machine.STATUSES)}"},
                    )
                if status != state_machine.INITIAL_STATUS:
                    return service_err(
                        ErrorCodes.VALIDATION_ERROR,
                        f"New orders must start as '{state_machine.INITIAL_STATUS}'",
                        errors={"status": f"must be '{state_machine.INITIAL_STATUS}'"},
                    )

            try:
                product = Product.objects.select_related("seller").get(id=product_id)
            except (Product.DoesNotExist, ValidationError, ValueError):
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

            span.set_attribute("product.id", str(product.id))

            if str(product.seller_id) == str(caller.id):
                return service_err(ErrorCodes.SELF_PURCHASE, "You cannot order your own product")

            if Order.objects.filter(
                buyer=caller, product=product, status__in=state_machine.ACTIVE_STATUSES
            ).exists():
                return service_err(
                    ErrorCodes.DUPLICATE_ACTIVE_ORDER, "You already have an active order for this product"
                )

            try:
                # Savepoint: a lost race on the partial unique index must not poison the outer transaction
                with transaction.atomic():
                    order = Order.objects.create(
                        buyer=caller,
                        product=product,
                        status=state_machine.INITIAL_STATUS,
                        order_date=timezone.now(),
                    )
            except IntegrityError:
                self.logger.warning(f"Concurrent duplicate order for buyer {caller.id} and product {product.id}")
                return service_err(
                    ErrorCodes.DUPLICATE_ACTIVE_ORDER, "You already have an active order for this product"
                )
            except Exception as e:
                self.logger.error(f"Error creating order for user {caller.id}: {e}", exc_info=True)
                span.record_exception(e)
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

            orders_placed_total.inc()
            self._publish(
                OrderPlacedEvent(
                    order_id=str(order.id),
                    buyer_id=str(caller.id),
                    product_id=str(product.id),
                    seller_id=str(product.seller_id),
                )
            )

            self.logger.info(f"Created order {order.id} for user {caller.id} on product {product.id}")

            return service_ok(self._load_order(order.id))

    @BaseService.log_performance
    def get_order(self, order_id, caller) -> ServiceResult[Order]:
        """
        Get order details (buyer or product seller only).
        """
        order = self._load_order(order_id)
        if order is None:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

        denial = require_role(
            resolve_order_role(caller, order), [Role.BUYER, Role.SELLER], ErrorCodes.NOT_ORDER_PARTY
        )
        if denial:
            return service_err(denial, "You are not a party to this order")

        return service_ok(order)

    @BaseService.log_performance
    def list_orders(
        self, caller, role: Optional[str] = None, status: Optional[str] = None, page: int = 1, limit: int = 10
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List the caller's orders, newest first.

        Args:
            caller: Authenticated user
            role: "buyer", "seller", or "all"/None for both
            status: Optional status filter
            page: Page number (1-indexed)
            limit: Items per page

        Returns:
            ServiceResult with results, count, page, limit, num_pages
        """
        if not getattr(caller, "is_authenticated", False):
            return service_err(ErrorCodes.UNAUTHENTICATED, "Authentication required")

        role = role or "all"
        if role not in LIST_ROLES:
            return service_err(
                ErrorCodes.VALIDATION_ERROR,
                f"Invalid role '{role}'",
                errors={"role": f"must be one of: {', '.join(LIST_ROLES)}"},
            )

        if status is not None and not state_machine.is_valid_status(status):
            return service_err(
                ErrorCodes.VALIDATION_ERROR,
                f"Invalid status '{status}'",
                errors={"status": f"must be one of: {', '.join(state_machine.STATUSES)}"},
            )

        if page < 1 or limit < 1:
            return service_err(ErrorCodes.VALIDATION_ERROR, "page and limit must be positive integers")

        try:
            queryset = Order.objects.select_related("buyer", "product", "product__seller")

            if role == "buyer":
                queryset = queryset.filter(buyer=caller)
            elif role == "seller":
                queryset = queryset.filter(product__seller=caller)
            else:
                queryset = queryset.filter(Q(buyer=caller) | Q(product__seller=caller))

            if status:
                queryset = queryset.filter(status=status)

            results, paginator = paginate(queryset.order_by("-order_date"), page, limit)

            result_data = {
                "results": results,
                "count": paginator.count,
                "page": page,
                "limit": limit,
                "num_pages": paginator.num_pages,
            }

            self.logger.info(f"Listed {role} orders for user {caller.id}: count={paginator.count}")
            return service_ok(result_data)

        except Exception as e:
            self.logger.error(f"Error listing orders for user {caller.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def transition_order(self, order_id, caller, target_status: Optional[str]) -> ServiceResult[Order]:
        """
        Move an order to a new status on behalf of its buyer or seller.

        The write is a compare-and-set on (id, current status). If another
        request changed the row in between, the transition is re-evaluated
        against the fresh status.

        Returns:
            ServiceResult with the updated Order, or invalid_transition with
            role, current_status, requested_status and allowed_statuses
        """
        for _ in range(MAX_TRANSITION_ATTEMPTS):
            order = self._load_order(order_id)
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

            role = resolve_order_role(caller, order)
            denial = require_role(role, [Role.BUYER, Role.SELLER], ErrorCodes.NOT_ORDER_PARTY)
            if denial:
                return service_err(denial, "You are not a party to this order")

            if not target_status:
                return service_err(
                    ErrorCodes.VALIDATION_ERROR, "status is required", errors={"status": "required"}
                )

            if not state_machine.is_valid_status(target_status):
                return service_err(
                    ErrorCodes.VALIDATION_ERROR,
                    f"Invalid status '{target_status}'",
                    errors={"status": f"must be one of: {', '.join(state_machine.STATUSES)}"},
                )

            current_status = order.status
            if not state_machine.can_transition(role, current_status, target_status):
                allowed = state_machine.allowed_transitions(role, current_status)
                order_transition_rejections_total.labels(role=role.value).inc()
                return service_err(
                    ErrorCodes.INVALID_TRANSITION,
                    f"As {role.value}, you cannot change an order from '{current_status}' to '{target_status}'",
                    role=role.value,
                    current_status=current_status,
                    requested_status=target_status,
                    allowed_statuses=allowed,
                )

            updated = Order.objects.filter(id=order.id, status=current_status).update(
                status=target_status, updated_at=timezone.now()
            )
            if updated:
                order_transitions_total.labels(
                    role=role.value, from_status=current_status, to_status=target_status
                ).inc()
                self._publish(
                    OrderStatusChangedEvent(
                        order_id=str(order.id),
                        actor_id=str(caller.id),
                        role=role.value,
                        from_status=current_status,
                        to_status=target_status,
                    )
                )
                self.logger.info(
                    f"Order {order.id} moved {current_status} -> {target_status} by {role.value} {caller.id}"
                )
                return service_ok(self._load_order(order.id))

            self.logger.info(f"Order {order.id} changed concurrently, re-evaluating transition")

        return service_err(ErrorCodes.INTERNAL_ERROR, f"Order {order_id} is being modified concurrently")

    @BaseService.log_performance
    def delete_order(self, order_id, caller) -> ServiceResult[Dict[str, Any]]:
        """
        Delete an order. Only the buyer may delete, and only while pending.
        """
        order = self._load_order(order_id)
        if order is None:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

        denial = require_role(resolve_order_role(caller, order), [Role.BUYER], ErrorCodes.NOT_ORDER_BUYER)
        if denial:
            return service_err(denial, "Only the buyer can delete this order")

        if order.status != state_machine.PENDING:
            return service_err(
                ErrorCodes.ORDER_NOT_DELETABLE,
                f"Only pending orders can be deleted (order is '{order.status}')",
                current_status=order.status,
            )

        deleted, _ = Order.objects.filter(id=order.id, status=state_machine.PENDING).delete()
        if not deleted:
            # Status moved or row vanished since the check
            fresh = self._load_order(order.id)
            if fresh is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
            return service_err(
                ErrorCodes.ORDER_NOT_DELETABLE,
                f"Only pending orders can be deleted (order is '{fresh.status}')",
                current_status=fresh.status,
            )

        self.logger.info(f"Deleted order {order.id} by buyer {caller.id}")
        return service_ok({"id": str(order.id), "deleted": True})
