"""
CascadeService - Product and Account Deletion

Removes a product or an account together with everything that depends on
it: remote images, orders, products. Steps run one after another without a
wrapping transaction; each failing step is logged, counted and recorded in
the summary, and the pipeline moves on. Re-running a cascade only does what
is left, since every step filters by id and matching nothing is a no-op.
"""

import time

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from infrastructure.events import get_event_bus
from infrastructure.images.interface import ImageStoreException
from marketplace.cascade.domain.summaries import AccountDeletionSummary, CascadeSummary, ImageFailure
from marketplace.catalog.domain.models.product import Product
from marketplace.domain.events import AccountDeletedEvent, ProductDeletedEvent
from marketplace.domain.policy import Role, require_role, resolve_account_role, resolve_product_role
from marketplace.infra.observability.metrics import cascade_duration, cascade_step_failures_total
from marketplace.infra.observability.tracing import tracer
from marketplace.ordering.domain.models.order import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


User = get_user_model()


class CascadeService(BaseService):
    """
    Account Cascade Manager.

    Dependencies:
    - image_store: remote image deletion (failures never propagate)
    - event_bus: product.deleted / account.deleted notifications
    """

    def __init__(self, image_store=None, event_bus=None):
        super().__init__()
        if image_store is None:
            from infrastructure.container import container

            image_store = container.image_store()
        self.image_store = image_store
        self.event_bus = event_bus or get_event_bus()

    def _publish(self, event):
        try:
            self.event_bus.publish(event.event_type, event.payload)
        except Exception as e:
            self.logger.error(f"Failed to publish {event.event_type}: {e}")

    def _step_failed(self, step: str, message: str):
        cascade_step_failures_total.labels(step=step).inc()
        self.logger.error(message, exc_info=True)

    def _purge_images(self, product, summary: CascadeSummary):
        for url in product.image_urls or []:
            public_id = self.image_store.public_id_from_url(url)
            if not public_id:
                cascade_step_failures_total.labels(step="image").inc()
                self.logger.warning(f"Skipping image not held by the image store: {url}")
                summary.image_failures.append(ImageFailure(url=url, reason="not an image store URL"))
                continue

            try:
                if self.image_store.delete(public_id):
                    summary.images_deleted += 1
                else:
                    # Already gone; counts as done for idempotent re-runs
                    summary.images_missing += 1
            except ImageStoreException as e:
                self._step_failed("image", f"Image delete failed for {public_id} on product {product.id}: {e}")
                summary.image_failures.append(ImageFailure(url=url, reason=str(e), public_id=public_id))
            except Exception as e:
                self._step_failed("image", f"Unexpected error deleting image {public_id}: {e}")
                summary.image_failures.append(ImageFailure(url=url, reason=str(e), public_id=public_id))

    def purge_product(self, product) -> CascadeSummary:
        """
        Delete a product's images, its orders (any status) and the product row.

        Never raises for step failures; inspect the returned summary.
        """
        summary = CascadeSummary(product_id=str(product.id))
        start_time = time.time()

        with tracer.start_as_current_span("cascade_purge_product") as span:
            span.set_attribute("product.id", str(product.id))

            # (a) Remote images
            self._purge_images(product, summary)

            # (b) Orders referencing the product
            try:
                with transaction.atomic():
                    summary.orders_deleted, _ = Order.objects.filter(product_id=product.id).delete()
            except Exception as e:
                summary.order_failure = str(e)
                self._step_failed("orders", f"Deleting orders of product {product.id} failed: {e}")

            # (c) Product row
            try:
                with transaction.atomic():
                    Product.objects.filter(id=product.id).delete()
                summary.product_deleted = not Product.objects.filter(id=product.id).exists()
            except Exception as e:
                summary.product_failure = str(e)
                self._step_failed("product", f"Deleting product {product.id} failed: {e}")

            span.set_attribute("cascade.failures", summary.failure_count)

        cascade_duration.labels(kind="product").observe(time.time() - start_time)

        self.logger.info(
            f"Purged product {product.id}: images_deleted={summary.images_deleted}, "
            f"image_failures={len(summary.image_failures)}, orders_deleted={summary.orders_deleted}, "
            f"product_deleted={summary.product_deleted}"
        )

        if summary.product_deleted:
            self._publish(
                ProductDeletedEvent(
                    product_id=str(product.id),
                    seller_id=str(product.seller_id),
                    orders_deleted=summary.orders_deleted,
                    image_failures=len(summary.image_failures),
                )
            )

        return summary

    @BaseService.log_performance
    def delete_product(self, product_id, caller) -> ServiceResult[CascadeSummary]:
        """
        Seller-only product deletion.

        Succeeds once the product row is gone, even if image or order
        cleanup partially failed.
        """
        try:
            product = Product.objects.get(id=product_id)
        except (Product.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

        denial = require_role(resolve_product_role(caller, product), [Role.OWNER], ErrorCodes.NOT_PRODUCT_OWNER)
        if denial:
            return service_err(denial, "Only the seller can delete this product")

        summary = self.purge_product(product)
        if not summary.product_deleted:
            return service_err(
                ErrorCodes.INTERNAL_ERROR,
                f"Product {product_id} could not be deleted",
                summary=summary.to_dict(),
            )

        return service_ok(summary)

    @BaseService.log_performance
    def delete_account(self, user_id, caller) -> ServiceResult[AccountDeletionSummary]:
        """
        Self-only account deletion.

        Purges every product the account sells, deletes every order it placed
        as buyer, then deletes the user row. Succeeds once the user row is
        gone.
        """
        denial = require_role(resolve_account_role(caller, user_id), [Role.OWNER], ErrorCodes.NOT_ACCOUNT_OWNER)
        if denial:
            return service_err(denial, "You can only delete your own account")

        try:
            user = User.objects.get(id=user_id)
        except (User.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.USER_NOT_FOUND, f"User {user_id} not found")

        summary = AccountDeletionSummary(user_id=str(user.id))
        start_time = time.time()

        with tracer.start_as_current_span("cascade_delete_account") as span:
            span.set_attribute("user.id", str(user.id))

            try:
                products = list(Product.objects.filter(seller_id=user.id))
            except Exception as e:
                products = []
                summary.product_listing_failure = str(e)
                self._step_failed("products", f"Listing products of user {user.id} failed: {e}")

            for product in products:
                summary.products.append(self.purge_product(product))

            try:
                with transaction.atomic():
                    summary.buyer_orders_deleted, _ = Order.objects.filter(buyer_id=user.id).delete()
            except Exception as e:
                summary.buyer_orders_failure = str(e)
                self._step_failed("buyer_orders", f"Deleting orders placed by user {user.id} failed: {e}")

            try:
                with transaction.atomic():
                    User.objects.filter(id=user.id).delete()
                summary.user_deleted = not User.objects.filter(id=user.id).exists()
            except Exception as e:
                summary.user_failure = str(e)
                self._step_failed("user", f"Deleting user {user.id} failed: {e}")

            span.set_attribute("cascade.failures", summary.failure_count)

        cascade_duration.labels(kind="account").observe(time.time() - start_time)

        if not summary.user_deleted:
            return service_err(
                ErrorCodes.INTERNAL_ERROR, f"User {user_id} could not be deleted", summary=summary.to_dict()
            )

        self.logger.info(
            f"Deleted account {user.id}: products={len(summary.products)}, "
            f"buyer_orders_deleted={summary.buyer_orders_deleted}, failures={summary.failure_count}"
        )
        self._publish(
            AccountDeletedEvent(
                user_id=str(user.id),
                products_deleted=len([s for s in summary.products if s.product_deleted]),
                buyer_orders_deleted=summary.buyer_orders_deleted,
                failures=summary.failure_count,
            )
        )

        return service_ok(summary)
