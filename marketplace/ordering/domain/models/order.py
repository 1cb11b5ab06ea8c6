import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from marketplace.catalog.domain.models.product import Product


class Order(models.Model):
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),  # Initial status, set at creation
        (STATUS_CONFIRMED, "Confirmed"),  # Seller accepted the order
        (STATUS_CANCELLED, "Cancelled"),  # Terminal
    ]

    ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="orders")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="orders")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    # Timestamps
    order_date = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-order_date"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["buyer", "-order_date"], name="marketplace_buyer_i_7b61c3_idx"),
            models.Index(fields=["product", "status"], name="marketplace_product_4e90a2_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["buyer", "product"],
                condition=Q(status__in=["pending", "confirmed"]),
                name="unique_active_order_per_buyer_product",
            ),
        ]

    def __str__(self):
        return f"Order {str(self.id)[:8]} ({self.status})"

    @property
    def is_active(self) -> bool:
        return self.status in self.ACTIVE_STATUSES
