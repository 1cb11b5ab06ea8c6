import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    CATEGORY_CHOICES = [
        ("electronics", "Electronics"),
        ("clothing", "Clothing"),
        ("books", "Books"),
        ("furniture", "Furniture"),
        ("sports", "Sports"),
        ("toys", "Toys"),
        ("automotive", "Automotive"),
        ("home", "Home"),
        ("other", "Other"),
    ]

    CONDITION_CHOICES = [
        ("new", "New"),
        ("like_new", "Like New"),
        ("good", "Good"),
        ("fair", "Fair"),
        ("poor", "Poor"),
    ]

    MIN_YEAR = 1900
    NAME_MAX_LENGTH = 100
    DESCRIPTION_MAX_LENGTH = 1000

    # Basic Information
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=NAME_MAX_LENGTH)
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH)

    # Remote image references; the files themselves live in the image store
    image_urls = models.JSONField(default=list)

    # Seller is fixed at creation. The account cascade purges products
    # explicitly; CASCADE only catches what a failed purge step left behind.
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="products")

    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    year = models.PositiveIntegerField(validators=[MinValueValidator(MIN_YEAR)])
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    condition = models.CharField(max_length=20, choices=CONDITION_CHOICES)
    is_sold = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["seller", "-created_at"], name="marketplace_seller__c2a1e0_idx"),
            models.Index(fields=["category", "-created_at"], name="marketplace_categor_5f3b9d_idx"),
            models.Index(fields=["is_sold", "-created_at"], name="marketplace_is_sold_8d4e27_idx"),
        ]

    def __str__(self):
        return self.name
