"""
Response Serializers for Marketplace API Documentation

These serializers define the structure of API requests and responses for
OpenAPI schema generation. They are NOT used for data validation, only for
documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

# ===== Common Response Serializers =====


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Error code identifier")
    detail = serializers.CharField(help_text="Human-readable error message")
    errors = serializers.DictField(help_text="Field errors (validation failures)", required=False)


class InvalidTransitionResponseSerializer(ErrorResponseSerializer):
    """Rejected order status change"""

    role = serializers.CharField(help_text="Caller's role on the order (buyer or seller)")
    current_status = serializers.CharField(help_text="Status the order is in")
    requested_status = serializers.CharField(help_text="Status that was requested")
    allowed_statuses = serializers.ListField(
        child=serializers.CharField(), help_text="Statuses the caller may still move the order to (may be empty)"
    )


# ===== Product Serializers =====


class ProductListResponseSerializer(serializers.Serializer):
    """Paginated product list response"""

    count = serializers.IntegerField(help_text="Total number of products")
    page = serializers.IntegerField(help_text="Current page number")
    page_size = serializers.IntegerField(help_text="Items per page")
    num_pages = serializers.IntegerField(help_text="Total number of pages")
    results = serializers.ListField(child=serializers.DictField(), help_text="List of products")


class ImageUploadRequestSerializer(serializers.Serializer):
    """Request body for a standalone image upload"""

    image = serializers.ImageField(help_text="Image file (max 5MB)")


class ImageUploadResponseSerializer(serializers.Serializer):
    """Uploaded image reference"""

    url = serializers.CharField(help_text="Public URL to store on a product")
    public_id = serializers.CharField(help_text="Image store identifier")


class CascadeSummaryResponseSerializer(serializers.Serializer):
    """Outcome of a product deletion"""

    product_id = serializers.UUIDField()
    images_deleted = serializers.IntegerField()
    images_missing = serializers.IntegerField()
    image_failures = serializers.ListField(child=serializers.DictField())
    orders_deleted = serializers.IntegerField()
    order_failure = serializers.CharField(allow_null=True)
    product_deleted = serializers.BooleanField()
    product_failure = serializers.CharField(allow_null=True)
    failure_count = serializers.IntegerField()


class AccountDeletionResponseSerializer(serializers.Serializer):
    """Outcome of an account deletion"""

    user_id = serializers.UUIDField()
    products = CascadeSummaryResponseSerializer(many=True)
    products_deleted = serializers.IntegerField()
    product_listing_failure = serializers.CharField(allow_null=True)
    buyer_orders_deleted = serializers.IntegerField()
    buyer_orders_failure = serializers.CharField(allow_null=True)
    user_deleted = serializers.BooleanField()
    user_failure = serializers.CharField(allow_null=True)
    failure_count = serializers.IntegerField()


# ===== Order Serializers =====


class CreateOrderRequestSerializer(serializers.Serializer):
    """Request body for placing an order"""

    product = serializers.UUIDField(help_text="Product UUID to order")
    status = serializers.CharField(required=False, help_text="Optional; only 'pending' is accepted")


class UpdateOrderStatusRequestSerializer(serializers.Serializer):
    """Request body for changing an order's status"""

    status = serializers.ChoiceField(choices=["pending", "confirmed", "cancelled"], help_text="Target status")


class OrderListResponseSerializer(serializers.Serializer):
    """Paginated order list response"""

    count = serializers.IntegerField(help_text="Total number of orders")
    page = serializers.IntegerField(help_text="Current page number")
    limit = serializers.IntegerField(help_text="Items per page")
    num_pages = serializers.IntegerField(help_text="Total number of pages")
    results = serializers.ListField(child=serializers.DictField(), help_text="List of orders")


class OrderDeletedResponseSerializer(serializers.Serializer):
    """Deleted order reference"""

    id = serializers.UUIDField()
    deleted = serializers.BooleanField()
