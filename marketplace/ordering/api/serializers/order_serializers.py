from rest_framework import serializers

from marketplace.catalog.api.serializers.product_serializers import ProductSummarySerializer
from marketplace.catalog.api.serializers.user_serializers import PublicUserSerializer
from marketplace.ordering.domain.models.order import Order


class OrderSerializer(serializers.ModelSerializer):
    """Order with buyer and product (including its seller) joined for display"""

    buyer = PublicUserSerializer(read_only=True)
    product = ProductSummarySerializer(read_only=True)

    class Meta:
        model = Order
        fields = ["id", "buyer", "product", "status", "order_date", "updated_at"]
        read_only_fields = fields
