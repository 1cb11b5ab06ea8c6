from django.utils import timezone
from rest_framework import serializers

from marketplace.catalog.domain.models.product import Product

from .user_serializers import PublicUserSerializer


class ProductSerializer(serializers.ModelSerializer):
    """Product with its seller joined for display"""

    seller = PublicUserSerializer(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "image_urls",
            "price",
            "year",
            "category",
            "condition",
            "is_sold",
            "seller",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    """Compact product embedded in order responses"""

    seller = PublicUserSerializer(read_only=True)

    class Meta:
        model = Product
        fields = ["id", "name", "price", "image_urls", "is_sold", "seller"]
        read_only_fields = fields


class ProductWriteSerializer(serializers.ModelSerializer):
    """
    Validates product create and update bodies (JSON or multipart).

    Seller, id and timestamps are not writable; the caller becomes the seller
    on create and the seller never changes afterwards.
    """

    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    image_urls = serializers.ListField(child=serializers.CharField(), required=False)
    is_sold = serializers.BooleanField(required=False)

    class Meta:
        model = Product
        fields = ["name", "description", "image_urls", "price", "year", "category", "condition", "is_sold"]

    def validate_year(self, value):
        latest = timezone.now().year + 1
        if not Product.MIN_YEAR <= value <= latest:
            raise serializers.ValidationError(f"year must be between {Product.MIN_YEAR} and {latest}.")
        return value

    def validate_image_urls(self, value):
        # Emptiness is checked by the service, which also counts uploaded files
        return list(dict.fromkeys(value))


class ProductCreateRequestSerializer(ProductWriteSerializer):
    """Schema-only: the create body plus multipart `images` files"""

    images = serializers.ListField(
        child=serializers.ImageField(), required=False, help_text="Image files to upload (multipart only)"
    )

    class Meta(ProductWriteSerializer.Meta):
        fields = ProductWriteSerializer.Meta.fields + ["images"]
