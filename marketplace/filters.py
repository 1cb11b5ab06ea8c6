import django_filters

from .models import Product


class ProductFilter(django_filters.FilterSet):
    """
    Filter for the public product listing
    """

    # Price range filters
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    category = django_filters.ChoiceFilter(choices=Product.CATEGORY_CHOICES)
    condition = django_filters.MultipleChoiceFilter(choices=Product.CONDITION_CHOICES)

    # Year range filters
    min_year = django_filters.NumberFilter(field_name="year", lookup_expr="gte")
    max_year = django_filters.NumberFilter(field_name="year", lookup_expr="lte")

    is_sold = django_filters.BooleanFilter()

    # Seller filters
    seller = django_filters.UUIDFilter(field_name="seller__id")
    seller_username = django_filters.CharFilter(field_name="seller__username", lookup_expr="iexact")

    class Meta:
        model = Product
        fields = ["category", "condition", "is_sold", "seller"]

