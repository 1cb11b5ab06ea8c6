from decimal import Decimal

import pytest
from django.utils import timezone

from marketplace.catalog.api.serializers.product_serializers import ProductWriteSerializer


def valid_data(**overrides):
    data = {
        "name": "Lamp",
        "description": "Brass desk lamp",
        "price": "19.99",
        "year": 1985,
        "category": "home",
        "condition": "good",
        "image_urls": ["memory://images/lamp"],
    }
    data.update(overrides)
    return data


@pytest.mark.unit
class TestProductWriteSerializer:
    def test_valid_payload(self):
        serializer = ProductWriteSerializer(data=valid_data())

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["price"] == Decimal("19.99")
        assert serializer.validated_data["year"] == 1985
        assert serializer.validated_data["image_urls"] == ["memory://images/lamp"]

    def test_required_fields_on_create(self):
        serializer = ProductWriteSerializer(data={})

        assert not serializer.is_valid()
        assert set(serializer.errors) == {"name", "description", "price", "year", "category", "condition"}

    def test_partial_update_only_checks_given_fields(self):
        serializer = ProductWriteSerializer(data={"name": "Renamed"}, partial=True)

        assert serializer.is_valid(), serializer.errors
        assert dict(serializer.validated_data) == {"name": "Renamed"}

    def test_seller_and_timestamps_are_not_writable(self):
        serializer = ProductWriteSerializer(
            data=valid_data(seller="someone", id="abc", created_at="2020-01-01T00:00:00Z")
        )

        assert serializer.is_valid(), serializer.errors
        assert not {"seller", "id", "created_at"} & set(serializer.validated_data)

    @pytest.mark.parametrize("year", [1900, timezone.now().year + 1])
    def test_year_bounds_are_inclusive(self, year):
        assert ProductWriteSerializer(data=valid_data(year=year)).is_valid()

    @pytest.mark.parametrize("year", [1899, timezone.now().year + 2, 1990.5, "old"])
    def test_year_out_of_range(self, year):
        serializer = ProductWriteSerializer(data=valid_data(year=year))

        assert not serializer.is_valid()
        assert "year" in serializer.errors

    @pytest.mark.parametrize("price", ["100000000000", "1e30", "19.999", "-1", "NaN", "cheap"])
    def test_invalid_price(self, price):
        serializer = ProductWriteSerializer(data=valid_data(price=price))

        assert not serializer.is_valid()
        assert set(serializer.errors) == {"price"}

    def test_largest_price_fits(self):
        serializer = ProductWriteSerializer(data=valid_data(price="99999999.99"))

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["price"] == Decimal("99999999.99")

    def test_price_out_of_range_on_partial_update(self):
        serializer = ProductWriteSerializer(data={"price": "100000000000"}, partial=True)

        assert not serializer.is_valid()
        assert "price" in serializer.errors

    @pytest.mark.parametrize("field,value", [("category", "weapons"), ("condition", "mint")])
    def test_choices(self, field, value):
        serializer = ProductWriteSerializer(data=valid_data(**{field: value}))

        assert not serializer.is_valid()
        assert field in serializer.errors

    def test_name_length(self):
        serializer = ProductWriteSerializer(data=valid_data(name="x" * 101))

        assert not serializer.is_valid()
        assert "name" in serializer.errors

    def test_image_urls_are_deduplicated_in_order(self):
        serializer = ProductWriteSerializer(data=valid_data(image_urls=["b", "a", "b"]))

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["image_urls"] == ["b", "a"]

    def test_image_urls_must_be_a_list(self):
        serializer = ProductWriteSerializer(data=valid_data(image_urls="memory://images/lamp"))

        assert not serializer.is_valid()
        assert "image_urls" in serializer.errors

    def test_is_sold_accepts_form_strings(self):
        serializer = ProductWriteSerializer(data={"is_sold": "true"}, partial=True)

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["is_sold"] is True
