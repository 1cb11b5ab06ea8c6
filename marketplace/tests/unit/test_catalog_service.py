import uuid
from unittest.mock import MagicMock, patch

import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.files.uploadedfile import SimpleUploadedFile

from infrastructure.images import ImageStoreException, StoredImage
from marketplace.catalog.domain.services.catalog_service import CatalogService
from marketplace.models import Product
from marketplace.services.base import ErrorCodes


def product_data(**overrides):
    data = {
        "name": "Lamp",
        "description": "Brass desk lamp",
        "price": "19.99",
        "year": 1985,
        "category": "home",
        "condition": "good",
    }
    data.update(overrides)
    return data


def image_file(name="lamp.jpg", content_type="image/jpeg"):
    return SimpleUploadedFile(name, b"fake-image-bytes", content_type=content_type)


@pytest.fixture
def mock_image_store():
    return MagicMock()


@pytest.fixture
def mock_cascade():
    return MagicMock()


@pytest.fixture
def catalog_service(mock_image_store, mock_cascade):
    return CatalogService(image_store=mock_image_store, cascade_service=mock_cascade)


@pytest.fixture
def caller():
    user_id = uuid.uuid4()
    return MagicMock(is_authenticated=True, id=user_id, pk=user_id)


@pytest.mark.unit
class TestCatalogService:
    def test_create_product_requires_authentication(self, catalog_service):
        result = catalog_service.create_product(product_data(), AnonymousUser())

        assert result.ok is False
        assert result.error == ErrorCodes.UNAUTHENTICATED

    @patch("marketplace.catalog.domain.services.catalog_service.Product.objects")
    def test_create_product_drops_read_only_fields(self, mock_product_objects, catalog_service, caller):
        mock_product_objects.create.return_value = MagicMock(spec=Product, id=uuid.uuid4())

        result = catalog_service.create_product(
            product_data(image_urls=["memory://images/a"], seller="someone", id="abc"), caller
        )

        assert result.ok is True
        kwargs = mock_product_objects.create.call_args.kwargs
        assert kwargs["seller"] is caller
        assert "id" not in kwargs

    def test_create_product_requires_an_image(self, catalog_service, caller):
        result = catalog_service.create_product(product_data(), caller)

        assert result.ok is False
        assert result.error == ErrorCodes.IMAGE_REQUIRED

    @patch("marketplace.catalog.domain.services.catalog_service.Product.objects")
    def test_create_product_uploads_files_first(self, mock_product_objects, catalog_service, mock_image_store, caller):
        mock_image_store.upload.return_value = StoredImage(url="memory://images/a", public_id="a")
        mock_product_objects.create.return_value = MagicMock(spec=Product, id=uuid.uuid4())

        result = catalog_service.create_product(
            product_data(image_urls=["memory://images/existing"]), caller, images=[image_file()]
        )

        assert result.ok is True
        kwargs = mock_product_objects.create.call_args.kwargs
        assert kwargs["seller"] is caller
        assert kwargs["image_urls"] == ["memory://images/existing", "memory://images/a"]

    @patch("marketplace.catalog.domain.services.catalog_service.Product.objects")
    def test_create_product_image_store_outage(self, mock_product_objects, catalog_service, mock_image_store, caller):
        mock_image_store.upload.side_effect = [
            StoredImage(url="memory://images/first", public_id="first"),
            ImageStoreException("store unavailable"),
        ]

        result = catalog_service.create_product(product_data(), caller, images=[image_file(), image_file("b.jpg")])

        assert result.ok is False
        assert result.error == ErrorCodes.IMAGE_STORE_ERROR
        mock_product_objects.create.assert_not_called()
        mock_image_store.delete.assert_called_once_with("first")

    @patch("marketplace.catalog.domain.services.catalog_service.Product.objects")
    def test_create_product_rejects_non_images(self, mock_product_objects, catalog_service, mock_image_store, caller):
        result = catalog_service.create_product(
            product_data(), caller, images=[image_file("notes.txt", content_type="text/plain")]
        )

        assert result.ok is False
        assert result.error == ErrorCodes.INVALID_INPUT
        mock_image_store.upload.assert_not_called()
        mock_product_objects.create.assert_not_called()

    def test_upload_image_requires_authentication(self, catalog_service):
        result = catalog_service.upload_image(image_file(), AnonymousUser())

        assert result.error == ErrorCodes.UNAUTHENTICATED

    def test_upload_image_without_file(self, catalog_service, caller):
        result = catalog_service.upload_image(None, caller)

        assert result.error == ErrorCodes.IMAGE_REQUIRED

    def test_upload_image_store_failure(self, catalog_service, mock_image_store, caller):
        mock_image_store.upload.side_effect = ImageStoreException("timeout")

        result = catalog_service.upload_image(image_file(), caller)

        assert result.error == ErrorCodes.IMAGE_STORE_ERROR

    @patch("marketplace.catalog.domain.services.catalog_service.Product.objects")
    def test_update_product_not_owner(self, mock_product_objects, catalog_service, caller):
        product = MagicMock(spec=Product, seller_id=uuid.uuid4())
        mock_product_objects.select_related.return_value.get.return_value = product

        result = catalog_service.update_product("prod-id", {"name": "Mine now"}, caller)

        assert result.ok is False
        assert result.error == ErrorCodes.NOT_PRODUCT_OWNER
        product.save.assert_not_called()

    @patch("marketplace.catalog.domain.services.catalog_service.Product.objects")
    def test_update_product_ignores_seller_field(self, mock_product_objects, catalog_service, caller):
        product = MagicMock(spec=Product, seller_id=caller.pk)
        mock_product_objects.select_related.return_value.get.return_value = product

        result = catalog_service.update_product("prod-id", {"name": "Renamed", "seller": "other"}, caller)

        assert result.ok is True
        assert product.name == "Renamed"
        product.save.assert_called_once_with(update_fields=["name", "updated_at"])

    @patch("marketplace.catalog.domain.services.catalog_service.Product.objects")
    def test_update_product_cannot_clear_images(self, mock_product_objects, catalog_service, caller):
        product = MagicMock(spec=Product, seller_id=caller.pk)
        mock_product_objects.select_related.return_value.get.return_value = product

        result = catalog_service.update_product("prod-id", {"image_urls": []}, caller)

        assert result.error == ErrorCodes.IMAGE_REQUIRED

    @patch("marketplace.catalog.domain.services.catalog_service.Product.objects")
    def test_get_product_not_found(self, mock_product_objects, catalog_service):
        mock_product_objects.select_related.return_value.get.side_effect = Product.DoesNotExist

        result = catalog_service.get_product("missing")

        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND

    def test_delete_product_delegates_to_cascade(self, catalog_service, mock_cascade, caller):
        catalog_service.delete_product("prod-id", caller)

        mock_cascade.delete_product.assert_called_once_with("prod-id", caller)
