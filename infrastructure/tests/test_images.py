"""
Image Store Infrastructure Tests
================================

Unit tests for the image store abstraction layer.
"""

from io import BytesIO
from unittest.mock import patch

import cloudinary
from cloudinary.exceptions import Error as CloudinaryError
from django.test import SimpleTestCase, override_settings

from infrastructure.images import (
    CloudinaryImageStore,
    ImageStoreException,
    ImageStoreFactory,
    ImageStoreInterface,
    InMemoryImageStore,
)
from infrastructure.images.cloudinary_adapter import public_id_from_url


class ImageStoreInterfaceTest(SimpleTestCase):
    """Test ImageStoreInterface contract."""

    def test_interface_is_abstract(self):
        """ImageStoreInterface should not be instantiable."""
        with self.assertRaises(TypeError):
            ImageStoreInterface()


class PublicIdFromUrlTest(SimpleTestCase):
    def test_versioned_url_with_folder(self):
        url = "https://res.cloudinary.com/demo/image/upload/v1712345678/tradepost/lamp.jpg"
        self.assertEqual(public_id_from_url(url), "tradepost/lamp")

    def test_unversioned_url(self):
        url = "https://res.cloudinary.com/demo/image/upload/lamp.png"
        self.assertEqual(public_id_from_url(url), "lamp")

    def test_foreign_host_is_rejected(self):
        self.assertIsNone(public_id_from_url("https://example.com/image/upload/v1/lamp.jpg"))

    def test_url_without_upload_segment_is_rejected(self):
        self.assertIsNone(public_id_from_url("https://res.cloudinary.com/demo/image/lamp.jpg"))

    def test_empty_url(self):
        self.assertIsNone(public_id_from_url(""))


@override_settings(CLOUDINARY_UPLOAD_FOLDER="tradepost/products")
class CloudinaryImageStoreTest(SimpleTestCase):
    """Test CloudinaryImageStore against a mocked SDK uploader."""

    def setUp(self):
        self.store = CloudinaryImageStore(cloud_name="demo", api_key="key", api_secret="secret", timeout=3)

    def test_sdk_is_configured(self):
        config = cloudinary.config()

        self.assertEqual(config.cloud_name, "demo")
        self.assertEqual(config.api_key, "key")
        self.assertEqual(config.api_secret, "secret")
        self.assertTrue(config.secure)

    @patch("cloudinary.uploader.upload")
    def test_upload_success(self, mock_upload):
        mock_upload.return_value = {
            "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/tradepost/products/lamp.jpg",
            "public_id": "tradepost/products/lamp",
            "bytes": 42,
        }
        file = BytesIO(b"img")

        stored = self.store.upload(file, "lamp.jpg", "image/jpeg")

        self.assertEqual(stored.public_id, "tradepost/products/lamp")
        self.assertEqual(stored.size, 42)
        self.assertEqual(stored.content_type, "image/jpeg")
        args, kwargs = mock_upload.call_args
        self.assertIs(args[0], file)
        self.assertEqual(kwargs["folder"], "tradepost/products")
        self.assertEqual(kwargs["resource_type"], "image")
        self.assertEqual(kwargs["timeout"], 3)

    @patch("cloudinary.uploader.upload")
    def test_upload_rejected_raises(self, mock_upload):
        mock_upload.side_effect = CloudinaryError("Invalid Signature")

        with self.assertRaises(ImageStoreException) as ctx:
            self.store.upload(BytesIO(b"img"), "lamp.jpg", "image/jpeg")

        self.assertIn("Invalid Signature", str(ctx.exception))

    @patch("cloudinary.uploader.upload")
    def test_upload_transport_error_raises(self, mock_upload):
        mock_upload.side_effect = ConnectionError("down")

        with self.assertRaises(ImageStoreException):
            self.store.upload(BytesIO(b"img"), "lamp.jpg", "image/jpeg")

    @patch("cloudinary.uploader.upload")
    def test_upload_incomplete_response_raises(self, mock_upload):
        mock_upload.return_value = {"bytes": 3}

        with self.assertRaises(ImageStoreException):
            self.store.upload(BytesIO(b"img"), "lamp.jpg", "image/jpeg")

    @patch("cloudinary.uploader.destroy")
    def test_delete_ok(self, mock_destroy):
        mock_destroy.return_value = {"result": "ok"}

        self.assertTrue(self.store.delete("lamp"))
        mock_destroy.assert_called_once_with("lamp", invalidate=True, timeout=3)

    @patch("cloudinary.uploader.destroy")
    def test_delete_not_found_returns_false(self, mock_destroy):
        mock_destroy.return_value = {"result": "not found"}

        self.assertFalse(self.store.delete("lamp"))

    @patch("cloudinary.uploader.destroy")
    def test_delete_unexpected_result_raises(self, mock_destroy):
        mock_destroy.return_value = {"result": "error"}

        with self.assertRaises(ImageStoreException):
            self.store.delete("lamp")

    @patch("cloudinary.uploader.destroy")
    def test_delete_sdk_error_raises(self, mock_destroy):
        mock_destroy.side_effect = CloudinaryError("Unexpected error - timed out")

        with self.assertRaises(ImageStoreException):
            self.store.delete("lamp")


class InMemoryImageStoreTest(SimpleTestCase):
    def setUp(self):
        self.store = InMemoryImageStore()

    def test_upload_and_delete(self):
        stored = self.store.upload(BytesIO(b"abc"), "lamp.jpg", "image/jpeg")

        self.assertEqual(self.store.public_id_from_url(stored.url), stored.public_id)
        self.assertEqual(stored.size, 3)
        self.assertTrue(self.store.delete(stored.public_id))
        self.assertFalse(self.store.delete(stored.public_id))
        self.assertEqual(self.store.delete_requests, [stored.public_id, stored.public_id])

    def test_failing_mode(self):
        self.store.failing = True

        with self.assertRaises(ImageStoreException):
            self.store.upload(BytesIO(b"abc"), "lamp.jpg", "image/jpeg")
        with self.assertRaises(ImageStoreException):
            self.store.delete("anything")

    def test_foreign_url_has_no_public_id(self):
        self.assertIsNone(self.store.public_id_from_url("https://example.com/lamp.jpg"))


class ImageStoreFactoryTest(SimpleTestCase):
    def test_explicit_backends(self):
        self.assertIsInstance(ImageStoreFactory.create("memory"), InMemoryImageStore)
        self.assertIsInstance(ImageStoreFactory.create("cloudinary"), CloudinaryImageStore)

    @override_settings(INFRASTRUCTURE={"IMAGE_STORE_BACKEND": "memory"})
    def test_backend_from_settings(self):
        self.assertIsInstance(ImageStoreFactory.create(), InMemoryImageStore)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            ImageStoreFactory.create("s3")
