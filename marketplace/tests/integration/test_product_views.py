import uuid

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from infrastructure.images.memory_adapter import MEMORY_URL_PREFIX
from marketplace.models import Order, Product
from marketplace.tests.factories import OrderFactory, ProductFactory, SellerFactory, UserFactory


def product_payload(**overrides):
    data = {
        "name": "Lamp",
        "description": "Brass desk lamp, works fine",
        "price": "19.99",
        "year": 1985,
        "category": "home",
        "condition": "good",
        "image_urls": [f"{MEMORY_URL_PREFIX}lamp"],
    }
    data.update(overrides)
    return data


def image_file(name="lamp.jpg"):
    return SimpleUploadedFile(name, b"\x89PNG fake image", content_type="image/png")


class ProductViewIntegrationTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.image_store = container.image_store()
        self.client = APIClient()

        self.seller = SellerFactory(username="lampseller")
        self.other = UserFactory(username="someoneelse")
        self.product = ProductFactory(seller=self.seller, category="home", price="25.00")

        self.list_url = reverse("marketplace:product-list")
        self.detail_url = reverse("marketplace:product-detail", kwargs={"pk": self.product.id})

    def tearDown(self):
        container.reset()

    def test_list_products_is_public(self):
        ProductFactory(category="books")

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
        seller = next(p["seller"] for p in response.data["results"] if p["id"] == str(self.product.id))
        self.assertEqual(seller["username"], "lampseller")
        self.assertNotIn("email", seller)

    def test_list_products_filters(self):
        ProductFactory(category="books", is_sold=True)

        by_category = self.client.get(self.list_url, {"category": "home"})
        by_sold = self.client.get(self.list_url, {"is_sold": "true"})
        by_seller = self.client.get(self.list_url, {"seller_username": "LampSeller"})

        self.assertEqual([p["id"] for p in by_category.data["results"]], [str(self.product.id)])
        self.assertEqual(by_sold.data["count"], 1)
        self.assertEqual(by_seller.data["count"], 1)

    def test_list_products_invalid_filter(self):
        response = self.client.get(self.list_url, {"category": "weapons"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "validation_error")

    def test_list_products_page_past_the_end(self):
        response = self.client.get(self.list_url, {"page": 5, "page_size": 10})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["results"], [])
        self.assertEqual(response.data["page"], 5)
        self.assertEqual(response.data["count"], 1)

    def test_retrieve_product(self):
        response = self.client.get(self.detail_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["name"], self.product.name)

    def test_retrieve_missing_product(self):
        response = self.client.get(reverse("marketplace:product-detail", kwargs={"pk": uuid.uuid4()}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "product_not_found")

    def test_create_requires_authentication(self):
        response = self.client.post(self.list_url, product_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(Product.objects.filter(name="Lamp").exists())

    def test_create_product_with_image_urls(self):
        self.client.force_authenticate(user=self.other)

        response = self.client.post(self.list_url, product_payload(seller=str(self.seller.id)), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["seller"]["id"], str(self.other.id))
        self.assertEqual(response.data["price"], "19.99")
        self.assertFalse(response.data["is_sold"])

    def test_create_product_requires_image(self):
        self.client.force_authenticate(user=self.other)

        response = self.client.post(self.list_url, product_payload(image_urls=[]), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "image_required")

    def test_create_product_validation_errors(self):
        self.client.force_authenticate(user=self.other)

        response = self.client.post(self.list_url, product_payload(price="-1", year=1800), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(set(response.data["errors"]), {"price", "year"})

    def test_create_product_price_out_of_range(self):
        self.client.force_authenticate(user=self.other)

        for price in ("100000000000", "1e30", "19.999"):
            response = self.client.post(self.list_url, product_payload(price=price), format="json")

            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data["error"], "validation_error")
            self.assertIn("price", response.data["errors"])
        self.assertFalse(Product.objects.filter(seller=self.other).exists())

    def test_create_product_multipart_validation_errors(self):
        self.client.force_authenticate(user=self.other)
        payload = product_payload(condition="mint")
        payload.pop("image_urls")
        payload["images"] = [image_file()]

        response = self.client.post(self.list_url, payload, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("condition", response.data["errors"])
        self.assertEqual(self.image_store.images, {})

    def test_create_product_multipart_upload(self):
        self.client.force_authenticate(user=self.other)
        payload = product_payload()
        payload.pop("image_urls")
        payload["images"] = [image_file()]

        response = self.client.post(self.list_url, payload, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["image_urls"]), 1)
        public_id = self.image_store.public_id_from_url(response.data["image_urls"][0])
        self.assertIn(public_id, self.image_store.images)

    def test_create_product_image_store_outage(self):
        self.client.force_authenticate(user=self.other)
        self.image_store.failing = True
        payload = product_payload()
        payload.pop("image_urls")
        payload["images"] = [image_file()]

        response = self.client.post(self.list_url, payload, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data["error"], "image_store_error")
        self.assertFalse(Product.objects.filter(seller=self.other).exists())

    def test_update_by_seller(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.patch(self.detail_url, {"price": "30.00", "is_sold": True}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.product.refresh_from_db()
        self.assertEqual(str(self.product.price), "30.00")
        self.assertTrue(self.product.is_sold)

    def test_update_price_out_of_range(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.patch(self.detail_url, {"price": "100000000000"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("price", response.data["errors"])
        self.product.refresh_from_db()
        self.assertEqual(str(self.product.price), "25.00")

    def test_update_cannot_change_seller(self):
        self.client.force_authenticate(user=self.seller)

        self.client.patch(self.detail_url, {"seller": str(self.other.id)}, format="json")

        self.product.refresh_from_db()
        self.assertEqual(self.product.seller, self.seller)

    def test_update_by_other_user_is_forbidden(self):
        self.client.force_authenticate(user=self.other)

        response = self.client.put(self.detail_url, {"name": "Stolen"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "not_product_owner")

    def test_update_anonymous(self):
        response = self.client.patch(self.detail_url, {"name": "Anon"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_delete_by_seller_cascades(self):
        OrderFactory(product=self.product, buyer=self.other)
        self.client.force_authenticate(user=self.seller)

        response = self.client.delete(self.detail_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["product_deleted"])
        self.assertEqual(response.data["orders_deleted"], 1)
        self.assertFalse(Product.objects.filter(id=self.product.id).exists())
        self.assertFalse(Order.objects.filter(product_id=self.product.id).exists())

    def test_delete_with_image_store_outage_still_succeeds(self):
        self.image_store.failing = True
        self.client.force_authenticate(user=self.seller)

        response = self.client.delete(self.detail_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["failure_count"], 1)
        self.assertFalse(Product.objects.filter(id=self.product.id).exists())

    def test_delete_by_other_user_is_forbidden(self):
        self.client.force_authenticate(user=self.other)

        response = self.client.delete(self.detail_url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Product.objects.filter(id=self.product.id).exists())


class ImageUploadViewIntegrationTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.image_store = container.image_store()
        self.client = APIClient()
        self.user = UserFactory()
        self.url = reverse("marketplace:image-upload")

    def tearDown(self):
        container.reset()

    def test_upload_image(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post(self.url, {"image": image_file()}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(response.data["public_id"], self.image_store.images)
        self.assertTrue(response.data["url"].startswith(MEMORY_URL_PREFIX))

    def test_upload_requires_authentication(self):
        response = self.client.post(self.url, {"image": image_file()}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_upload_store_failure(self):
        self.client.force_authenticate(user=self.user)
        self.image_store.failing = True

        response = self.client.post(self.url, {"image": image_file()}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)

    def test_upload_rejects_non_image(self):
        self.client.force_authenticate(user=self.user)
        text = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")

        response = self.client.post(self.url, {"image": text}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class MetricsViewTest(TestCase):
    def test_metrics_are_exposed(self):
        response = APIClient().get(reverse("marketplace:marketplace-metrics"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(b"marketplace_orders_placed_total", response.content)
