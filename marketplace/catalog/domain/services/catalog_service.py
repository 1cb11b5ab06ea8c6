"""
CatalogService - Product CRUD

Handles product browsing, creation, partial updates and image uploads.
Deletion is handed to the CascadeService so that orders and remote images
go with the product.
"""

from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError

from infrastructure.container import container
from infrastructure.images.interface import ImageStoreException, StoredImage
from marketplace.catalog.domain.models.product import Product
from marketplace.domain.policy import Role, require_role, resolve_product_role
from marketplace.filters import ProductFilter
from marketplace.infra.observability.metrics import image_uploads_total
from marketplace.infra.observability.tracing import tracer
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok


# Fields a seller may set; anything else in the payload (seller, id, timestamps) is dropped
WRITABLE_FIELDS = ("name", "description", "image_urls", "price", "year", "category", "condition", "is_sold")


def writable_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {field: data[field] for field in WRITABLE_FIELDS if field in data}


class CatalogService(BaseService):
    """
    Service for managing product catalog operations.

    Responsibilities:
    - List products with filtering and pagination (public)
    - Get product details (public)
    - Create products, images pushed to the image store first
    - Update products (seller only)
    - Delete products (seller only, via CascadeService)
    - Client-initiated image uploads

    All operations validate permissions and return ServiceResult.
    """

    def __init__(self, image_store=None, cascade_service=None):
        """
        Initialize CatalogService.

        Args:
            image_store: Image store abstraction (injected via DI container)
            cascade_service: Cascade manager used for product deletion
        """
        super().__init__()
        self.image_store = image_store or container.image_store()
        self._cascade_service = cascade_service

    @property
    def cascade_service(self):
        if self._cascade_service is None:
            self._cascade_service = container.cascade_service()
        return self._cascade_service

    @BaseService.log_performance
    def list_products(
        self, filters: Optional[Dict[str, Any]] = None, page: int = 1, page_size: int = 20
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List products with filtering and pagination, newest first.

        Args:
            filters: Query parameters understood by ProductFilter
            page: Page number (1-indexed)
            page_size: Items per page

        Returns:
            ServiceResult with results, count, page, page_size, num_pages
        """
        with tracer.start_as_current_span("catalog_list_products") as span:
            span.set_attribute("page", page)
            if page < 1 or page_size < 1:
                return service_err(ErrorCodes.VALIDATION_ERROR, "page and page_size must be positive integers")

            try:
                queryset = Product.objects.select_related("seller").order_by("-created_at")

                filterset = ProductFilter(filters or {}, queryset=queryset)
                if not filterset.is_valid():
                    return service_err(
                        ErrorCodes.VALIDATION_ERROR, "Invalid product filters", errors=filterset.errors.get_json_data()
                    )

                results, paginator = paginate(filterset.qs, page, page_size)

                result_data = {
                    "results": results,
                    "count": paginator.count,
                    "page": page,
                    "page_size": page_size,
                    "num_pages": paginator.num_pages,
                }

                self.logger.info(f"Listed products: count={paginator.count}, page={page}")
                return service_ok(result_data)

            except Exception as e:
                self.logger.error(f"Error listing products: {e}", exc_info=True)
                span.record_exception(e)
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_product(self, product_id: str) -> ServiceResult[Product]:
        """
        Get product details by ID, seller selected for display.

        Returns:
            ServiceResult with Product instance, or product_not_found
        """
        try:
            product = Product.objects.select_related("seller").get(id=product_id)
            return service_ok(product)
        except (Product.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        except Exception as e:
            self.logger.error(f"Error getting product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def create_product(self, data: Dict[str, Any], caller, images: Optional[List] = None) -> ServiceResult[Product]:
        """
        Create a product listed by the caller.

        Uploaded files in `images` are pushed to the image store before
        anything is written; their URLs are appended to data["image_urls"].
        If any upload fails the product is not created and the images already
        uploaded for this request are removed again (best effort).

        Args:
            data: Validated product fields (seller/id/timestamps are ignored)
            caller: Authenticated user, becomes the seller
            images: Optional uploaded files

        Returns:
            ServiceResult with the created Product
        """
        role = Role.ANONYMOUS if not getattr(caller, "is_authenticated", False) else Role.OWNER
        denial = require_role(role, [Role.OWNER])
        if denial:
            return service_err(denial, "Authentication required to list a product")

        cleaned = writable_fields(data)

        image_urls = list(cleaned.get("image_urls") or [])
        if not image_urls and not images:
            return service_err(ErrorCodes.IMAGE_REQUIRED, "At least one product image is required")

        uploaded: List[StoredImage] = []
        try:
            for image in images or []:
                uploaded.append(self._store_image(image))
        except ImageStoreException as e:
            self.logger.error(f"Image upload failed while creating product for user {caller.id}: {e}")
            self._discard_uploads(uploaded)
            return service_err(ErrorCodes.IMAGE_STORE_ERROR, f"Image store failure: {e}")
        except ValueError as e:
            self._discard_uploads(uploaded)
            return service_err(ErrorCodes.INVALID_INPUT, str(e))

        cleaned["image_urls"] = image_urls + [stored.url for stored in uploaded]

        try:
            product = Product.objects.create(seller=caller, **cleaned)
            self.logger.info(f"Created product {product.id} by seller {caller.id}")
            return service_ok(product)
        except Exception as e:
            self.logger.error(f"Error creating product for user {caller.id}: {e}", exc_info=True)
            self._discard_uploads(uploaded)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def update_product(self, product_id: str, data: Dict[str, Any], caller) -> ServiceResult[Product]:
        """
        Partially update a product (seller only).

        Immutable and unknown fields are ignored. An update that would leave
        the product without images is rejected.
        """
        try:
            product = Product.objects.select_related("seller").get(id=product_id)
        except (Product.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

        denial = require_role(resolve_product_role(caller, product), [Role.OWNER], ErrorCodes.NOT_PRODUCT_OWNER)
        if denial:
            return service_err(denial, "Only the seller can update this product")

        cleaned = writable_fields(data)

        if "image_urls" in cleaned and not cleaned["image_urls"]:
            return service_err(ErrorCodes.IMAGE_REQUIRED, "At least one product image is required")

        try:
            for field, value in cleaned.items():
                setattr(product, field, value)
            if cleaned:
                product.save(update_fields=list(cleaned) + ["updated_at"])

            self.logger.info(f"Updated product {product.id}: fields={sorted(cleaned)}")
            return service_ok(product)
        except Exception as e:
            self.logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def delete_product(self, product_id: str, caller) -> ServiceResult:
        """Delete a product (seller only) with its orders and images."""
        return self.cascade_service.delete_product(product_id, caller)

    @BaseService.log_performance
    def upload_image(self, file, caller) -> ServiceResult[StoredImage]:
        """
        Upload a single image on behalf of an authenticated caller.

        Returns:
            ServiceResult with StoredImage (url, public_id)
        """
        if not getattr(caller, "is_authenticated", False):
            return service_err(ErrorCodes.UNAUTHENTICATED, "Authentication required to upload images")

        if file is None:
            return service_err(ErrorCodes.IMAGE_REQUIRED, "No image file provided")

        try:
            stored = self._store_image(file)
        except ImageStoreException as e:
            self.logger.error(f"Image upload failed for user {caller.id}: {e}")
            return service_err(ErrorCodes.IMAGE_STORE_ERROR, f"Image store failure: {e}")
        except ValueError as e:
            return service_err(ErrorCodes.INVALID_INPUT, str(e))

        return service_ok(stored)

    def _store_image(self, file) -> StoredImage:
        """
        Validate and push one uploaded file to the image store.

        Raises:
            ValueError: file is not an image or is too large
            ImageStoreException: store failure
        """
        content_type = getattr(file, "content_type", "") or ""
        if not content_type.startswith("image/"):
            raise ValueError(f"Unsupported content type: {content_type or 'unknown'}")

        max_size = getattr(settings, "MAX_IMAGE_UPLOAD_SIZE", 5 * 1024 * 1024)
        if getattr(file, "size", 0) and file.size > max_size:
            raise ValueError(f"Image exceeds maximum size of {max_size} bytes")

        try:
            stored = self.image_store.upload(file, getattr(file, "name", "image"), content_type)
        except ImageStoreException:
            image_uploads_total.labels(status="failed").inc()
            raise

        image_uploads_total.labels(status="ok").inc()
        return stored

    def _discard_uploads(self, uploaded: List[StoredImage]):
        for stored in uploaded:
            try:
                self.image_store.delete(stored.public_id)
            except ImageStoreException as e:
                self.logger.warning(f"Could not remove orphaned image {stored.public_id}: {e}")
