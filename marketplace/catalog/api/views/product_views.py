from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import (
    CascadeSummaryResponseSerializer,
    ErrorResponseSerializer,
    ProductListResponseSerializer,
)
from marketplace.catalog.api.serializers.product_serializers import (
    ProductCreateRequestSerializer,
    ProductSerializer,
    ProductWriteSerializer,
)
from marketplace.catalog.domain.services.catalog_service import CatalogService


LIST_FILTER_PARAMS = [
    OpenApiParameter(name="category", type=str, description="Filter by category"),
    OpenApiParameter(name="condition", type=str, description="Filter by condition (repeatable)"),
    OpenApiParameter(name="seller", type=str, description="Filter by seller UUID"),
    OpenApiParameter(name="seller_username", type=str, description="Filter by seller username"),
    OpenApiParameter(name="min_price", type=float, description="Minimum price"),
    OpenApiParameter(name="max_price", type=float, description="Maximum price"),
    OpenApiParameter(name="min_year", type=int, description="Minimum year"),
    OpenApiParameter(name="max_year", type=int, description="Maximum year"),
    OpenApiParameter(name="is_sold", type=bool, description="Filter by sold flag"),
    OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
    OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20, max: 100)"),
]


def invalid_product_response(serializer) -> Response:
    return Response(
        {"error": "validation_error", "detail": "Invalid product data", "errors": serializer.errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


class ProductViewSet(viewsets.ViewSet):
    """
    Products: public reads, authenticated creation, seller-only writes.
    """

    permission_classes = [IsAuthenticatedOrReadOnly]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="""
        **What it receives:**
        - Optional filters (category, condition, seller, price and year ranges, is_sold)
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Paginated list of products, newest first, with seller info
        """,
        parameters=LIST_FILTER_PARAMS,
        responses={
            200: OpenApiResponse(response=ProductListResponseSerializer, description="Products retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filters"),
        },
        tags=["Marketplace - Products"],
    )
    def list(self, request):
        try:
            page = int(request.query_params.get("page", 1))
            page_size = min(int(request.query_params.get("page_size", 20)), 100)
        except ValueError:
            return Response(
                {"error": "validation_error", "detail": "page and page_size must be integers"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        filters = request.query_params.copy()
        for key in ("page", "page_size"):
            filters.pop(key, None)

        result = self.get_service().list_products(filters=filters, page=page, page_size=max(page_size, 1))
        if not result.ok:
            return error_response(result)

        response_data = dict(result.value)
        response_data["results"] = ProductSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="products_create",
        summary="Create product",
        description="""
        **What it receives:**
        - Product fields (name, description, price, year, category, condition)
        - `image_urls` of already uploaded images and/or `images` files (multipart)
        - Authentication token (caller becomes the seller)

        **What it returns:**
        - Created product
        - 502 if the image store fails while uploading `images` (nothing is saved)
        """,
        request=ProductCreateRequestSerializer,
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Product created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Image store failure"),
        },
        tags=["Marketplace - Products"],
    )
    def create(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_product_response(serializer)

        images = request.FILES.getlist("images") if request.FILES else []
        result = self.get_service().create_product(serializer.validated_data, request.user, images=images)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product details",
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Product retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_product(pk)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="products_update",
        summary="Update product (seller only)",
        description="""
        **What it receives:**
        - Any subset of product fields; seller, id and timestamps are ignored
        - Authentication token (must be the product's seller)

        **What it returns:**
        - Updated product
        """,
        request=ProductWriteSerializer,
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Product updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def update(self, request, pk=None):
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return invalid_product_response(serializer)

        result = self.get_service().update_product(pk, serializer.validated_data, request.user)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(operation_id="products_partial_update", tags=["Marketplace - Products"])
    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @extend_schema(
        operation_id="products_destroy",
        summary="Delete product (seller only)",
        description="""
        **What it receives:**
        - `pk` (UUID in URL)
        - Authentication token (must be the product's seller)

        **What it returns:**
        - Cascade summary: images removed from the image store, orders deleted,
          and any cleanup step that failed. Cleanup failures do not block deletion.
        """,
        responses={
            200: OpenApiResponse(response=CascadeSummaryResponseSerializer, description="Product deleted"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_product(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(result.value.to_dict(), status=status.HTTP_200_OK)
