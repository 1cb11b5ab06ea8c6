from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import (
    CreateOrderRequestSerializer,
    ErrorResponseSerializer,
    InvalidTransitionResponseSerializer,
    OrderDeletedResponseSerializer,
    OrderListResponseSerializer,
    UpdateOrderStatusRequestSerializer,
)
from marketplace.ordering.api.serializers.order_serializers import OrderSerializer
from marketplace.ordering.domain.services.order_service import OrderService


class OrderViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> OrderService:
        return container.order_service()

    @extend_schema(
        operation_id="orders_list",
        summary="List the caller's orders",
        description="""
        **What it receives:**
        - Authentication token
        - Optional `role` (buyer, seller, all) and `status` filters
        - Pagination parameters (page, limit)

        **What it returns:**
        - Paginated list of orders, newest first
        """,
        parameters=[
            OpenApiParameter(name="role", type=str, description="buyer, seller or all (default: all)"),
            OpenApiParameter(name="status", type=str, description="Filter by order status"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="limit", type=int, description="Items per page (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=OrderListResponseSerializer, description="Orders retrieved successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filters"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
        },
        tags=["Marketplace - Orders"],
    )
    def list(self, request):
        try:
            page = int(request.query_params.get("page", 1))
            limit = int(request.query_params.get("limit", 10))
        except ValueError:
            return Response(
                {"error": "validation_error", "detail": "page and limit must be integers"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = self.get_service().list_orders(
            request.user,
            role=request.query_params.get("role"),
            status=request.query_params.get("status") or None,
            page=page,
            limit=limit,
        )
        if not result.ok:
            return error_response(result)

        response_data = dict(result.value)
        response_data["results"] = OrderSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_create",
        summary="Place an order",
        description="""
        **What it receives:**
        - `product` (UUID): Product to order
        - `status` (optional): only "pending" is accepted
        - Authentication token (caller becomes the buyer)

        **What it returns:**
        - Created order in pending status with buyer and product seller
        - 400 when ordering your own product or when you already have an
          active (pending or confirmed) order for the product
        """,
        request=CreateOrderRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order created successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error or conflict"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def create(self, request):
        product_id = request.data.get("product") or request.data.get("product_id")
        result = self.get_service().create_order(request.user, product_id, status=request.data.get("status"))
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get order details",
        description="""
        **What it receives:**
        - `pk` (UUID in URL): Order to retrieve
        - Authentication token (must be the buyer or the product's seller)
        """,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order retrieved successfully"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a party to the order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_order(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_update_status",
        summary="Change order status",
        description="""
        **What it receives:**
        - `status`: target status
        - Authentication token (buyer or product seller)

        **Rules:**
        - Buyer: pending -> cancelled, confirmed -> cancelled
        - Seller: pending -> confirmed, pending -> cancelled
        - Cancelled is terminal

        **What it returns:**
        - Updated order, or 400 with `allowed_statuses` for the caller
        """,
        request=UpdateOrderStatusRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Status updated"),
            400: OpenApiResponse(response=InvalidTransitionResponseSerializer, description="Transition not allowed"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a party to the order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def update(self, request, pk=None):
        result = self.get_service().transition_order(pk, request.user, request.data.get("status"))
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(operation_id="orders_partial_update_status", tags=["Marketplace - Orders"])
    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @extend_schema(
        operation_id="orders_destroy",
        summary="Delete a pending order (buyer only)",
        responses={
            200: OpenApiResponse(response=OrderDeletedResponseSerializer, description="Order deleted"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Order is not pending"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the buyer"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_order(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(result.value, status=status.HTTP_200_OK)
