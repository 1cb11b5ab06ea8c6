# Marketplace API Serializers

# Import response serializers for API documentation
from .response_serializers import (
    AccountDeletionResponseSerializer,
    CascadeSummaryResponseSerializer,
    CreateOrderRequestSerializer,
    ErrorResponseSerializer,
    ImageUploadRequestSerializer,
    ImageUploadResponseSerializer,
    InvalidTransitionResponseSerializer,
    OrderDeletedResponseSerializer,
    OrderListResponseSerializer,
    ProductListResponseSerializer,
    UpdateOrderStatusRequestSerializer,
)


__all__ = [
    "AccountDeletionResponseSerializer",
    "CascadeSummaryResponseSerializer",
    "CreateOrderRequestSerializer",
    "ErrorResponseSerializer",
    "ImageUploadRequestSerializer",
    "ImageUploadResponseSerializer",
    "InvalidTransitionResponseSerializer",
    "OrderDeletedResponseSerializer",
    "OrderListResponseSerializer",
    "ProductListResponseSerializer",
    "UpdateOrderStatusRequestSerializer",
]
