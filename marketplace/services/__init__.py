"""
Marketplace Service Layer

Shared building blocks for the marketplace services. The services themselves
live in their bounded contexts:

- marketplace.catalog.domain.services.CatalogService: Product browsing, CRUD and image uploads
- marketplace.ordering.domain.services.OrderService: Order lifecycle (placement, transitions, deletion)
- marketplace.cascade.domain.services.CascadeService: Product and account deletion with dependants

Usage:
    from marketplace.services import ErrorCodes, service_err, service_ok

    result = container.order_service().create_order(user, product_id)

    if result.ok:
        order = result.value
    else:
        error = result.error
"""

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Helper functions
    "service_ok",
    "service_err",
    # Error codes
    "ErrorCodes",
]
