"""
Service layer primitives shared by the marketplace and accounts contexts.

Services return a ServiceResult instead of raising for expected failures
(missing rows, forbidden actions, invalid transitions). Views translate the
error code into an HTTP response through ``marketplace.api.errors``.
"""

import logging
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from django.core.paginator import EmptyPage, Paginator

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service call.

    Attributes:
        ok: True if the operation succeeded
        value: The success value
        error: Machine-readable code from ErrorCodes
        error_detail: Human-readable message
        error_context: Extra fields merged into the error body,
            e.g. ``allowed_statuses`` for a rejected transition
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    error_context: Dict[str, Any] = field(default_factory=dict)


def service_ok(value: T) -> ServiceResult[T]:
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "", **context) -> ServiceResult:
    """
    Build a failed result.

    Example:
        >>> service_err("invalid_transition", "...", allowed_statuses=["cancelled"])
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error, error_context=context)


def paginate(queryset, page: int, per_page: int) -> Tuple[List[Any], Paginator]:
    """
    Return the items of one page and the paginator.

    A page number past the end yields an empty list instead of the last page.
    """
    paginator = Paginator(queryset, per_page)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []
    return items, paginator


class BaseService:
    """Gives each service a class-scoped logger and the timing decorator."""

    def __init__(self):
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """Log duration and outcome of a service method; exceptions are logged and re-raised."""

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            started = time.perf_counter()
            method_name = f"{self.__class__.__name__}.{func.__name__}"
            self.logger.debug(f"{method_name} started")

            try:
                result = func(self, *args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - started) * 1000
                self.logger.error(f"{method_name} raised after {elapsed_ms:.2f}ms: {e}", exc_info=True)
                raise

            elapsed_ms = (time.perf_counter() - started) * 1000
            if isinstance(result, ServiceResult) and not result.ok:
                self.logger.warning(f"{method_name} failed with '{result.error}' in {elapsed_ms:.2f}ms")
            else:
                self.logger.info(f"{method_name} completed in {elapsed_ms:.2f}ms")
            return result

        return wrapper


class ErrorCodes:
    """Standard error codes used across marketplace and account services."""

    # Authentication / authorization
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission_denied"
    NOT_PRODUCT_OWNER = "not_product_owner"
    NOT_ORDER_PARTY = "not_order_party"
    NOT_ORDER_BUYER = "not_order_buyer"
    NOT_ACCOUNT_OWNER = "not_account_owner"

    # Lookup errors
    PRODUCT_NOT_FOUND = "product_not_found"
    ORDER_NOT_FOUND = "order_not_found"
    USER_NOT_FOUND = "user_not_found"

    # Validation errors
    VALIDATION_ERROR = "validation_error"
    INVALID_INPUT = "invalid_input"
    IMAGE_REQUIRED = "image_required"

    # Order lifecycle
    INVALID_TRANSITION = "invalid_transition"
    SELF_PURCHASE = "self_purchase"
    DUPLICATE_ACTIVE_ORDER = "duplicate_active_order"
    ORDER_NOT_DELETABLE = "order_not_deletable"

    # Account conflicts
    USERNAME_TAKEN = "username_taken"
    EMAIL_TAKEN = "email_taken"
    INVALID_CREDENTIALS = "invalid_credentials"

    # External services
    IMAGE_STORE_ERROR = "image_store_error"

    # Internal errors
    INTERNAL_ERROR = "internal_error"
