"""
Mapping from service error codes to HTTP responses.

Every view turns a failed ServiceResult into a Response through
error_response(), so status codes stay consistent across the API.
"""

from rest_framework import status
from rest_framework.response import Response

from marketplace.services.base import ErrorCodes, ServiceResult

ERROR_STATUS = {
    # 401
    ErrorCodes.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    # 403
    ErrorCodes.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_PRODUCT_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_ORDER_PARTY: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_ORDER_BUYER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_ACCOUNT_OWNER: status.HTTP_403_FORBIDDEN,
    # 404
    ErrorCodes.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 400
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.IMAGE_REQUIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_CREDENTIALS: status.HTTP_400_BAD_REQUEST,
    # Order conflicts are reported as 400
    ErrorCodes.SELF_PURCHASE: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.DUPLICATE_ACTIVE_ORDER: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.ORDER_NOT_DELETABLE: status.HTTP_400_BAD_REQUEST,
    # Account conflicts
    ErrorCodes.USERNAME_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCodes.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
    # External services
    ErrorCodes.IMAGE_STORE_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def status_for(error_code: str) -> int:
    return ERROR_STATUS.get(error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(result: ServiceResult) -> Response:
    """
    Build the error body {"error": code, "detail": message, **context}.

    For invalid_transition the context carries allowed_statuses (possibly []).
    """
    body = {"error": result.error, "detail": result.error_detail}
    body.update(result.error_context)
    return Response(body, status=status_for(result.error))
