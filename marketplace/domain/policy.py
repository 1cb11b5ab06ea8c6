"""
Authorization Policy

Resolves the caller's role with respect to a product, an order or an account.
Roles are computed from the rows passed in on every call; nothing is cached,
so a change of ownership is visible to the next request.
"""

from enum import Enum
from typing import Iterable, Optional

from marketplace.services.base import ErrorCodes


class Role(str, Enum):
    ANONYMOUS = "anonymous"
    OWNER = "owner"
    BUYER = "buyer"
    SELLER = "seller"
    THIRD_PARTY = "third_party"


def _caller_id(caller):
    if caller is None or not getattr(caller, "is_authenticated", False):
        return None
    return caller.pk


def resolve_product_role(caller, product) -> Role:
    """Owner iff the caller is the product's seller."""
    caller_id = _caller_id(caller)
    if caller_id is None:
        return Role.ANONYMOUS
    if str(caller_id) == str(product.seller_id):
        return Role.OWNER
    return Role.THIRD_PARTY


def resolve_order_role(caller, order) -> Role:
    """
    Buyer iff the caller placed the order, seller iff the caller sells the
    ordered product. Buyer takes precedence; both cannot hold at once because
    self-purchase is rejected when the order is created.
    """
    caller_id = _caller_id(caller)
    if caller_id is None:
        return Role.ANONYMOUS
    if str(caller_id) == str(order.buyer_id):
        return Role.BUYER
    if str(caller_id) == str(order.product.seller_id):
        return Role.SELLER
    return Role.THIRD_PARTY


def resolve_account_role(caller, user_id) -> Role:
    caller_id = _caller_id(caller)
    if caller_id is None:
        return Role.ANONYMOUS
    if str(caller_id) == str(user_id):
        return Role.OWNER
    return Role.THIRD_PARTY


def require_role(role: Role, allowed: Iterable[Role], denial_code: str = ErrorCodes.PERMISSION_DENIED) -> Optional[str]:
    """
    Check a resolved role against the allowed set.

    Returns:
        None when allowed, otherwise the error code to report
        ("unauthenticated" for anonymous callers, denial_code for everyone else)
    """
    if role in allowed:
        return None
    if role == Role.ANONYMOUS:
        return ErrorCodes.UNAUTHENTICATED
    return denial_code
