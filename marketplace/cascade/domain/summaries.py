"""
Cascade summaries.

Plain records of what a product or account cascade did, returned to the
caller and logged. Failures are collected here instead of being raised.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ImageFailure:
    url: str
    reason: str
    public_id: Optional[str] = None


@dataclass
class CascadeSummary:
    """Outcome of purging one product."""

    product_id: str
    images_deleted: int = 0
    images_missing: int = 0
    image_failures: List[ImageFailure] = field(default_factory=list)
    orders_deleted: int = 0
    order_failure: Optional[str] = None
    product_deleted: bool = False
    product_failure: Optional[str] = None

    @property
    def failure_count(self) -> int:
        return len(self.image_failures) + (1 if self.order_failure else 0) + (1 if self.product_failure else 0)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["failure_count"] = self.failure_count
        return data


@dataclass
class AccountDeletionSummary:
    """Outcome of deleting one account and everything it participates in."""

    user_id: str
    products: List[CascadeSummary] = field(default_factory=list)
    product_listing_failure: Optional[str] = None
    buyer_orders_deleted: int = 0
    buyer_orders_failure: Optional[str] = None
    user_deleted: bool = False
    user_failure: Optional[str] = None

    @property
    def failure_count(self) -> int:
        count = sum(summary.failure_count for summary in self.products)
        for failure in (self.product_listing_failure, self.buyer_orders_failure, self.user_failure):
            if failure:
                count += 1
        return count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "products": [summary.to_dict() for summary in self.products],
            "products_deleted": sum(1 for summary in self.products if summary.product_deleted),
            "product_listing_failure": self.product_listing_failure,
            "buyer_orders_deleted": self.buyer_orders_deleted,
            "buyer_orders_failure": self.buyer_orders_failure,
            "user_deleted": self.user_deleted,
            "user_failure": self.user_failure,
            "failure_count": self.failure_count,
        }
