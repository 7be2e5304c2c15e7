"""
Core models and helpers shared by the storefront modules.
"""

from storefront.core.models import (
    Category,
    Order,
    OrderStatus,
    Product,
    Role,
    UserRecord,
)
from storefront.core.utils import generate_id, is_valid_email, make_slug, utc_now

__all__ = [
    "Category",
    "Order",
    "OrderStatus",
    "Product",
    "Role",
    "UserRecord",
    "generate_id",
    "is_valid_email",
    "make_slug",
    "utc_now",
]
