"""
Core data models for the storefront.

Users (the credential records), orders, categories and products. Documents are
stored as plain dicts in MetadataStorage; these models are the typed view
over them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, Field

from storefront.core.utils import utc_now


# =============================================================================
# Enums
# =============================================================================


class Role(IntEnum):
    """Account role. Stored as an integer for compatibility with the client."""

    USER = 0
    ADMIN = 1


class OrderStatus(str, Enum):
    """Lifecycle of an order, as shown in the admin order screen."""

    NOT_PROCESS = "Not Process"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# =============================================================================
# Users
# =============================================================================


class UserRecord(BaseModel):
    """
    A stored credential.

    `password_hash` is always a bcrypt hash and `answer` is the plaintext
    recovery answer; neither ever leaves the server (see `public()`).
    """

    id: str
    name: str
    email: str
    password_hash: str = Field(min_length=1)
    phone: str
    address: Any
    answer: str
    role: Role = Role.USER
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def public(self) -> dict[str, Any]:
        """Client-facing view, without hash or recovery answer."""
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "role": int(self.role),
        }


# =============================================================================
# Orders
# =============================================================================


class Order(BaseModel):
    """An order placed through checkout."""

    id: str
    products: list[str] = Field(default_factory=list)
    payment: dict[str, Any] = Field(default_factory=dict)
    buyer: str
    status: OrderStatus = OrderStatus.NOT_PROCESS
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def public(self, buyer: dict[str, Any] | None = None) -> dict[str, Any]:
        return {
            "_id": self.id,
            "products": list(self.products),
            "payment": self.payment,
            "buyer": buyer if buyer is not None else self.buyer,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


# =============================================================================
# Categories
# =============================================================================


class Category(BaseModel):
    id: str
    name: str
    slug: str

    def public(self) -> dict[str, Any]:
        return {"_id": self.id, "name": self.name, "slug": self.slug}


# =============================================================================
# Products
# =============================================================================


class Product(BaseModel):
    """A catalog item. `category` holds the category id."""

    id: str
    name: str
    slug: str
    description: str
    price: float
    category: str
    quantity: int
    shipping: bool | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def public(self, category: dict[str, Any] | None = None) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "price": self.price,
            "category": category if category is not None else self.category,
            "quantity": self.quantity,
            "shipping": self.shipping,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
