"""
Storage abstraction layer.

All persistence goes through these interfaces. The application only needs
a document store (users, orders, categories, products); a MongoDB- or
PostgreSQL-backed implementation can be swapped in without touching the
services that use it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# =============================================================================
# Storage Interfaces
# =============================================================================


class MetadataStorage(ABC):
    """
    Storage for structured documents.

    Each single-document write is expected to be atomic. Nothing here
    guarantees consistency across documents.
    """

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Save a document to a collection."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a document."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query documents with optional equality filters."""
        pass

    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        """Partial update of a document."""
        pass


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection/table names."""

    USERS = "users"
    ORDERS = "orders"
    CATEGORIES = "categories"
    PRODUCTS = "products"
