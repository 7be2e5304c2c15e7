"""
Product store.

Catalog reads for the shop pages and writes for the admin product screens.
The slug follows the name on every write. Listing, paging and the filters
run over the whole collection, which is fine for a catalog this size; a
database-backed store would push them into the query.
"""

from __future__ import annotations

import logging
from typing import Any

from storefront.core.models import Product
from storefront.core.utils import generate_id, make_slug, utc_now
from storefront.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "description", "price", "category", "quantity", "shipping"}

# Shop page sizes
HOME_PAGE_LIMIT = 12
PER_PAGE = 6
RELATED_LIMIT = 3


class ProductStore:
    """Reads and writes catalog products."""

    def __init__(self, storage: MetadataStorage):
        self.storage = storage

    async def _all(self, newest_first: bool = True, **filters: Any) -> list[Product]:
        docs = await self.storage.query(Collections.PRODUCTS, filters or None, limit=10_000)
        products = [Product.model_validate(doc) for doc in docs]
        if newest_first:
            # Equal timestamps fall back to reverse insertion order
            return sorted(products[::-1], key=lambda p: p.created_at, reverse=True)
        return sorted(products, key=lambda p: p.created_at)

    async def create(
        self,
        name: str,
        description: str,
        price: float,
        category: str,
        quantity: int,
        shipping: bool | None = None,
    ) -> Product:
        product = Product(
            id=generate_id("prod"),
            name=name,
            slug=make_slug(name),
            description=description,
            price=price,
            category=category,
            quantity=quantity,
            shipping=shipping,
        )
        await self.storage.save(
            Collections.PRODUCTS, product.id, product.model_dump(mode="json")
        )
        logger.info(f"Created product {product.slug}")
        return product

    async def get(self, product_id: str) -> Product | None:
        doc = await self.storage.get(Collections.PRODUCTS, product_id)
        return Product.model_validate(doc) if doc else None

    async def get_by_name(self, name: str) -> Product | None:
        docs = await self.storage.query(Collections.PRODUCTS, {"name": name}, limit=1)
        return Product.model_validate(docs[0]) if docs else None

    async def get_by_slug(self, slug: str) -> Product | None:
        docs = await self.storage.query(Collections.PRODUCTS, {"slug": slug}, limit=1)
        return Product.model_validate(docs[0]) if docs else None

    async def update(self, product_id: str, **fields: Any) -> Product | None:
        """
        Update product fields and return the fresh product.

        Unknown fields are rejected; None values are skipped. Returns None
        if the product does not exist.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        updates = {k: v for k, v in fields.items() if v is not None}
        if "name" in updates:
            updates["slug"] = make_slug(updates["name"])
        updates["updated_at"] = utc_now().isoformat()

        if not await self.storage.update(Collections.PRODUCTS, product_id, updates):
            return None
        return await self.get(product_id)

    async def delete(self, product_id: str) -> bool:
        return await self.storage.delete(Collections.PRODUCTS, product_id)

    # -------------------------------------------------------------------------
    # Shop queries
    # -------------------------------------------------------------------------

    async def latest(self, limit: int = HOME_PAGE_LIMIT) -> list[Product]:
        return (await self._all())[:limit]

    async def count(self) -> int:
        return len(await self._all())

    async def page(self, page: int, per_page: int = PER_PAGE) -> list[Product]:
        """One page of the catalog, 1-based. Pages below 1 read as page 1."""
        page = max(page, 1)
        start = (page - 1) * per_page
        return (await self._all())[start:start + per_page]

    async def filter(
        self,
        categories: list[str] | None = None,
        price_range: list[float] | None = None,
    ) -> list[Product]:
        """
        Products in any of `categories` priced within `price_range`.

        An empty category list matches every category; a price range needs
        both bounds (inclusive) to apply.
        """
        products = await self._all()
        if categories:
            products = [p for p in products if p.category in categories]
        if price_range and len(price_range) == 2:
            low, high = price_range
            products = [p for p in products if low <= p.price <= high]
        return products

    async def search(self, keyword: str) -> list[Product]:
        """Case-insensitive match on name or description, oldest first."""
        needle = keyword.lower()
        return [
            p for p in await self._all(newest_first=False)
            if needle in p.name.lower() or needle in p.description.lower()
        ]

    async def related(
        self, product_id: str, category_id: str, limit: int = RELATED_LIMIT
    ) -> list[Product]:
        """Other products from the same category."""
        same_category = await self._all(category=category_id)
        return [p for p in same_category if p.id != product_id][:limit]

    async def in_category(self, category_id: str) -> list[Product]:
        return await self._all(category=category_id)
