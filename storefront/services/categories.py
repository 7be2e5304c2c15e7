"""
Category store.

Category names are unique; the slug is derived from the name on every
write.
"""

from __future__ import annotations

import logging

from storefront.core.models import Category
from storefront.core.utils import generate_id, make_slug
from storefront.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)


class CategoryStore:
    """Reads and writes product categories."""

    def __init__(self, storage: MetadataStorage):
        self.storage = storage

    async def _find_one(self, **filters: str) -> Category | None:
        docs = await self.storage.query(Collections.CATEGORIES, filters, limit=1)
        return Category.model_validate(docs[0]) if docs else None

    async def create(self, name: str) -> Category:
        category = Category(id=generate_id("cat"), name=name, slug=make_slug(name))
        await self.storage.save(
            Collections.CATEGORIES, category.id, category.model_dump(mode="json")
        )
        logger.info(f"Created category {category.slug}")
        return category

    async def get(self, category_id: str) -> Category | None:
        doc = await self.storage.get(Collections.CATEGORIES, category_id)
        return Category.model_validate(doc) if doc else None

    async def get_by_name(self, name: str) -> Category | None:
        return await self._find_one(name=name)

    async def get_by_slug(self, slug: str) -> Category | None:
        return await self._find_one(slug=slug)

    async def list_all(self) -> list[Category]:
        docs = await self.storage.query(Collections.CATEGORIES, limit=1000)
        return [Category.model_validate(doc) for doc in docs]

    async def update(self, category_id: str, name: str) -> Category | None:
        """Rename a category. Returns None if it does not exist."""
        updated = await self.storage.update(
            Collections.CATEGORIES,
            category_id,
            {"name": name, "slug": make_slug(name)},
        )
        if not updated:
            return None
        return await self.get(category_id)

    async def delete(self, category_id: str) -> bool:
        return await self.storage.delete(Collections.CATEGORIES, category_id)
