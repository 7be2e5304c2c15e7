"""
Order store.

Orders are written by checkout and read/updated by the account and admin
screens. Status changes are limited to the OrderStatus values.
"""

from __future__ import annotations

import logging
from typing import Any

from storefront.core.models import Order, OrderStatus
from storefront.core.utils import generate_id, utc_now
from storefront.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)


class InvalidOrderStatusError(ValueError):
    """Status is not one of the OrderStatus values."""
    pass


class OrderStore:
    """Reads and writes orders."""

    def __init__(self, storage: MetadataStorage):
        self.storage = storage

    async def create(
        self,
        buyer_id: str,
        products: list[str],
        payment: dict[str, Any] | None = None,
    ) -> Order:
        order = Order(
            id=generate_id("order"),
            buyer=buyer_id,
            products=list(products),
            payment=payment or {},
        )
        await self.storage.save(Collections.ORDERS, order.id, order.model_dump(mode="json"))
        logger.info(f"Created order {order.id} for {buyer_id}")
        return order

    async def get(self, order_id: str) -> Order | None:
        doc = await self.storage.get(Collections.ORDERS, order_id)
        return Order.model_validate(doc) if doc else None

    async def list_for_buyer(self, buyer_id: str) -> list[Order]:
        docs = await self.storage.query(Collections.ORDERS, {"buyer": buyer_id}, limit=1000)
        return [Order.model_validate(doc) for doc in docs]

    async def list_all(self) -> list[Order]:
        """All orders, newest first."""
        docs = await self.storage.query(Collections.ORDERS, limit=10_000)
        orders = [Order.model_validate(doc) for doc in docs]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    async def update_status(self, order_id: str, status: str) -> Order | None:
        """
        Move an order to `status`.

        Returns the updated order, or None if it does not exist.

        Raises:
            InvalidOrderStatusError: status is not a known value
        """
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise InvalidOrderStatusError(f"Invalid order status: {status}")

        updated = await self.storage.update(
            Collections.ORDERS,
            order_id,
            {"status": new_status.value, "updated_at": utc_now().isoformat()},
        )
        if not updated:
            return None
        return await self.get(order_id)
