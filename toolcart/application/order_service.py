"""Order registry.

Write-once store for orders settled by the UCP checkout protocol.
"""

from typing import Any

import structlog

from toolcart.domain.entities import Order
from toolcart.domain.exceptions import (
    MissingFieldError,
    OrderAlreadyExistsError,
    OrderNotFoundError,
)

logger = structlog.get_logger()


class OrderRegistry:
    """In-memory id -> Order map. An id is written at most once."""

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}

    def get(self, order_id: Any) -> Order:
        """Get an order by id, unchanged.

        Raises:
            MissingFieldError: If the id is empty.
            OrderNotFoundError: If the id is not registered.
        """
        oid = "" if order_id is None else str(order_id)
        if not oid:
            raise MissingFieldError("orderId")
        order = self._orders.get(oid)
        if order is None:
            raise OrderNotFoundError(oid)
        return order

    def put(self, order: Order) -> Order:
        """Store a new order.

        Raises:
            OrderAlreadyExistsError: If the id is already taken.
        """
        if order.id in self._orders:
            raise OrderAlreadyExistsError(order.id)
        self._orders = {**self._orders, order.id: order}

        logger.info(
            "Order stored",
            order_id=order.id,
            payment_intent_id=order.payment_intent_id,
            total_minor=order.totals.total.amount_minor,
        )
        return order

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._orders

    def __len__(self) -> int:
        return len(self._orders)
