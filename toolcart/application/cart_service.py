"""Cart ledger.

Holds the productId -> quantity mapping and computes cart snapshots.
The mapping is never modified in place: every mutation builds a new dict
and swaps it in, so a reader holding the previous mapping always sees a
consistent cart.
"""

import math
from types import MappingProxyType
from typing import Any, Mapping

import structlog

from toolcart.catalog.repository import CatalogStore
from toolcart.domain.entities import CartLine, CartSnapshot
from toolcart.domain.exceptions import (
    InvalidQuantityError,
    MissingFieldError,
    ProductNotFoundError,
)
from toolcart.domain.value_objects import DEFAULT_CURRENCY, Money

logger = structlog.get_logger()


def _require_product_id(product_id: Any) -> str:
    value = "" if product_id is None else str(product_id)
    if not value:
        raise MissingFieldError("productId")
    return value


def _coerce_quantity(quantity: Any) -> int:
    """Return quantity as a positive int.

    Raises:
        InvalidQuantityError: If not a finite, positive whole number.
    """
    if isinstance(quantity, bool):
        raise InvalidQuantityError(quantity)
    try:
        number = float(quantity)
    except (TypeError, ValueError):
        raise InvalidQuantityError(quantity) from None
    if not math.isfinite(number) or number <= 0:
        raise InvalidQuantityError(quantity)
    if not number.is_integer():
        raise InvalidQuantityError(quantity, reason="quantity must be a whole number")
    return int(number)


class CartLedger:
    """Mutable cart owned by a single shop session.

    Invariant: every present key maps to a quantity > 0.
    """

    def __init__(self, catalog: CatalogStore, currency: str = DEFAULT_CURRENCY) -> None:
        self.catalog = catalog
        self.currency = currency
        self._lines: dict[str, int] = {}

    @property
    def lines(self) -> Mapping[str, int]:
        """Read-only view of the current mapping."""
        return MappingProxyType(self._lines)

    def add(self, product_id: Any, quantity: Any = 1) -> CartSnapshot:
        """Add quantity of a product to the cart.

        Args:
            product_id: Catalog product id.
            quantity: Positive whole number, added to any existing quantity.

        Returns:
            Fresh snapshot of the updated cart.

        Raises:
            MissingFieldError: If product_id is empty.
            InvalidQuantityError: If quantity is not a positive whole number.
            ProductNotFoundError: If product_id is not in the catalog.
        """
        pid = _require_product_id(product_id)
        qty = _coerce_quantity(quantity)
        if pid not in self.catalog:
            raise ProductNotFoundError(pid)

        current = self._lines
        updated = {**current, pid: current.get(pid, 0) + qty}
        self._lines = updated

        logger.info("Cart item added", product_id=pid, quantity=qty, line_quantity=updated[pid])
        return self.snapshot(updated)

    def remove(self, product_id: Any) -> CartSnapshot:
        """Delete the whole line for a product, whatever its quantity.

        Removing a product that is not in the cart leaves the cart as is.

        Raises:
            MissingFieldError: If product_id is empty.
        """
        pid = _require_product_id(product_id)
        updated = {key: qty for key, qty in self._lines.items() if key != pid}
        self._lines = updated

        logger.info("Cart item removed", product_id=pid)
        return self.snapshot(updated)

    def clear(self) -> None:
        """Empty the cart. Only checkout protocols call this."""
        self._lines = {}
        logger.info("Cart cleared")

    def snapshot(self, ledger: Mapping[str, int] | None = None) -> CartSnapshot:
        """Compute lines and totals.

        Lines whose product no longer resolves, or whose quantity is not
        positive, are skipped rather than treated as errors.

        Args:
            ledger: Mapping to compute from; defaults to the current cart.
        """
        source = self._lines if ledger is None else ledger
        lines: list[CartLine] = []
        total = Money.zero(self.currency)

        for product_id, quantity in source.items():
            product = self.catalog.get(product_id)
            if product is None or quantity <= 0:
                continue
            unit_price = product.unit_price(self.currency)
            line_total = unit_price * quantity
            total = total + line_total
            lines.append(
                CartLine(
                    product_id=product.id,
                    name=product.name,
                    category=product.category.value,
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=line_total,
                )
            )

        return CartSnapshot(
            items=tuple(lines),
            item_count=sum(line.quantity for line in lines),
            total=total,
        )
