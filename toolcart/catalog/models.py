"""Catalog models.

Products are immutable and seeded once at startup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from toolcart.domain.value_objects import DEFAULT_CURRENCY, Money


class Category(str, Enum):
    """Fixed product categories."""

    OFFICE = "office"
    ELECTRONICS = "electronics"
    HOME = "home"


@dataclass(frozen=True)
class Product:
    """A product available for purchase.

    Attributes:
        id: Unique product identifier (e.g. "p1").
        name: Display name.
        category: One of the fixed categories.
        price_minor: Unit price in minor currency units.
        description: Short description, searched alongside the name.
    """

    id: str
    name: str
    category: Category
    price_minor: int
    description: str

    def unit_price(self, currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(amount_minor=self.price_minor, currency=currency)

    def to_dict(self, currency: str = DEFAULT_CURRENCY) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "price": self.unit_price(currency).format(),
            "priceMinor": self.price_minor,
            "description": self.description,
        }


DEFAULT_PRODUCTS: tuple[Product, ...] = (
    Product("p1", "Ceramic Mug", Category.HOME, 899, "Dishwasher safe mug"),
    Product("p2", "USB-C Cable 1m", Category.ELECTRONICS, 599, "USB-C to USB-C"),
    Product("p3", "Notebook A5", Category.OFFICE, 349, "Ruled paper notebook"),
    Product("p4", "Desk Lamp", Category.OFFICE, 1899, "LED lamp with dimmer"),
    Product("p5", "Wireless Mouse", Category.ELECTRONICS, 1499, "2.4GHz mouse"),
    Product("p6", "Coffee Grinder", Category.HOME, 2999, "Burr grinder"),
)
