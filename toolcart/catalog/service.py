"""Catalog search.

Filters the catalog by free text and category, and remembers the ids of
the most recent result so helpers can act on the "first visible result".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from toolcart.catalog.models import Product
from toolcart.catalog.repository import CatalogStore
from toolcart.domain.value_objects import DEFAULT_CURRENCY

logger = structlog.get_logger()


@dataclass(frozen=True)
class SearchResult:
    """Products matching a search, in catalog order."""

    products: tuple[Product, ...]
    currency: str = DEFAULT_CURRENCY

    @property
    def count(self) -> int:
        return len(self.products)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "products": [p.to_dict(self.currency) for p in self.products],
        }


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()


class SearchEngine:
    """Case-insensitive substring search over a CatalogStore.

    An empty query or category acts as a wildcard for that dimension.
    Searching never fails; any input is coerced to a string.
    """

    def __init__(self, catalog: CatalogStore, currency: str = DEFAULT_CURRENCY) -> None:
        self.catalog = catalog
        self.currency = currency
        self._last_results: tuple[str, ...] = tuple(p.id for p in catalog)

    def search(self, query: Any = "", category: Any = "") -> SearchResult:
        """Filter the catalog.

        Args:
            query: Text matched against product name and description.
            category: Category value; must equal the product's category.

        Returns:
            Matching products in catalog order.
        """
        q = _normalize(query)
        cat = _normalize(category)

        matches = tuple(
            product
            for product in self.catalog
            if (not q or q in product.name.lower() or q in product.description.lower())
            and (not cat or product.category.value == cat)
        )

        self._last_results = tuple(p.id for p in matches)
        logger.debug("Catalog searched", query=q, category=cat, count=len(matches))
        return SearchResult(products=matches, currency=self.currency)

    @property
    def last_results(self) -> tuple[str, ...]:
        """Ids of the most recent search result, in order."""
        return self._last_results

    def first_result(self) -> str | None:
        """Id of the first product of the most recent search, if any."""
        return self._last_results[0] if self._last_results else None
