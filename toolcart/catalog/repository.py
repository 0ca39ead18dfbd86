"""Product catalog store.

Read-only, in-memory product list with lookup by id.
"""

from collections.abc import Iterable, Iterator

from toolcart.catalog.models import DEFAULT_PRODUCTS, Product


class CatalogStore:
    """Immutable product list.

    Iteration yields products in catalog order.

    Example usage:
        catalog = CatalogStore()
        mug = catalog.get("p1")
    """

    def __init__(self, products: Iterable[Product] = DEFAULT_PRODUCTS) -> None:
        """Initialize the store.

        Args:
            products: Products in catalog order. Ids must be unique.

        Raises:
            ValueError: If two products share an id.
        """
        self._products: tuple[Product, ...] = tuple(products)
        self._by_id: dict[str, Product] = {}
        for product in self._products:
            if product.id in self._by_id:
                raise ValueError(f"Duplicate product id: {product.id}")
            self._by_id[product.id] = product

    def get(self, product_id: str) -> Product | None:
        """Get product by id, or None if unknown."""
        return self._by_id.get(product_id)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products
