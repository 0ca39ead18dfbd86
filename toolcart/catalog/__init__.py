"""Product catalog: immutable store and search."""

from toolcart.catalog.models import DEFAULT_PRODUCTS, Category, Product
from toolcart.catalog.repository import CatalogStore
from toolcart.catalog.service import SearchEngine, SearchResult

__all__ = [
    "DEFAULT_PRODUCTS",
    "CatalogStore",
    "Category",
    "Product",
    "SearchEngine",
    "SearchResult",
]
