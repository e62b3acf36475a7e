"""Product catalog storage used to execute search predicates."""

from catalog_search.catalog.models import CatalogBase, Category, Product, ProductStatus
from catalog_search.catalog.session import get_engine, get_session

__all__ = [
    "CatalogBase",
    "Category",
    "Product",
    "ProductStatus",
    "get_engine",
    "get_session",
]
