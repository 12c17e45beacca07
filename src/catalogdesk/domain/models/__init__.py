from .core import UNSET, Category, ImageRef, Product, ProductPayload
from .query import ALL, ActiveFilter, QueryState, SortField, SortOrder

__all__ = [
    "ALL",
    "ActiveFilter",
    "Category",
    "ImageRef",
    "Product",
    "ProductPayload",
    "QueryState",
    "SortField",
    "SortOrder",
    "UNSET",
]
