"""Pydantic schemas package."""

from .category import (
    CategoryCreate,
    CategoryDetailEnvelope,
    CategoryEnvelope,
    CategoryListEnvelope,
    CategoryPage,
    CategoryResponse,
    CategoryUpdate,
    CategoryUpdatedEnvelope,
    CategoryWithProductsResponse,
    CategoryWithTypesResponse,
    MessageEnvelope,
)
from .product import ProductResponse, ProductTypeResponse

__all__ = [
    "CategoryCreate",
    "CategoryDetailEnvelope",
    "CategoryEnvelope",
    "CategoryListEnvelope",
    "CategoryPage",
    "CategoryResponse",
    "CategoryUpdate",
    "CategoryUpdatedEnvelope",
    "CategoryWithProductsResponse",
    "CategoryWithTypesResponse",
    "MessageEnvelope",
    "ProductResponse",
    "ProductTypeResponse",
]
