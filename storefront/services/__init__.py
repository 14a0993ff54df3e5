"""Service layer helpers for domain operations."""

from .categories import (
    CategoryNotFoundError,
    CategoryValidationError,
    DuplicateCategoryError,
    create_category,
    delete_category,
    get_category,
    get_category_by_name,
    list_categories,
    update_category,
    validate_category,
)
from .images import ImageValidationError, LocalImageStore, StorageError

__all__ = [
    "CategoryNotFoundError",
    "CategoryValidationError",
    "DuplicateCategoryError",
    "ImageValidationError",
    "LocalImageStore",
    "StorageError",
    "create_category",
    "delete_category",
    "get_category",
    "get_category_by_name",
    "list_categories",
    "update_category",
    "validate_category",
]
