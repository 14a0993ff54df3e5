"""API dependency exports."""

from storefront.db.session import get_db

from .collaborators import get_error_reporter, get_image_store

__all__ = [
    "get_db",
    "get_error_reporter",
    "get_image_store",
]
