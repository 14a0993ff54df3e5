"""Providers for the collaborators injected into route handlers."""

from functools import lru_cache

from storefront.core.config import settings
from storefront.core.observability import ErrorReporter
from storefront.services.images import LocalImageStore


@lru_cache
def get_image_store() -> LocalImageStore:
    """Image store rooted at ``UPLOAD_DIR``."""
    return LocalImageStore(
        settings.upload_dir,
        url_prefix=settings.upload_url_prefix,
        max_size=settings.max_image_size_bytes,
    )


@lru_cache
def get_error_reporter() -> ErrorReporter:
    return ErrorReporter()
