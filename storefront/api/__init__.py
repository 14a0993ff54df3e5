"""Public API package exports."""

from storefront.api.routes.categories import router as categories_router

__all__ = ["categories_router"]
