"""Category API routes.

Every handler answers with exactly one of: 200 with an ``{"error": false, ...}``
envelope, 400 with the bare validation message or the duplicate-name body,
404 with the not-found body, or a generic 500 whose cause goes to the
injected error reporter.
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_db, get_error_reporter, get_image_store
from storefront.api.errors import error_message, internal_error, validation_failed
from storefront.core.observability import ErrorReporter
from storefront.schemas.category import (
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
from storefront.services.categories import (
    CategoryNotFoundError,
    CategoryValidationError,
    DuplicateCategoryError,
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
    validate_category,
)
from storefront.services.images import ImageValidationError, LocalImageStore

router = APIRouter(prefix="/categories", tags=["categories"])

CATEGORY_EXISTS = "Category already exist"
CATEGORY_NOT_FOUND = "Category not found"
CATEGORY_DELETED = "Category deleted successfully"

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"description": "Invalid payload or duplicate name"},
    status.HTTP_404_NOT_FOUND: {"model": MessageEnvelope},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Internal server error"},
}

DbSession = Annotated[Session, Depends(get_db)]
ImageStore = Annotated[LocalImageStore, Depends(get_image_store)]
Reporter = Annotated[ErrorReporter, Depends(get_error_reporter)]


def _uploaded(image: Optional[UploadFile]) -> Optional[UploadFile]:
    """Browsers send an unnamed empty part for an untouched file input."""
    if image is None or not image.filename:
        return None
    return image


@router.post("", response_model=CategoryEnvelope, responses=_ERROR_RESPONSES)
def create_category_endpoint(
    db: DbSession,
    image_store: ImageStore,
    reporter: Reporter,
    name: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    """Create a category from a multipart form with ``name`` and an optional ``image``."""
    try:
        category_in = validate_category({"name": name})
        category = create_category(db, category_in, image_store, image=_uploaded(image))
    except (CategoryValidationError, ImageValidationError) as exc:
        return validation_failed(exc.message)
    except DuplicateCategoryError:
        return error_message(status.HTTP_400_BAD_REQUEST, CATEGORY_EXISTS)
    except Exception as exc:
        reporter.report("create_category", exc, name=name)
        return internal_error()

    return CategoryEnvelope(category=CategoryResponse.model_validate(category))


@router.get("", response_model=CategoryListEnvelope, responses=_ERROR_RESPONSES)
def list_categories_endpoint(
    db: DbSession,
    reporter: Reporter,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=100),
):
    """List categories with their types; ``count`` is the total, not the page size."""
    try:
        rows, total = list_categories(db, offset=offset, limit=limit)
        page = CategoryPage(
            count=total,
            rows=[CategoryWithTypesResponse.model_validate(row) for row in rows],
        )
    except Exception as exc:
        reporter.report("list_categories", exc, offset=offset, limit=limit)
        return internal_error()

    return CategoryListEnvelope(categories=page)


@router.get("/{category_id}", response_model=CategoryDetailEnvelope, responses=_ERROR_RESPONSES)
def get_category_endpoint(category_id: int, db: DbSession, reporter: Reporter):
    """Fetch one category with its products."""
    try:
        category = get_category(db, category_id)
        if category is None:
            return error_message(status.HTTP_404_NOT_FOUND, CATEGORY_NOT_FOUND)
        detail = CategoryWithProductsResponse.model_validate(category)
    except Exception as exc:
        reporter.report("get_category", exc, category_id=category_id)
        return internal_error()

    return CategoryDetailEnvelope(category=detail)


@router.put("/{category_id}", response_model=CategoryUpdatedEnvelope, responses=_ERROR_RESPONSES)
def update_category_endpoint(
    category_id: int,
    db: DbSession,
    image_store: ImageStore,
    reporter: Reporter,
    name: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    """Rename a category; the image is replaced only when a file is sent."""
    try:
        category_in = validate_category({"name": name}, CategoryUpdate)
        category = update_category(
            db, category_id, category_in, image_store, image=_uploaded(image)
        )
    except (CategoryValidationError, ImageValidationError) as exc:
        return validation_failed(exc.message)
    except CategoryNotFoundError:
        return error_message(status.HTTP_404_NOT_FOUND, CATEGORY_NOT_FOUND)
    except DuplicateCategoryError:
        return error_message(status.HTTP_400_BAD_REQUEST, CATEGORY_EXISTS)
    except Exception as exc:
        reporter.report("update_category", exc, category_id=category_id, name=name)
        return internal_error()

    return CategoryUpdatedEnvelope(updated_category=CategoryResponse.model_validate(category))


@router.delete("/{category_id}", response_model=MessageEnvelope, responses=_ERROR_RESPONSES)
def delete_category_endpoint(
    category_id: int,
    db: DbSession,
    image_store: ImageStore,
    reporter: Reporter,
):
    """Permanently delete a category."""
    try:
        delete_category(db, category_id, image_store)
    except CategoryNotFoundError:
        return error_message(status.HTTP_404_NOT_FOUND, CATEGORY_NOT_FOUND)
    except Exception as exc:
        reporter.report("delete_category", exc, category_id=category_id)
        return internal_error()

    return MessageEnvelope(error=False, msg=CATEGORY_DELETED)
