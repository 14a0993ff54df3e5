"""Service layer for category operations.

Each function performs one unit of work against the session it is given and
raises a domain exception for outcomes the caller must translate (invalid
payload, unknown id, duplicate name). Name uniqueness is enforced by the
``uq_categories_name`` constraint; the lookup done beforehand only avoids
storing an image that would be thrown away.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from storefront.models.category import Category
from storefront.schemas.category import CategoryBase, CategoryCreate, CategoryUpdate
from storefront.schemas.messages import first_validation_message
from storefront.services.images import ImageUpload, LocalImageStore

logger = logging.getLogger(__name__)

CATEGORY_IMAGE_FOLDER = "categories"

PayloadT = TypeVar("PayloadT", bound=CategoryBase)


class CategoryValidationError(Exception):
    """Raised when a category payload fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CategoryNotFoundError(Exception):
    """Raised when attempting to access a category that doesn't exist."""

    def __init__(self, category_id: int) -> None:
        super().__init__(f"Category with id '{category_id}' not found")
        self.category_id = category_id


class DuplicateCategoryError(Exception):
    """Raised when a category name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"A category named '{name}' already exists")
        self.name = name


def _is_duplicate_name_violation(exc: IntegrityError) -> bool:
    """Check whether the IntegrityError comes from the category name constraint."""
    error_str = str(exc.orig) if exc.orig else str(exc)
    # PostgreSQL reports the constraint name, SQLite the column.
    return "uq_categories_name" in error_str or (
        "UNIQUE constraint failed" in error_str and "categories.name" in error_str
    )


def validate_category(
    payload: Mapping[str, Any],
    schema: Type[PayloadT] = CategoryCreate,  # type: ignore[assignment]
) -> PayloadT:
    """Validate a raw category payload.

    ``None`` values count as absent so an omitted form field reports the
    field as required.
    """
    data = {key: value for key, value in payload.items() if value is not None}
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise CategoryValidationError(first_validation_message(exc.errors())) from exc


def get_category_by_name(db: Session, name: str) -> Optional[Category]:
    """Fetch a category by exact (case-sensitive) name."""
    statement = select(Category).where(Category.name == name)
    return db.execute(statement).scalar_one_or_none()


def get_category(db: Session, category_id: int) -> Optional[Category]:
    """Fetch a category by id together with its products."""
    statement = (
        select(Category)
        .options(selectinload(Category.products))
        .where(Category.id == category_id)
    )
    return db.execute(statement).scalar_one_or_none()


def list_categories(
    db: Session,
    *,
    offset: int = 0,
    limit: Optional[int] = None,
) -> Tuple[List[Category], int]:
    """Return a slice of categories with their types and the total count."""
    total = db.execute(select(func.count()).select_from(Category)).scalar_one()

    statement = (
        select(Category)
        .options(selectinload(Category.types))
        .order_by(Category.id)
        .offset(offset)
    )
    if limit is not None:
        statement = statement.limit(limit)
    rows = list(db.execute(statement).scalars().all())
    return rows, total


def _commit_or_discard(
    db: Session,
    image_store: LocalImageStore,
    new_image: Optional[str],
    name: str,
) -> None:
    """Commit; on failure roll back and drop the image stored for this change."""
    try:
        db.commit()
    except Exception as exc:
        db.rollback()
        image_store.delete(new_image)
        if isinstance(exc, IntegrityError) and _is_duplicate_name_violation(exc):
            raise DuplicateCategoryError(name) from exc
        raise


def create_category(
    db: Session,
    category_in: CategoryCreate,
    image_store: LocalImageStore,
    image: Optional[ImageUpload] = None,
) -> Category:
    """Create a category, storing ``image`` first when one is given."""
    if get_category_by_name(db, category_in.name) is not None:
        raise DuplicateCategoryError(category_in.name)

    image_url = None
    if image is not None:
        image_url = image_store.save(image, folder=CATEGORY_IMAGE_FOLDER)

    category = Category(name=category_in.name, image=image_url)
    db.add(category)
    _commit_or_discard(db, image_store, image_url, category_in.name)

    db.refresh(category)
    logger.info("Created category %s (%s)", category.id, category.name)
    return category


def update_category(
    db: Session,
    category_id: int,
    category_in: CategoryUpdate,
    image_store: LocalImageStore,
    image: Optional[ImageUpload] = None,
) -> Category:
    """Rename a category and, when ``image`` is given, replace its image.

    Without an image the stored reference is left untouched. A replaced image
    file is removed once the change is committed.
    """
    category = db.get(Category, category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)

    holder = get_category_by_name(db, category_in.name)
    if holder is not None and holder.id != category.id:
        raise DuplicateCategoryError(category_in.name)

    new_image = None
    if image is not None:
        new_image = image_store.save(image, folder=CATEGORY_IMAGE_FOLDER)

    previous_image = category.image
    category.name = category_in.name
    if new_image is not None:
        category.image = new_image
    _commit_or_discard(db, image_store, new_image, category_in.name)

    db.refresh(category)
    if new_image is not None and previous_image and previous_image != new_image:
        image_store.delete(previous_image)
    logger.info("Updated category %s", category.id)
    return category


def delete_category(
    db: Session,
    category_id: int,
    image_store: Optional[LocalImageStore] = None,
) -> None:
    """Permanently delete a category; its types and products are detached."""
    category = db.get(Category, category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)

    image_url = category.image
    db.delete(category)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    if image_store is not None:
        image_store.delete(image_url)
    logger.info("Deleted category %s", category_id)


__all__ = [
    "CATEGORY_IMAGE_FOLDER",
    "CategoryNotFoundError",
    "CategoryValidationError",
    "DuplicateCategoryError",
    "create_category",
    "delete_category",
    "get_category",
    "get_category_by_name",
    "list_categories",
    "update_category",
    "validate_category",
]
