"""Pydantic schemas for categories and their response envelopes."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.product import ProductResponse, ProductTypeResponse

CATEGORY_NAME_MAX_LENGTH = 255


class CategoryBase(BaseModel):
    """Fields shared by category payloads."""

    name: str = Field(..., min_length=1, max_length=CATEGORY_NAME_MAX_LENGTH)


class CategoryCreate(CategoryBase):
    """Validated payload for creating a category."""

    model_config = ConfigDict(extra="ignore")


class CategoryUpdate(CategoryBase):
    """Validated payload for updating a category.

    The image is not part of the payload: it is replaced only when a file
    accompanies the request.
    """

    model_config = ConfigDict(extra="ignore")


class CategoryResponse(BaseModel):
    """A category as returned to API clients."""

    id: int
    name: str
    image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryWithTypesResponse(CategoryResponse):
    """Category row in a listing, joined with its types."""

    types: List[ProductTypeResponse] = Field(default_factory=list)


class CategoryWithProductsResponse(CategoryResponse):
    """Single category joined with its products."""

    products: List[ProductResponse] = Field(default_factory=list)


class CategoryPage(BaseModel):
    """Total number of categories plus the requested slice of rows."""

    count: int
    rows: List[CategoryWithTypesResponse]


class CategoryEnvelope(BaseModel):
    error: bool = False
    category: CategoryResponse


class CategoryDetailEnvelope(BaseModel):
    error: bool = False
    category: CategoryWithProductsResponse


class CategoryListEnvelope(BaseModel):
    error: bool = False
    categories: CategoryPage


class CategoryUpdatedEnvelope(BaseModel):
    error: bool = False
    updated_category: CategoryResponse = Field(..., alias="updatedCategory")

    model_config = ConfigDict(populate_by_name=True)


class MessageEnvelope(BaseModel):
    """Body of error responses and of responses carrying only a message."""

    error: bool
    msg: str


__all__ = [
    "CATEGORY_NAME_MAX_LENGTH",
    "CategoryBase",
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
]
