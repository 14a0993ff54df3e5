"""Read-only schemas for rows joined onto categories."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProductTypeResponse(BaseModel):
    id: int
    name: str
    category_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None
    category_id: Optional[int] = None
    type_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


__all__ = ["ProductResponse", "ProductTypeResponse"]
