"""Category ORM model definition."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import Base

if TYPE_CHECKING:  # pragma: no cover - used only for type checking
    from storefront.models.product import Product
    from storefront.models.product_type import ProductType


class Category(Base):
    """A named grouping of products with an optional cover image."""

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("name", name="uq_categories_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Deleting a category detaches its types and products instead of deleting them.
    types: Mapped[List["ProductType"]] = relationship(
        "ProductType",
        back_populates="category",
        order_by="ProductType.id",
    )
    products: Mapped[List["Product"]] = relationship(
        "Product",
        back_populates="category",
        order_by="Product.id",
    )


__all__ = ["Category"]
