"""ProductType ORM model definition."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import Base

if TYPE_CHECKING:  # pragma: no cover - used only for type checking
    from storefront.models.category import Category
    from storefront.models.product import Product


class ProductType(Base):
    """A product type (e.g. "Sneakers") listed under a category."""

    __tablename__ = "types"
    __table_args__ = (Index("ix_types_category_id", "category_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
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

    category: Mapped[Optional["Category"]] = relationship("Category", back_populates="types")
    products: Mapped[List["Product"]] = relationship(
        "Product",
        back_populates="type",
    )


__all__ = ["ProductType"]
