"""SQLAlchemy declarative base for ORM models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Import model modules so SQLAlchemy registers the mappers during startup.
from storefront.models import (  # noqa: E402,F401
    category,
    product,
    product_type,
)


__all__ = ["Base"]
