"""ORM model exports."""

from .category import Category
from .product import Product
from .product_type import ProductType

__all__ = [
	"Category",
	"Product",
	"ProductType",
]
