"""SQLAlchemy Models for the product store"""

from .base import Base, PortableJSONB
from .product import Product

__all__ = [
    "Base",
    "PortableJSONB",
    "Product",
]
