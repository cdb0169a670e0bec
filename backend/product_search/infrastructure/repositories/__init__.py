"""Repository adapters for the product store"""

from .product_repository import SQLAlchemyProductRepository

__all__ = ["SQLAlchemyProductRepository"]
