"""Search ports and interfaces for hexagonal architecture.

The product store is an external collaborator: this subsystem only reads
products and attaches embedding vectors to them.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .models import CatalogProduct, ProductFilters


class ProductRepositoryPort(ABC):
    """Port interface for the product store.

    Implementations:
    - SQLAlchemyProductRepository: relational store (PostgreSQL, SQLite in tests)
    """

    @abstractmethod
    def list_products(
        self,
        filters: Optional[ProductFilters],
        page: int,
        page_size: int,
    ) -> tuple[list[CatalogProduct], int]:
        """List one page of products in stable order.

        Args:
            filters: Optional filters (None lists everything)
            page: 1-based page number
            page_size: Products per page

        Returns:
            Tuple of (products on the page, total matching products)
        """
        pass

    @abstractmethod
    def get_product_by_pid(self, pid: str) -> Optional[CatalogProduct]:
        """Fetch a product by external identifier, None if unknown."""
        pass

    @abstractmethod
    def update_embedding(self, product_id: int, embedding: list[float]) -> None:
        """Attach an embedding to a single product (atomic field update)."""
        pass

    @abstractmethod
    def batch_update_embeddings(self, embeddings: dict[int, list[float]]) -> int:
        """Attach embeddings to many products in one write.

        Returns:
            Number of products updated
        """
        pass

    @abstractmethod
    def products_without_embeddings(self, limit: int) -> list[CatalogProduct]:
        """Products that have no embedding yet (at most ``limit``)."""
        pass

    @abstractmethod
    def products_with_embeddings(
        self,
        filters: Optional[ProductFilters],
        limit: int,
    ) -> list[CatalogProduct]:
        """Products carrying a non-empty embedding, filters applied in the store."""
        pass


class CandidateSourcePort(ABC):
    """Supplies the pool of products to score for a query.

    The default implementation is an exhaustive scan capped at a fixed pool
    size; an approximate-nearest-neighbour index can be swapped in here
    without touching the ranker or the orchestrators.
    """

    @abstractmethod
    def fetch_candidates(
        self,
        filters: Optional[ProductFilters] = None,
        limit: Optional[int] = None,
    ) -> list[CatalogProduct]:
        """Return embedded products matching ``filters``.

        Args:
            filters: Category/price/stock filters to push down
            limit: Hard cap on pool size (implementation default when None)
        """
        pass
