"""Product repository for database operations"""

import logging
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ...domain.search.models import CatalogProduct, ProductFilters
from ...domain.search.ports import ProductRepositoryPort
from ...models.product import Product

logger = logging.getLogger(__name__)


class SQLAlchemyProductRepository(ProductRepositoryPort):
    """Repository for product reads and embedding writes.

    Rows are converted to ``CatalogProduct`` at this boundary so that no
    SQLAlchemy object ever reaches the ranker or the orchestrators.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def list_products(
        self,
        filters: Optional[ProductFilters],
        page: int,
        page_size: int,
    ) -> tuple[list[CatalogProduct], int]:
        """List one page of products ordered by primary key.

        Args:
            filters: Optional filters
            page: 1-based page number
            page_size: Products per page

        Returns:
            Tuple of (products on the page, total matching products)
        """
        page = max(1, page)
        query = self._apply_filters(select(Product), filters)
        count_query = self._apply_filters(select(func.count(Product.id)), filters)

        total = self.db.execute(count_query).scalar_one()
        rows = self.db.execute(
            query.order_by(Product.id).offset((page - 1) * page_size).limit(page_size)
        ).scalars().all()

        return [self._to_domain(row) for row in rows], total

    def get_product_by_pid(self, pid: str) -> Optional[CatalogProduct]:
        row = self.db.execute(
            select(Product).where(Product.pid == pid)
        ).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    def update_embedding(self, product_id: int, embedding: list[float]) -> None:
        """Attach an embedding to one product.

        Only the embedding column is written, so concurrent catalog edits to
        other fields are never clobbered.
        """
        self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(embedding=list(embedding))
        )
        self.db.commit()

    def batch_update_embeddings(self, embeddings: dict[int, list[float]]) -> int:
        """Attach embeddings to many products in one round trip.

        Args:
            embeddings: Mapping of product id to vector

        Returns:
            Number of products updated
        """
        if not embeddings:
            return 0

        params = [
            {"id": product_id, "embedding": list(vector)}
            for product_id, vector in embeddings.items()
        ]
        try:
            # ORM bulk UPDATE by primary key
            self.db.execute(update(Product), params)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.debug("Batch-updated %d product embeddings", len(params))
        return len(params)

    def products_without_embeddings(self, limit: int) -> list[CatalogProduct]:
        rows = self.db.execute(
            select(Product)
            .where(Product.embedding.is_(None))
            .order_by(Product.id)
            .limit(limit)
        ).scalars().all()
        return [self._to_domain(row) for row in rows]

    def products_with_embeddings(
        self,
        filters: Optional[ProductFilters],
        limit: int,
    ) -> list[CatalogProduct]:
        """Products carrying an embedding, filters pushed into SQL.

        Args:
            filters: Category/price/stock filters
            limit: Maximum rows read

        Returns:
            List of CatalogProduct in primary-key order
        """
        query = self._apply_filters(
            select(Product).where(Product.embedding.isnot(None)),
            filters,
        )
        rows = self.db.execute(query.order_by(Product.id).limit(limit)).scalars().all()

        # An empty JSON array is not NULL but is not an embedding either
        return [self._to_domain(row) for row in rows if row.embedding]

    @staticmethod
    def _apply_filters(query, filters: Optional[ProductFilters]):
        if filters is None:
            return query

        if filters.category:
            query = query.where(Product.category == filters.category)
        if filters.sub_category:
            query = query.where(Product.sub_category == filters.sub_category)
        if filters.brand:
            query = query.where(Product.brand == filters.brand)
        if filters.in_stock:
            query = query.where(Product.out_of_stock.is_(False))

        price_range = filters.price_range
        if price_range is not None:
            if price_range.min_price > 0:
                query = query.where(Product.price_numeric >= price_range.min_price)
            if price_range.max_price > 0:
                query = query.where(Product.price_numeric <= price_range.max_price)

        return query

    @staticmethod
    def _to_domain(row: Product) -> CatalogProduct:
        return CatalogProduct(
            id=row.id,
            pid=row.pid,
            title=row.title,
            brand=row.brand or "",
            description=row.description,
            category=row.category or "",
            sub_category=row.sub_category or "",
            actual_price=row.actual_price,
            selling_price=row.selling_price,
            average_rating=row.average_rating,
            seller=row.seller,
            out_of_stock=bool(row.out_of_stock),
            product_details=list(row.product_details or []),
            price_numeric=row.price_numeric or 0,
            rating_numeric=row.rating_numeric or 0.0,
            embedding=list(row.embedding) if row.embedding else None,
        )
