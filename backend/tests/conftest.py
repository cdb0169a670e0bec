"""Pytest fixtures for semantic search testing.

Provides reusable test fixtures for:
- SQLite in-memory database session (StaticPool, shared across threads)
- Stub embedding providers (see tests/stubs.py)
- Catalog product factory

Usage:
    def test_search(make_product, stub_embeddings):
        ...
"""

import os

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("EMBEDDINGS_ENABLED", "true")

from typing import Callable, Generator, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from product_search.domain.ai.ports import EmbeddingCapability
from product_search.domain.search.models import CatalogProduct
from product_search.models.base import Base

from tests.stubs import StubEmbeddingProvider


@pytest.fixture
def make_product() -> Callable[..., CatalogProduct]:
    """Factory for CatalogProduct with sensible defaults."""

    def _make(id: int, embedding: Optional[list[float]] = None, **overrides) -> CatalogProduct:
        fields = {
            "pid": f"PID{id:04d}",
            "title": f"Product {id}",
            "brand": "Acme",
            "category": "Clothing",
            "sub_category": "Tops",
            "actual_price": "1,999",
            "selling_price": "999",
            "average_rating": "4.1",
            "seller": "Acme Retail",
            "price_numeric": 999,
            "rating_numeric": 4.1,
        }
        fields.update(overrides)
        return CatalogProduct(id=id, embedding=embedding, **fields)

    return _make


@pytest.fixture
def stub_embeddings() -> StubEmbeddingProvider:
    return StubEmbeddingProvider()


@pytest.fixture
def disabled_embeddings() -> StubEmbeddingProvider:
    return StubEmbeddingProvider(capability=EmbeddingCapability.disabled())


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh SQLite in-memory database per test.

    StaticPool keeps the single in-memory connection alive so that every
    session (including TestClient threads) sees the same tables.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
