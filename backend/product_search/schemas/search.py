"""Pydantic schemas for semantic search API requests and responses"""

from typing import Optional

from pydantic import BaseModel, Field

from ..domain.search.models import SearchMode


class SemanticSearchRequest(BaseModel):
    """Request schema for POST /search/semantic.

    Limit and price bounds are validated by the search service so that
    invalid values surface as 400 with the domain error message.
    """
    query: str
    limit: int = 10
    category: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    in_stock: bool = False


class RAGSearchRequest(BaseModel):
    """Request schema for POST /search/rag."""
    prompt: str
    limit: int = 10
    category: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None


class ProductResponse(BaseModel):
    """Public product representation (embedding omitted)."""
    id: int
    pid: str
    title: str
    brand: str = ""
    description: Optional[str] = None
    category: str = ""
    sub_category: str = ""
    actual_price: Optional[str] = None
    selling_price: Optional[str] = None
    average_rating: Optional[str] = None
    seller: Optional[str] = None
    out_of_stock: bool = False
    price_numeric: int = 0
    rating_numeric: float = 0.0

    class Config:
        from_attributes = True


class SemanticSearchResponse(BaseModel):
    products: list[ProductResponse]
    total: int


class RAGSearchResponse(BaseModel):
    """Response schema for RAG search.

    ``mode`` tells the client whether the LLM ordering was applied.
    """
    mode: SearchMode
    products: list[ProductResponse]
    total: int
    fallback_reason: Optional[str] = None

    class Config:
        use_enum_values = True


class BackfillRequest(BaseModel):
    """Request schema for POST /search/embeddings/backfill."""
    batch_size: Optional[int] = Field(None, description="Defaults to BACKFILL_BATCH_SIZE")
    missing_only: bool = False
    run_async: bool = False


class BackfillReportResponse(BaseModel):
    pages: int
    scanned: int
    skipped: int
    embedded: int
    failed: int
    write_failures: int
    provider_calls: int


class BackfillResponse(BaseModel):
    """Inline runs return the report; async runs return the Celery task id."""
    status: str
    report: Optional[BackfillReportResponse] = None
    task_id: Optional[str] = None
