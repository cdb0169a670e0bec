"""Semantic search domain models.

These are domain models (not database models). Repository adapters convert
ORM rows into ``CatalogProduct`` before anything is scored.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .errors import InvalidPriceRangeError


@dataclass(eq=False)
class CatalogProduct:
    """Product as seen by the search subsystem.

    Identity is by ``id``; ``pid`` is the external identifier the reranker
    speaks. ``embedding`` is None until the product has been embedded.
    """
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
    product_details: list[dict[str, str]] = field(default_factory=list)
    price_numeric: int = 0
    rating_numeric: float = 0.0
    embedding: Optional[list[float]] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogProduct):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)

    def to_dict(self) -> dict[str, Any]:
        """Public representation (embedding vector omitted)"""
        return {
            "id": self.id,
            "pid": self.pid,
            "title": self.title,
            "brand": self.brand,
            "description": self.description,
            "category": self.category,
            "sub_category": self.sub_category,
            "actual_price": self.actual_price,
            "selling_price": self.selling_price,
            "average_rating": self.average_rating,
            "seller": self.seller,
            "out_of_stock": self.out_of_stock,
            "price_numeric": self.price_numeric,
            "rating_numeric": self.rating_numeric,
        }


@dataclass
class PriceRange:
    """Inclusive price bounds on ``price_numeric``.

    Negative bounds are clamped to 0 and 0 means "unbounded" on that side.
    A minimum above a positive maximum is rejected.
    """
    min_price: int = 0
    max_price: int = 0

    def __post_init__(self):
        self.min_price = max(0, int(self.min_price or 0))
        self.max_price = max(0, int(self.max_price or 0))
        if self.max_price > 0 and self.min_price > self.max_price:
            raise InvalidPriceRangeError(self.min_price, self.max_price)

    @classmethod
    def from_bounds(cls, min_price: Optional[int], max_price: Optional[int]) -> Optional["PriceRange"]:
        """Build a range from optional request bounds, None when both are unset."""
        if min_price is None and max_price is None:
            return None
        return cls(min_price=min_price or 0, max_price=max_price or 0)


@dataclass
class ProductFilters:
    """Filters pushed down to the product repository query."""
    category: Optional[str] = None
    sub_category: Optional[str] = None
    brand: Optional[str] = None
    price_range: Optional[PriceRange] = None
    in_stock: bool = False


@dataclass
class ScoredCandidate:
    """Transient (product, similarity) pair used inside ranking."""
    product: CatalogProduct
    score: float


@dataclass
class RerankRequest:
    """Input for one LLM rerank call. Never persisted."""
    query: str
    context: str
    limit: int


class SearchMode(str, Enum):
    """Terminal states of a RAG search"""
    VECTOR_ONLY = "vector_only"
    RERANKED = "reranked"


@dataclass
class RAGSearchResult:
    """Outcome of a RAG search.

    Attributes:
        products: Final ranked products (at most ``limit``)
        mode: Whether the LLM ordering was applied
        fallback_reason: Why the vector-only ordering was returned, if it was
    """
    products: list[CatalogProduct]
    mode: SearchMode
    fallback_reason: Optional[str] = None


@dataclass
class BackfillReport:
    """Counters for one embedding backfill run."""
    pages: int = 0
    scanned: int = 0
    skipped: int = 0
    embedded: int = 0
    failed: int = 0
    write_failures: int = 0
    provider_calls: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "pages": self.pages,
            "scanned": self.scanned,
            "skipped": self.skipped,
            "embedded": self.embedded,
            "failed": self.failed,
            "write_failures": self.write_failures,
            "provider_calls": self.provider_calls,
        }
