"""Semantic search domain - ranking, prompt context and error taxonomy"""

from .errors import (
    SearchError,
    EmbeddingsDisabledError,
    InvalidLimitError,
    InvalidPriceRangeError,
    InvalidQueryError,
    InvalidBatchSizeError,
    RerankFailedError,
    BackfillAlreadyRunningError,
    OperationCancelledError,
)
from .models import (
    CatalogProduct,
    PriceRange,
    ProductFilters,
    ScoredCandidate,
    RerankRequest,
    SearchMode,
    RAGSearchResult,
    BackfillReport,
)
from .ports import ProductRepositoryPort, CandidateSourcePort
from .vector_math import cosine_similarity, vector_norm
from .ranker import SimilarityRanker, validate_limit
from .context_builder import summarize_products
from .rerank import build_rerank_messages, parse_ranked_ids

__all__ = [
    "SearchError",
    "EmbeddingsDisabledError",
    "InvalidLimitError",
    "InvalidPriceRangeError",
    "InvalidQueryError",
    "InvalidBatchSizeError",
    "RerankFailedError",
    "BackfillAlreadyRunningError",
    "OperationCancelledError",
    "CatalogProduct",
    "PriceRange",
    "ProductFilters",
    "ScoredCandidate",
    "RerankRequest",
    "SearchMode",
    "RAGSearchResult",
    "BackfillReport",
    "ProductRepositoryPort",
    "CandidateSourcePort",
    "cosine_similarity",
    "vector_norm",
    "SimilarityRanker",
    "validate_limit",
    "summarize_products",
    "build_rerank_messages",
    "parse_ranked_ids",
]
