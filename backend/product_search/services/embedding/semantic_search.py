"""Semantic Search Service - embed the query, scan candidates, rank by cosine.

Flow:
    query -> EmbeddingProviderPort -> CandidateSourcePort -> SimilarityRanker
"""

import logging
import time
from typing import Optional

from ...domain.ai.ports import EmbeddingProviderPort
from ...domain.search.errors import EmbeddingsDisabledError, InvalidQueryError
from ...domain.search.models import CatalogProduct, PriceRange, ProductFilters
from ...domain.search.ports import CandidateSourcePort
from ...domain.search.ranker import SimilarityRanker, validate_limit
from ...observability.metrics import search_requests_total
from .text_generator import generate_query_embedding_text

logger = logging.getLogger(__name__)


class SemanticSearchService:
    """Vector-only product search.

    Stateless between calls: one instance can serve concurrent requests.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProviderPort,
        candidate_source: CandidateSourcePort,
        ranker: Optional[SimilarityRanker] = None,
        candidate_pool_limit: Optional[int] = None,
    ):
        self.embedding_provider = embedding_provider
        self.candidate_source = candidate_source
        self.ranker = ranker or SimilarityRanker()
        self.candidate_pool_limit = candidate_pool_limit

    @property
    def enabled(self) -> bool:
        return self.embedding_provider.capability.enabled

    def embed_query(self, query: str) -> list[float]:
        """Embed query text.

        Raises:
            EmbeddingsDisabledError: Provider not configured
            InvalidQueryError: Query is blank
            EmbeddingError: Provider fault (propagated unchanged)
        """
        if not self.enabled:
            raise EmbeddingsDisabledError()

        text = generate_query_embedding_text(query)
        if not text:
            raise InvalidQueryError("query must not be empty")

        return self.embedding_provider.embed_text(text).embedding

    def search(
        self,
        query: str,
        limit: int,
        category: Optional[str] = None,
        price_range: Optional[PriceRange] = None,
        in_stock: bool = False,
    ) -> list[CatalogProduct]:
        """Rank catalog products by similarity to ``query``.

        Args:
            query: Free-text query
            limit: Maximum number of results (> 0)
            category: Optional category filter
            price_range: Optional price bounds on ``price_numeric``
            in_stock: Only products that are not out of stock

        Returns:
            Up to ``limit`` products, best match first

        Raises:
            EmbeddingsDisabledError: Provider not configured (checked first)
            InvalidQueryError / InvalidLimitError: Bad caller input, no provider call made
            EmbeddingError: Provider fault
        """
        start = time.perf_counter()

        if not self.enabled:
            search_requests_total.labels(mode="semantic", status="disabled").inc()
            raise EmbeddingsDisabledError()

        try:
            validate_limit(limit)
            if not generate_query_embedding_text(query):
                raise InvalidQueryError("query must not be empty")
        except ValueError:
            search_requests_total.labels(mode="semantic", status="invalid").inc()
            raise

        try:
            results, candidates = self._rank_pool(query, limit, category, price_range, in_stock)
        except Exception:
            search_requests_total.labels(mode="semantic", status="error").inc()
            raise

        search_requests_total.labels(mode="semantic", status="success").inc()
        logger.info(
            "Semantic search completed",
            extra={
                "search_mode": "semantic",
                "limit": limit,
                "candidates": candidates,
                "results": len(results),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return results

    def retrieve(
        self,
        query: str,
        limit: int,
        category: Optional[str] = None,
        price_range: Optional[PriceRange] = None,
        in_stock: bool = False,
    ) -> list[CatalogProduct]:
        """Same ranking as ``search`` without request metrics or logging.

        Used by callers that report the request under their own mode.
        """
        validate_limit(limit)
        return self._rank_pool(query, limit, category, price_range, in_stock)[0]

    def _rank_pool(
        self,
        query: str,
        limit: int,
        category: Optional[str],
        price_range: Optional[PriceRange],
        in_stock: bool,
    ) -> tuple[list[CatalogProduct], int]:
        filters = ProductFilters(
            category=category or None,
            price_range=price_range,
            in_stock=in_stock,
        )
        query_vector = self.embed_query(query)
        candidates = self.candidate_source.fetch_candidates(
            filters, limit=self.candidate_pool_limit
        )
        return self.ranker.rank(query_vector, candidates, limit), len(candidates)
