"""RAG Search Service - vector retrieval followed by an LLM rerank pass.

The LLM only reorders what vector search already found. Any provider or parse
fault degrades to the vector-only ordering, never to an error.
"""

import logging
import time
from typing import Optional

from ...domain.ai.ports import ChatCompletionError, ChatCompletionPort
from ...domain.search.context_builder import MAX_CONTEXT_PRODUCTS, summarize_products
from ...domain.search.errors import EmbeddingsDisabledError, RerankFailedError
from ...domain.search.models import (
    CatalogProduct,
    PriceRange,
    RAGSearchResult,
    RerankRequest,
    SearchMode,
)
from ...domain.search.ports import ProductRepositoryPort
from ...domain.search.ranker import validate_limit
from ...domain.search.rerank import build_rerank_messages, parse_ranked_ids
from ...observability.metrics import (
    rerank_fallbacks_total,
    rerank_outcomes_total,
    search_requests_total,
)
from .semantic_search import SemanticSearchService

logger = logging.getLogger(__name__)


class RAGSearchService:
    """Retrieve-then-rerank product search.

    Terminal states:
        VECTOR_ONLY: pool empty, LLM call failed, response unparseable, or
            no returned PID resolved to a product
        RERANKED: products in the order the LLM returned their PIDs
    """

    def __init__(
        self,
        semantic_search: SemanticSearchService,
        chat_provider: ChatCompletionPort,
        repository: ProductRepositoryPort,
        context_size: int = MAX_CONTEXT_PRODUCTS,
        temperature: float = 0.3,
        max_tokens: int = 500,
    ):
        self.semantic_search = semantic_search
        self.chat_provider = chat_provider
        self.repository = repository
        self.context_size = context_size
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def enabled(self) -> bool:
        return self.semantic_search.enabled

    def search(
        self,
        prompt: str,
        limit: int,
        category: Optional[str] = None,
        price_range: Optional[PriceRange] = None,
    ) -> RAGSearchResult:
        """Search with vector retrieval and LLM reranking.

        Args:
            prompt: Free-text user request
            limit: Maximum number of results (> 0)
            category: Optional category filter
            price_range: Optional price bounds

        Returns:
            RAGSearchResult with the final products and terminal mode

        Raises:
            EmbeddingsDisabledError: Provider not configured
            InvalidQueryError / InvalidLimitError: Bad caller input
            EmbeddingError: Query embedding failed (no fallback is possible)
        """
        start = time.perf_counter()

        if not self.enabled:
            search_requests_total.labels(mode="rag", status="disabled").inc()
            raise EmbeddingsDisabledError()

        try:
            validate_limit(limit)
        except ValueError:
            search_requests_total.labels(mode="rag", status="invalid").inc()
            raise

        try:
            # Oversample so the reranker has something to choose from
            pool = self.semantic_search.retrieve(
                prompt,
                limit * 2,
                category=category,
                price_range=price_range,
            )
        except ValueError:
            search_requests_total.labels(mode="rag", status="invalid").inc()
            raise
        except Exception:
            search_requests_total.labels(mode="rag", status="error").inc()
            raise

        if not pool:
            return self._finish(RAGSearchResult(products=[], mode=SearchMode.VECTOR_ONLY), limit, start)

        request = RerankRequest(
            query=prompt,
            context=summarize_products(pool, self.context_size),
            limit=limit,
        )

        try:
            completion = self.chat_provider.complete(
                build_rerank_messages(request),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            ranked_ids = parse_ranked_ids(completion.content)
        except ChatCompletionError as e:
            logger.warning("Rerank completion failed, using vector order: %s", e)
            return self._fallback(pool, limit, "completion_error", start)
        except RerankFailedError as e:
            logger.warning("Rerank response unusable, using vector order: %s", e)
            return self._fallback(pool, limit, "parse_error", start)

        # Filtered searches may only return what the filtered pool holds
        filtered = bool(category) or price_range is not None
        products = self._resolve(ranked_ids, limit, pool, lookup_outside_pool=not filtered)
        if not products:
            logger.warning(
                "No reranked PID resolved to a product, using vector order",
                extra={"candidates": len(ranked_ids)},
            )
            return self._fallback(pool, limit, "unresolved_ids", start)

        return self._finish(RAGSearchResult(products=products, mode=SearchMode.RERANKED), limit, start)

    def _resolve(
        self,
        ranked_ids: list[str],
        limit: int,
        pool: list[CatalogProduct],
        lookup_outside_pool: bool = True,
    ) -> list[CatalogProduct]:
        """Map PIDs to products in LLM order, skipping unknown ids and repeats.

        PIDs from the pool resolve directly. Other PIDs go to the repository
        only when ``lookup_outside_pool`` is set.
        """
        pool_by_pid = {p.pid: p for p in pool}
        products = []
        seen = set()
        for pid in ranked_ids:
            if len(products) >= limit:
                break
            if pid in seen:
                continue
            seen.add(pid)

            product = pool_by_pid.get(pid)
            if product is None and lookup_outside_pool:
                product = self.repository.get_product_by_pid(pid)
            if product is None:
                logger.debug("Reranker returned unknown PID", extra={"pid": pid})
                continue
            products.append(product)
        return products

    def _fallback(
        self,
        pool: list[CatalogProduct],
        limit: int,
        reason: str,
        start: float,
    ) -> RAGSearchResult:
        rerank_fallbacks_total.labels(reason=reason).inc()
        result = RAGSearchResult(
            products=pool[:limit],
            mode=SearchMode.VECTOR_ONLY,
            fallback_reason=reason,
        )
        return self._finish(result, limit, start)

    def _finish(self, result: RAGSearchResult, limit: int, start: float) -> RAGSearchResult:
        rerank_outcomes_total.labels(mode=result.mode.value).inc()
        search_requests_total.labels(mode="rag", status="success").inc()
        logger.info(
            "RAG search completed",
            extra={
                "search_mode": result.mode.value,
                "limit": limit,
                "results": len(result.products),
                "fallback_reason": result.fallback_reason,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return result
