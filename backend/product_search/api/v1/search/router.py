"""Semantic search API router.

Thin glue over the search services: request parsing, price-range
construction and response shaping. Domain errors are mapped to HTTP status
codes by the exception handlers registered in main.py.
"""

import logging

from fastapi import APIRouter, Depends

from ....config import get_settings
from ....dependencies import (
    get_backfill_job,
    get_rag_search_service,
    get_semantic_search_service,
)
from ....domain.search.errors import EmbeddingsDisabledError
from ....domain.search.models import PriceRange
from ....schemas.search import (
    BackfillReportResponse,
    BackfillRequest,
    BackfillResponse,
    ProductResponse,
    RAGSearchRequest,
    RAGSearchResponse,
    SemanticSearchRequest,
    SemanticSearchResponse,
)
from ....services.embedding import EmbeddingBackfillJob, RAGSearchService, SemanticSearchService
from ....services.embedding.backfill import validate_batch_size

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


def _price_range(enabled: bool, min_price, max_price):
    # Left unbuilt when disabled so the service reports 503 before any input error
    if not enabled:
        return None
    return PriceRange.from_bounds(min_price, max_price)


@router.post("/semantic", response_model=SemanticSearchResponse)
def semantic_search(
    request: SemanticSearchRequest,
    service: SemanticSearchService = Depends(get_semantic_search_service),
):
    """Rank products by embedding similarity to the query.

    Returns:
        Up to ``limit`` products, best match first

    Raises:
        503: Embeddings are not enabled
        400: Invalid limit, price range or empty query
        502: Embedding provider failed
    """
    price_range = _price_range(service.enabled, request.min_price, request.max_price)
    products = service.search(
        request.query,
        request.limit,
        category=request.category,
        price_range=price_range,
        in_stock=request.in_stock,
    )

    return SemanticSearchResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        total=len(products),
    )


@router.post("/rag", response_model=RAGSearchResponse)
def rag_search(
    request: RAGSearchRequest,
    service: RAGSearchService = Depends(get_rag_search_service),
):
    """Vector search followed by LLM reranking.

    Reranking failures never fail the request: the response then carries
    ``mode = "vector_only"`` and the plain similarity ordering.
    """
    price_range = _price_range(service.enabled, request.min_price, request.max_price)
    result = service.search(
        request.prompt,
        request.limit,
        category=request.category,
        price_range=price_range,
    )

    return RAGSearchResponse(
        mode=result.mode,
        products=[ProductResponse.model_validate(p) for p in result.products],
        total=len(result.products),
        fallback_reason=result.fallback_reason,
    )


@router.post("/embeddings/backfill", response_model=BackfillResponse)
def backfill_embeddings(
    request: BackfillRequest,
    job: EmbeddingBackfillJob = Depends(get_backfill_job),
):
    """Embed every product that has no embedding yet.

    With ``run_async`` the Celery task is enqueued and its id returned;
    otherwise the job runs inline and the report is returned.
    """
    batch_size = request.batch_size if request.batch_size is not None else get_settings().BACKFILL_BATCH_SIZE

    if request.run_async:
        if not job.embedding_provider.capability.enabled:
            raise EmbeddingsDisabledError()
        validate_batch_size(batch_size)

        # Imported lazily so the API process does not need a broker to serve searches
        from ....workers.embed_product_worker import backfill_product_embeddings

        task = backfill_product_embeddings.delay(
            batch_size=batch_size,
            missing_only=request.missing_only,
        )
        logger.info("Embedding backfill enqueued", extra={"batch_size": batch_size})
        return BackfillResponse(status="queued", task_id=task.id)

    if request.missing_only:
        report = job.run_missing_only(batch_size)
    else:
        report = job.run(batch_size)

    return BackfillResponse(
        status="completed",
        report=BackfillReportResponse(**report.to_dict()),
    )
