"""Service wiring for the semantic search API and background workers.

This module provides:
- Provider builders (embedding + chat) derived from Settings
- FastAPI dependencies for the repository and search services
- build_backfill_job: the same wiring for Celery tasks (no request scope)

Tests replace any of the ``get_*`` dependencies through
``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .database import get_db
from .domain.ai.ports import ChatCompletionPort, EmbeddingCapability, EmbeddingProviderPort
from .domain.search.ports import ProductRepositoryPort
from .domain.search.ranker import SimilarityRanker
from .infrastructure.ai import OpenAIChatProvider, OpenAIEmbeddingAdapter
from .infrastructure.repositories import SQLAlchemyProductRepository
from .services.embedding import (
    EmbeddingBackfillJob,
    RAGSearchService,
    RepositoryCandidateSource,
    SemanticSearchService,
)


def build_embedding_provider(settings: Settings) -> EmbeddingProviderPort:
    return OpenAIEmbeddingAdapter(
        capability=EmbeddingCapability.from_settings(settings),
        model=settings.EMBEDDING_MODEL,
        max_input_chars=settings.EMBEDDING_MAX_INPUT_CHARS,
        timeout=settings.AI_REQUEST_TIMEOUT_SECONDS,
    )


def build_chat_provider(settings: Settings) -> ChatCompletionPort:
    return OpenAIChatProvider(
        capability=EmbeddingCapability.from_settings(settings),
        model=settings.CHAT_MODEL,
        timeout=settings.AI_REQUEST_TIMEOUT_SECONDS,
    )


def build_backfill_job(
    session: Session,
    settings: Optional[Settings] = None,
    embedding_provider: Optional[EmbeddingProviderPort] = None,
) -> EmbeddingBackfillJob:
    """Wire an EmbeddingBackfillJob outside of a request.

    Args:
        session: Session owned by the caller (closed by the caller)
        settings: Settings override (defaults to get_settings())
        embedding_provider: Provider override (defaults to OpenAI)
    """
    settings = settings or get_settings()
    return EmbeddingBackfillJob(
        repository=SQLAlchemyProductRepository(session),
        embedding_provider=embedding_provider or build_embedding_provider(settings),
        delay_ms=settings.BACKFILL_DELAY_MS,
        max_input_chars=settings.EMBEDDING_MAX_INPUT_CHARS,
    )


@lru_cache()
def get_embedding_provider() -> EmbeddingProviderPort:
    """Process-wide embedding provider (the OpenAI client is thread-safe)."""
    return build_embedding_provider(get_settings())


@lru_cache()
def get_chat_provider() -> ChatCompletionPort:
    """Process-wide chat-completion provider."""
    return build_chat_provider(get_settings())


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepositoryPort:
    return SQLAlchemyProductRepository(db)


def get_semantic_search_service(
    repository: ProductRepositoryPort = Depends(get_product_repository),
    embedding_provider: EmbeddingProviderPort = Depends(get_embedding_provider),
) -> SemanticSearchService:
    settings = get_settings()
    return SemanticSearchService(
        embedding_provider=embedding_provider,
        candidate_source=RepositoryCandidateSource(repository, settings.CANDIDATE_POOL_LIMIT),
        ranker=SimilarityRanker(settings.SIMILARITY_FLOOR),
    )


def get_rag_search_service(
    repository: ProductRepositoryPort = Depends(get_product_repository),
    semantic_search: SemanticSearchService = Depends(get_semantic_search_service),
    chat_provider: ChatCompletionPort = Depends(get_chat_provider),
) -> RAGSearchService:
    settings = get_settings()
    return RAGSearchService(
        semantic_search=semantic_search,
        chat_provider=chat_provider,
        repository=repository,
        context_size=settings.RERANK_CONTEXT_SIZE,
        temperature=settings.RERANK_TEMPERATURE,
        max_tokens=settings.RERANK_MAX_TOKENS,
    )


def get_backfill_job(
    repository: ProductRepositoryPort = Depends(get_product_repository),
    embedding_provider: EmbeddingProviderPort = Depends(get_embedding_provider),
) -> EmbeddingBackfillJob:
    settings = get_settings()
    return EmbeddingBackfillJob(
        repository=repository,
        embedding_provider=embedding_provider,
        delay_ms=settings.BACKFILL_DELAY_MS,
        max_input_chars=settings.EMBEDDING_MAX_INPUT_CHARS,
    )
