"""Embedding Services - Product embedding generation and semantic search.

This module provides services for:
- Canonical text generation from product data
- Candidate retrieval and vector similarity search
- LLM reranking with vector-only fallback
- Batch embedding backfill
"""

from .text_generator import (
    generate_product_embedding_text,
    generate_query_embedding_text,
    truncate_text_for_embedding,
)
from .candidate_source import RepositoryCandidateSource
from .semantic_search import SemanticSearchService
from .rag_search import RAGSearchService
from .backfill import EmbeddingBackfillJob

__all__ = [
    "generate_product_embedding_text",
    "generate_query_embedding_text",
    "truncate_text_for_embedding",
    "RepositoryCandidateSource",
    "SemanticSearchService",
    "RAGSearchService",
    "EmbeddingBackfillJob",
]
