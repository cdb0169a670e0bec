"""Pydantic schemas for the HTTP API"""

from .search import (
    SemanticSearchRequest,
    RAGSearchRequest,
    ProductResponse,
    SemanticSearchResponse,
    RAGSearchResponse,
    BackfillRequest,
    BackfillReportResponse,
    BackfillResponse,
)

__all__ = [
    "SemanticSearchRequest",
    "RAGSearchRequest",
    "ProductResponse",
    "SemanticSearchResponse",
    "RAGSearchResponse",
    "BackfillRequest",
    "BackfillReportResponse",
    "BackfillResponse",
]
