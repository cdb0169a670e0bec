"""Observability module for semantic product search.

Provides structured logging, metrics and request correlation.
"""

from .logging_config import (
    configure_logging,
    get_logger,
    request_id_var,
    get_request_id,
    set_request_id,
    generate_request_id,
)
from .metrics import (
    search_requests_total,
    rerank_outcomes_total,
    rerank_fallbacks_total,
    ai_calls_total,
    ai_latency_ms,
    ai_tokens_total,
    backfill_products_total,
    search_candidates,
)
from .middleware import RequestIDMiddleware

__all__ = [
    "configure_logging",
    "get_logger",
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    "search_requests_total",
    "rerank_outcomes_total",
    "rerank_fallbacks_total",
    "ai_calls_total",
    "ai_latency_ms",
    "ai_tokens_total",
    "backfill_products_total",
    "search_candidates",
    "RequestIDMiddleware",
]
