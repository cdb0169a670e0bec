"""Prometheus metrics for semantic product search.

Defines operational metrics for monitoring search traffic, provider calls
and the embedding backfill.
"""

from prometheus_client import Counter, Histogram

# Search traffic
search_requests_total = Counter(
    "product_search_requests_total",
    "Total semantic search requests",
    ["mode", "status"]  # mode: semantic|rag, status: success|error|disabled|invalid
)

rerank_outcomes_total = Counter(
    "product_search_rerank_outcomes_total",
    "RAG search terminal states",
    ["mode"]  # mode: vector_only|reranked
)

rerank_fallbacks_total = Counter(
    "product_search_rerank_fallbacks_total",
    "RAG searches that fell back to vector-only ordering",
    ["reason"]  # reason: completion_error|parse_error|unresolved_ids
)

# AI provider calls
ai_calls_total = Counter(
    "product_search_ai_calls_total",
    "Total AI API calls",
    ["call_type", "status"]  # type: embedding|chat, status: success|error
)

ai_latency_ms = Histogram(
    "product_search_ai_latency_ms",
    "AI API call latency in milliseconds",
    ["call_type"],
    buckets=[50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000]
)

ai_tokens_total = Counter(
    "product_search_ai_tokens_total",
    "Total AI tokens consumed",
    ["call_type", "direction"]  # direction: input|output
)

# Embedding backfill
backfill_products_total = Counter(
    "product_search_backfill_products_total",
    "Products processed by the embedding backfill",
    ["status"]  # status: embedded|skipped|failed|write_failed
)

search_candidates = Histogram(
    "product_search_candidate_pool_size",
    "Number of candidates scored per query",
    buckets=[0, 10, 50, 100, 250, 500, 1000]
)
