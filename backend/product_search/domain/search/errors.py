"""Semantic search error taxonomy.

Caller-input errors fail fast with no side effects. Provider errors come from
``domain.ai.ports`` and propagate unchanged. ``RerankFailedError`` never leaves
the rerank orchestrator.
"""


class SearchError(Exception):
    """Base exception for semantic search operations"""
    pass


class EmbeddingsDisabledError(SearchError):
    """Embedding provider is not configured; semantic search is unavailable"""

    def __init__(self, message: str = "Semantic search is unavailable: embeddings are not enabled"):
        super().__init__(message)


class InvalidLimitError(SearchError, ValueError):
    """Result limit must be a positive integer"""

    def __init__(self, limit):
        self.limit = limit
        super().__init__(f"limit must be greater than 0, got {limit}")


class InvalidPriceRangeError(SearchError, ValueError):
    """Minimum price is above the maximum price"""

    def __init__(self, min_price, max_price):
        self.min_price = min_price
        self.max_price = max_price
        super().__init__(f"invalid price range: min {min_price} > max {max_price}")


class InvalidQueryError(SearchError, ValueError):
    """Query text is empty"""
    pass


class InvalidBatchSizeError(SearchError, ValueError):
    """Backfill batch size must be a positive integer"""

    def __init__(self, batch_size):
        self.batch_size = batch_size
        super().__init__(f"batch_size must be greater than 0, got {batch_size}")


class RerankFailedError(SearchError):
    """LLM rerank response could not be used (internal signal only)"""
    pass


class BackfillAlreadyRunningError(SearchError):
    """An embedding backfill is already running for this catalog"""

    def __init__(self, catalog: str):
        self.catalog = catalog
        super().__init__(f"embedding backfill already running for catalog '{catalog}'")


class OperationCancelledError(SearchError):
    """Caller cancelled a long-running operation"""
    pass
