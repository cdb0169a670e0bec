"""Candidate Source - exhaustive scan over embedded products.

Default CandidateSourcePort implementation: pulls every embedded product that
matches the filters, capped at a fixed pool size, straight from the product
repository. Scoring happens in memory in the ranker.
"""

import logging
from typing import Optional

from ...domain.search.models import CatalogProduct, ProductFilters
from ...domain.search.ports import CandidateSourcePort, ProductRepositoryPort
from ...observability.metrics import search_candidates

logger = logging.getLogger(__name__)

DEFAULT_POOL_LIMIT = 1000


class RepositoryCandidateSource(CandidateSourcePort):
    """Linear-scan candidate source backed by ProductRepositoryPort."""

    def __init__(self, repository: ProductRepositoryPort, pool_limit: int = DEFAULT_POOL_LIMIT):
        self.repository = repository
        self.pool_limit = pool_limit

    def fetch_candidates(
        self,
        filters: Optional[ProductFilters] = None,
        limit: Optional[int] = None,
    ) -> list[CatalogProduct]:
        cap = limit if limit is not None else self.pool_limit
        candidates = self.repository.products_with_embeddings(filters, cap)

        search_candidates.observe(len(candidates))
        if len(candidates) >= cap:
            logger.info(
                "Candidate pool hit cap",
                extra={"candidates": len(candidates), "limit": cap},
            )

        return candidates
