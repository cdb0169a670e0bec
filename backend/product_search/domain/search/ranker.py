"""Similarity ranking over an in-memory candidate pool.

Scores every compatible candidate against the query vector, drops anything at
or below the similarity floor and keeps the top ``limit`` by score.
"""

import heapq
from typing import Iterable, Sequence

from .errors import InvalidLimitError
from .models import CatalogProduct, ScoredCandidate
from .vector_math import cosine_similarity

DEFAULT_SIMILARITY_FLOOR = 0.3


def validate_limit(limit: int) -> int:
    """Return ``limit`` unchanged, raising InvalidLimitError unless it is positive."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidLimitError(limit)
    return limit


def is_compatible(product: CatalogProduct, query_vector: Sequence[float]) -> bool:
    """A product is scoreable only if its embedding is non-empty and matches the query length."""
    embedding = product.embedding
    return bool(embedding) and len(embedding) == len(query_vector)


class SimilarityRanker:
    """Cosine-similarity ranker with a fixed similarity floor.

    Ordering is by score descending; candidates with equal scores keep the
    order in which the candidate source returned them, so identical inputs
    always produce identical rankings.
    """

    def __init__(self, similarity_floor: float = DEFAULT_SIMILARITY_FLOOR):
        """Initialize ranker.

        Args:
            similarity_floor: Candidates scoring at or below this are dropped
        """
        self.similarity_floor = similarity_floor

    def score_candidates(
        self,
        query_vector: Sequence[float],
        candidates: Iterable[CatalogProduct],
    ) -> list[ScoredCandidate]:
        """Score compatible candidates and keep those above the floor.

        Args:
            query_vector: Query embedding
            candidates: Candidate products in discovery order

        Returns:
            Surviving ScoredCandidates, still in discovery order
        """
        if not query_vector:
            return []

        survivors = []
        for product in candidates:
            if not is_compatible(product, query_vector):
                continue
            score = cosine_similarity(product.embedding, query_vector)
            if score > self.similarity_floor:
                survivors.append(ScoredCandidate(product=product, score=score))
        return survivors

    def rank(
        self,
        query_vector: Sequence[float],
        candidates: Iterable[CatalogProduct],
        limit: int,
    ) -> list[CatalogProduct]:
        """Return the top ``limit`` candidates by cosine similarity.

        Args:
            query_vector: Query embedding
            candidates: Candidate products in discovery order
            limit: Maximum number of results (must be > 0)

        Returns:
            Up to ``limit`` products, best match first (empty if nothing survives)

        Raises:
            InvalidLimitError: If limit <= 0
        """
        validate_limit(limit)
        survivors = self.score_candidates(query_vector, candidates)
        # nlargest is equivalent to sorted(..., reverse=True)[:n], so ties stay stable
        top = heapq.nlargest(limit, survivors, key=lambda candidate: candidate.score)
        return [candidate.product for candidate in top]
