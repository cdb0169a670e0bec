"""Unit tests for cosine similarity and vector norm."""

import math

import pytest

from product_search.domain.search.vector_math import cosine_similarity, vector_norm


class TestVectorNorm:
    def test_euclidean_norm(self):
        assert vector_norm([3.0, 4.0]) == pytest.approx(5.0)

    def test_zero_vector(self):
        assert vector_norm([0.0, 0.0, 0.0]) == 0.0


class TestCosineSimilarity:
    """Cosine similarity properties."""

    @pytest.mark.parametrize("a,b", [
        ([1.0, 2.0, 3.0], [4.0, -5.0, 6.0]),
        ([0.1, 0.9], [0.7, 0.2]),
        ([-1.0, 0.5, 2.0, 0.0], [3.0, 3.0, -1.0, 8.0]),
    ])
    def test_symmetric(self, a, b):
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    @pytest.mark.parametrize("v", [[1.0, 0.0], [0.3, -0.4, 12.0], [1e-3, 2e-3]])
    def test_self_similarity_is_one(self, v):
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_zero_norm_returns_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0

    def test_orthogonal_and_opposite(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_result_stays_within_bounds(self):
        """Floating-point drift never pushes the score outside [-1, 1]."""
        v = [0.1] * 1536
        score = cosine_similarity(v, v)
        assert -1.0 <= score <= 1.0
        assert not math.isnan(score)

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])

    def test_empty_vectors_raise(self):
        with pytest.raises(ValueError):
            cosine_similarity([], [])
