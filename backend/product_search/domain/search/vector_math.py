"""Vector math for semantic similarity.

Pure functions over float sequences; safe for concurrent use.
"""

from typing import Sequence

import numpy as np


def vector_norm(vector: Sequence[float]) -> float:
    """Euclidean (L2) norm of a vector."""
    return float(np.linalg.norm(np.asarray(vector, dtype=np.float64)))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity between two equal-length, non-empty vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Similarity in [-1.0, 1.0]; 0.0 when either vector has zero norm

    Raises:
        ValueError: If the vectors are empty or differ in length

    Example:
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0])
        1.0
        >>> cosine_similarity([1.0, 0.0], [0.0, 1.0])
        0.0
    """
    if len(a) != len(b):
        raise ValueError(f"vector length mismatch: {len(a)} != {len(b)}")
    if len(a) == 0:
        raise ValueError("vectors must not be empty")

    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = np.dot(vec_a, vec_b) / (norm_a * norm_b)

    # Rounding can push |similarity| a hair past 1
    return float(np.clip(similarity, -1.0, 1.0))
