"""
Vector math utilities used for ranking.

Shared by TF-IDF vectors and neural embeddings. Vectors are plain
sequences of floats; mismatched lengths are a programming error and
raise ``ValueError``.
"""

import math
from collections.abc import Sequence


def _check_lengths(vector_a: Sequence[float], vector_b: Sequence[float]) -> None:
    if len(vector_a) != len(vector_b):
        raise ValueError(f"Vector length mismatch: {len(vector_a)} vs {len(vector_b)}")


def magnitude(vector: Sequence[float]) -> float:
    """Return the L2 norm of a vector."""
    return math.sqrt(sum(x * x for x in vector))


def dot_product(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """Return the dot product of two equal-length vectors."""
    _check_lengths(vector_a, vector_b)
    return sum(a * b for a, b in zip(vector_a, vector_b))


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """
    Compute cosine similarity between two vectors.

    Args:
        vector_a: First vector
        vector_b: Second vector, same length as ``vector_a``

    Returns:
        Similarity in ``[-1, 1]``; 0.0 when either vector has zero norm

    Raises:
        ValueError: If the vectors differ in length
    """
    _check_lengths(vector_a, vector_b)
    if not vector_a:
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for a, b in zip(vector_a, vector_b):
        dot += a * b
        norm_a += a * a
        norm_b += b * b

    denominator = math.sqrt(norm_a) * math.sqrt(norm_b)
    if denominator == 0.0:
        return 0.0
    return dot / denominator


def normalize(vector: Sequence[float]) -> list[float]:
    """
    Normalize vector to unit length.

    Returns:
        Unit-length copy of the vector, or the values unchanged if its norm is 0
    """
    norm = magnitude(vector)
    if norm == 0.0:
        return list(vector)
    return [x / norm for x in vector]


def euclidean_distance(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """Return the Euclidean distance between two equal-length vectors (lower = closer)."""
    _check_lengths(vector_a, vector_b)
    return math.sqrt(sum((a - b) ** 2 for a, b in zip(vector_a, vector_b)))
