"""Cosine similarity over sparse vectors."""

from __future__ import annotations

import math

from tagvec.index.models import SparseVector


def vector_norm(vector: SparseVector) -> float:
    """Return the Euclidean norm of ``vector``."""
    return math.sqrt(math.fsum(value * value for value in vector.values()))


def cosine_similarity(a: SparseVector, b: SparseVector) -> float:
    """Return ``dot(a, b) / (|a| * |b|)``.

    Runs in O(nnz(a) + nnz(b)). Returns 0.0 when either vector is empty or
    has zero norm. ``math.fsum`` is exactly rounded, so swapping the
    arguments gives a bit-identical result.
    """
    if not a or not b:
        return 0.0

    norm_a = vector_norm(a)
    norm_b = vector_norm(b)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    dot = math.fsum(value * b[dimension] for dimension, value in a.items() if dimension in b)
    # Rounding can push self-similarity a hair above 1.
    return min(dot / (norm_a * norm_b), 1.0)
