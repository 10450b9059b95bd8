"""Sparse vector encoding of weighted tags."""

from __future__ import annotations

from collections.abc import Iterable

from tagvec.index.categories import CategoryIndex, CategoryWeightTable
from tagvec.index.models import SparseVector, Tag

ZERO_TOLERANCE = 1e-12


class SparseVectorEncoder:
    """Encode tag lists over the dimensions of a :class:`CategoryIndex`.

    Weights are read from the weight table at encode time, so a vector keeps
    the weights that were in effect when it was encoded.
    """

    def __init__(self, categories: CategoryIndex, weights: CategoryWeightTable) -> None:
        self._categories = categories
        self._weights = weights

    def encode(self, tags: Iterable[Tag]) -> SparseVector:
        """Encode ``tags`` as ``{dimension: confidence * weight(category)}``.

        Unknown categories or values and non-positive confidences are
        skipped. When a pair occurs more than once the largest weighted value
        is kept, which makes the result independent of tag order.
        """
        vector: SparseVector = {}
        for tag in tags:
            if tag.confidence <= 0:
                continue
            dimension = self._categories.dimension_of(tag.category, tag.value)
            if dimension is None:
                continue
            weighted = tag.confidence * self._weights.get(tag.category)
            if abs(weighted) < ZERO_TOLERANCE:
                continue
            current = vector.get(dimension)
            if current is None or weighted > current:
                vector[dimension] = weighted
        return vector
