"""Category index and per-category weight table.

The category index owns the definition of the vector space: every distinct
``(category, value)`` pair is one dimension, numbered densely from zero in
first-seen order. The weight table is independent of it and may hold weights
for categories that were never indexed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from tagvec.index.models import CategoryWeight, IndexTag

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_WEIGHT = 1.0


class CategoryIndex:
    """Ordered ``category -> {value -> dimension}`` mapping."""

    def __init__(self) -> None:
        self._categories: dict[str, dict[str, int]] = {}
        self._vector_size = 0

    @property
    def vector_size(self) -> int:
        """Number of assigned dimensions."""
        return self._vector_size

    @property
    def category_count(self) -> int:
        return len(self._categories)

    def build(self, tags: Iterable[IndexTag]) -> int:
        """Replace the index with dimensions for ``tags`` in input order.

        Duplicate pairs keep the dimension of their first occurrence.

        Returns:
            The new vector size
        """
        categories: dict[str, dict[str, int]] = {}
        position = 0
        for tag in tags:
            values = categories.setdefault(tag.category, {})
            if tag.value not in values:
                values[tag.value] = position
                position += 1

        self._categories = categories
        self._vector_size = position
        logger.debug(
            "Built category index: %d categories, %d dimensions",
            len(categories),
            position,
        )
        return position

    def dimension_of(self, category: str, value: str) -> int | None:
        """Return the dimension for ``(category, value)`` or None if unknown."""
        values = self._categories.get(category)
        if values is None:
            return None
        return values.get(value)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        category, value = pair
        return self.dimension_of(category, value) is not None

    def to_mapping(self) -> dict[str, dict[str, int]]:
        """Return a deep copy of the mapping in insertion order."""
        return {category: dict(values) for category, values in self._categories.items()}

    def load(self, mapping: Mapping[str, Mapping[str, int]], vector_size: int) -> None:
        """Replace the index with a previously exported mapping."""
        self._categories = {
            category: {value: int(position) for value, position in values.items()}
            for category, values in mapping.items()
        }
        self._vector_size = int(vector_size)


class CategoryWeightTable:
    """Explicitly-set category weights; absent categories weigh 1."""

    def __init__(self) -> None:
        self._weights: dict[str, float] = {}

    def get(self, category: str) -> float:
        return self._weights.get(category, DEFAULT_CATEGORY_WEIGHT)

    def set(self, category: str, weight: float) -> None:
        self._weights[category] = float(weight)

    def set_many(self, entries: Iterable[CategoryWeight]) -> int:
        """Apply ``entries``, skipping those without a weight.

        Returns:
            Number of weights applied
        """
        applied = 0
        for entry in entries:
            if entry.weight is None:
                continue
            self.set(entry.category, entry.weight)
            applied += 1
        return applied

    def all(self) -> list[CategoryWeight]:
        """Return the explicitly-set weights in the order they were first set."""
        return [
            CategoryWeight(category=category, weight=weight)
            for category, weight in self._weights.items()
        ]

    def load(self, entries: Iterable[CategoryWeight]) -> None:
        """Replace all weights with ``entries``."""
        self._weights = {}
        self.set_many(entries)

    def __len__(self) -> int:
        return len(self._weights)
