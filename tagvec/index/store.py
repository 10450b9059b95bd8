"""In-memory item store: encoded vectors plus optional metadata."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from tagvec.index.models import MetaFilter, SparseVector


class ItemStore:
    """Map item ids to sparse vectors and, optionally, metadata.

    Ids iterate in insertion order. Overwriting an id keeps its original
    position so ranking ties stay stable across re-adds.
    """

    def __init__(self) -> None:
        self._vectors: dict[str, SparseVector] = {}
        self._meta: dict[str, Any] = {}

    def put(self, item_id: str, vector: SparseVector, meta: Any | None = None) -> None:
        """Store ``vector`` (and ``meta``) under ``item_id``, replacing prior values."""
        self._vectors[item_id] = vector
        if meta is not None:
            self._meta[item_id] = meta
        else:
            self._meta.pop(item_id, None)

    def remove(self, item_ids: Iterable[str]) -> int:
        """Delete ``item_ids``; unknown ids are ignored.

        Returns:
            Number of items actually removed
        """
        removed = 0
        for item_id in item_ids:
            if self._vectors.pop(item_id, None) is not None:
                removed += 1
            self._meta.pop(item_id, None)
        return removed

    def vector_of(self, item_id: str) -> SparseVector | None:
        return self._vectors.get(item_id)

    def items(self, filter: MetaFilter | None = None) -> Iterator[tuple[str, SparseVector]]:
        """Yield ``(id, vector)`` pairs whose metadata passes ``filter``."""
        for item_id, vector in self._vectors.items():
            if filter is None or filter(self._meta.get(item_id)):
                yield item_id, vector

    def count(self, filter: MetaFilter | None = None) -> int:
        if filter is None:
            return len(self._vectors)
        return sum(1 for _ in self.items(filter))

    def vectors(self) -> dict[str, SparseVector]:
        """Return a shallow copy of the id -> vector mapping."""
        return dict(self._vectors)

    def load(self, vectors: Mapping[str, SparseVector]) -> None:
        """Replace all contents with ``vectors``; metadata is dropped."""
        self._vectors = dict(vectors)
        self._meta = {}

    def __len__(self) -> int:
        return len(self._vectors)
