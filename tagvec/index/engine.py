"""Tag vector index: public operations over categories, items and the query cache.

Every mutating call empties the query cache before returning, so a repeated
query always reflects the current state. Malformed-but-well-typed input never
raises: unknown tags are ignored, empty queries and out-of-range pages return
empty results.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar

from tagvec.config import Settings, get_settings
from tagvec.index.cache import QueryCache, paginate
from tagvec.index.categories import CategoryIndex, CategoryWeightTable
from tagvec.index.codec import (
    ExportedData,
    decode_item_vectors,
    export_snapshot,
    parse_snapshot,
)
from tagvec.index.encoder import SparseVectorEncoder
from tagvec.index.models import (
    CategoryWeight,
    IndexStats,
    IndexTag,
    Item,
    MemoryUsage,
    QueryResult,
    Tag,
    coerce_item,
    coerce_tags,
)
from tagvec.index.similarity import cosine_similarity
from tagvec.index.store import ItemStore
from tagvec.utils.deterministic import compute_query_hash

logger = logging.getLogger(__name__)

MetaT = TypeVar("MetaT")
Filter = Callable[[MetaT | None], bool]


class TagVectorIndex(Generic[MetaT]):
    """Rank tagged items against a query tag-set by weighted cosine similarity.

    Usage::

        index = TagVectorIndex()
        index.build_index([{"category": "color", "value": "red"}])
        index.add_item({"id": "a", "tags": [{"category": "color", "value": "red",
                                              "confidence": 1.0}]})
        index.query([{"category": "color", "value": "red", "confidence": 0.9}])

    Not safe for concurrent mutation; callers serialize access.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._categories = CategoryIndex()
        self._weights = CategoryWeightTable()
        self._encoder = SparseVectorEncoder(self._categories, self._weights)
        self._store = ItemStore()
        self._cache = QueryCache()

    # Category index

    def build_index(self, tags: Iterable[IndexTag | Mapping[str, Any]]) -> None:
        """Rebuild the category index from ``tags``.

        Stored item vectors refer to the previous dimensions afterwards; re-add
        items to re-encode them against the new index.
        """
        index_tags = coerce_tags(tags, IndexTag)
        self._categories.build(index_tags)
        self._cache.clear()
        if len(self._store):
            logger.warning(
                "Category index rebuilt with %d stored items; their vectors are stale "
                "until the items are re-added.",
                len(self._store),
            )

    # Category weights

    def set_category_weight(self, category: str, weight: float) -> None:
        """Set the encode-time multiplier for ``category``.

        Only vectors encoded after this call use the new weight; stored item
        vectors keep the weight they were encoded with.
        """
        self._weights.set(category, weight)
        self._cache.clear()

    def set_category_weights(
        self, weights: Iterable[CategoryWeight | Mapping[str, Any]]
    ) -> None:
        """Apply several weights; entries without a weight are skipped."""
        entries = [
            entry if isinstance(entry, CategoryWeight) else CategoryWeight.model_validate(entry)
            for entry in weights
        ]
        self._weights.set_many(entries)
        self._cache.clear()

    def get_category_weight(self, category: str) -> float:
        return self._weights.get(category)

    def get_all_category_weights(self) -> list[CategoryWeight]:
        """Return explicitly-set weights only."""
        return self._weights.all()

    # Items

    def add_item(self, item: Item | Mapping[str, Any]) -> None:
        """Encode and store ``item``, replacing any item with the same id."""
        self.add_item_batch([item])

    def add_item_batch(
        self,
        items: Iterable[Item | Mapping[str, Any]],
        batch_size: int | None = None,
    ) -> None:
        """Encode and store ``items`` in chunks of ``batch_size``.

        All items are validated before the store is touched, so a malformed
        entry leaves the index unchanged.
        """
        validated = [coerce_item(item) for item in items]
        size = self._settings.batch_size
        if batch_size is not None and batch_size > 0:
            size = batch_size

        for start in range(0, len(validated), size):
            chunk = validated[start : start + size]
            encoded = [(item, self._encoder.encode(item.tags)) for item in chunk]
            for item, vector in encoded:
                self._store.put(item.id, vector, item.meta)

        self._cache.clear()
        logger.debug("Stored %d items (batch size %d)", len(validated), size)

    def remove_items(self, item_ids: Iterable[str]) -> None:
        """Remove ``item_ids``; unknown ids are ignored."""
        removed = self._store.remove(item_ids)
        self._cache.clear()
        logger.debug("Removed %d items", removed)

    # Queries

    def query(
        self,
        tags: Iterable[Tag | Mapping[str, Any]],
        *,
        page: int = 1,
        page_size: int | None = None,
        filter: Filter[MetaT] | None = None,
    ) -> list[QueryResult]:
        """Return one page of items ranked by similarity to ``tags``.

        Args:
            tags: Query tags
            page: 1-based page number
            page_size: Results per page (defaults to settings.default_page_size)
            filter: Predicate over item metadata; matched by identity for caching

        Returns:
            Results with similarity > 0, most similar first; ties keep
            insertion order
        """
        size = page_size if page_size is not None else self._settings.default_page_size
        query_tags = coerce_tags(tags, Tag)
        query_hash = compute_query_hash(query_tags)

        results = self._cache.lookup(query_hash, filter)
        if results is None:
            results = self._cache.store(query_hash, filter, self._rank(query_tags, filter))

        return paginate(results, page, size)

    def query_first(
        self,
        tags: Iterable[Tag | Mapping[str, Any]],
        filter: Filter[MetaT] | None = None,
    ) -> QueryResult | None:
        """Return the single best match, or None when nothing matches."""
        page = self.query(tags, page=1, page_size=1, filter=filter)
        return page[0] if page else None

    def _rank(self, tags: list[Tag], filter: Filter[MetaT] | None) -> list[QueryResult]:
        query_vector = self._encoder.encode(tags)
        if not query_vector:
            return []

        scored = []
        for item_id, vector in self._store.items(filter):
            similarity = cosine_similarity(query_vector, vector)
            if similarity > 0:
                scored.append(QueryResult(id=item_id, similarity=similarity))

        # sorted() is stable, so equal scores keep store order
        return sorted(scored, key=lambda result: result.similarity, reverse=True)

    def clear_query_cache(self) -> None:
        self._cache.clear()

    # Introspection

    def get_stats(self, filter: Filter[MetaT] | None = None) -> IndexStats:
        """Report item, dimension and cache counts."""
        return IndexStats(
            total_items=self._store.count(filter),
            total_tags=self._categories.vector_size,
            memory_usage=MemoryUsage(
                category_map_size=self._categories.category_count,
                vectors_size=len(self._store),
                has_cached_query=self._cache.has_entry,
            ),
        )

    def get_item_vector(self, item_id: str) -> dict[int, float] | None:
        """Return a copy of the stored vector for ``item_id``."""
        vector = self._store.vector_of(item_id)
        return dict(vector) if vector is not None else None

    # Import / export

    def export_index(self, include_items: bool = True) -> ExportedData:
        """Export categories, weights and (optionally) item vectors."""
        return export_snapshot(
            self._categories,
            self._weights,
            self._store,
            include_items=include_items,
        )

    def import_index(self, data: ExportedData | Mapping[str, Any]) -> None:
        """Replace all state with ``data``.

        The payload is validated before anything is replaced. Item metadata is
        not part of the payload, so imported items carry none.

        Raises:
            SnapshotValidationError: If ``data`` is structurally invalid
        """
        snapshot = parse_snapshot(data)
        vectors = decode_item_vectors(snapshot)

        self._categories.load(snapshot.category_map, snapshot.vector_size)
        self._weights.load(snapshot.category_weights)
        self._store.load(vectors)
        self._cache.clear()
        logger.debug(
            "Imported index: %d dimensions, %d items",
            snapshot.vector_size,
            len(vectors),
        )
