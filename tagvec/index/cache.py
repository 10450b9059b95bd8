"""Single-slot query result cache and pagination."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from tagvec.index.models import MetaFilter, QueryResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CachedQuery:
    """Full ranked result list for one ``(query_hash, filter)`` pair."""

    query_hash: str
    filter_fn: MetaFilter | None
    results: tuple[QueryResult, ...]


class QueryCache:
    """Memoize the most recent query's ranked results.

    The filter is matched by identity, not by behaviour: two distinct
    callables never share an entry even if they compute the same predicate,
    so a lambda written inline at the call site always misses. Passing
    ``None`` both times counts as a match.
    """

    def __init__(self) -> None:
        self._entry: CachedQuery | None = None

    @property
    def has_entry(self) -> bool:
        return self._entry is not None

    def lookup(
        self, query_hash: str, filter_fn: MetaFilter | None
    ) -> tuple[QueryResult, ...] | None:
        """Return cached results for the pair, or None on a miss."""
        entry = self._entry
        if entry is None:
            return None
        if entry.query_hash != query_hash or entry.filter_fn is not filter_fn:
            logger.debug("Query cache miss for %s", query_hash[:12])
            return None
        logger.debug("Query cache hit for %s", query_hash[:12])
        return entry.results

    def store(
        self,
        query_hash: str,
        filter_fn: MetaFilter | None,
        results: Sequence[QueryResult],
    ) -> tuple[QueryResult, ...]:
        """Replace the cached entry and return the stored results."""
        entry = CachedQuery(query_hash=query_hash, filter_fn=filter_fn, results=tuple(results))
        self._entry = entry
        return entry.results

    def clear(self) -> None:
        self._entry = None


def paginate(results: Sequence[QueryResult], page: int, page_size: int) -> list[QueryResult]:
    """Return the 1-based ``page`` of ``results``.

    Out-of-range pages and non-positive sizes yield an empty list.
    """
    if page < 1 or page_size < 1:
        return []
    start = (page - 1) * page_size
    return list(results[start : start + page_size])
