"""Deterministic ordering and hashing utilities for reproducible cache keys."""

import json
from collections.abc import Iterable
from typing import Any

from tagvec.utils.hashing import compute_sha256_text


def tag_sort_key(tag: Any) -> tuple[str, str, float]:
    """Return the canonical ``(category, value, confidence)`` sort key for a tag.

    Accepts tag models as well as plain mappings.
    """
    if isinstance(tag, dict):
        return (str(tag["category"]), str(tag["value"]), float(tag["confidence"]))
    return (str(tag.category), str(tag.value), float(tag.confidence))


def compute_query_hash(tags: Iterable[Any]) -> str:
    """Compute an order-independent hash of a query tag list.

    Tags are sorted by ``(category, value, confidence)`` and serialized as
    canonical JSON before hashing, so any permutation of the same tags yields
    the same key while a change to any confidence yields a different one.

    Args:
        tags: Tag models or mappings with category, value and confidence

    Returns:
        SHA-256 hex digest of the canonical tag list

    Example:
        >>> a = [{"category": "size", "value": "l", "confidence": 0.8},
        ...      {"category": "color", "value": "red", "confidence": 1.0}]
        >>> compute_query_hash(a) == compute_query_hash(list(reversed(a)))
        True
    """
    canonical = sorted(tag_sort_key(tag) for tag in tags)
    payload = json.dumps(
        [list(key) for key in canonical],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return compute_sha256_text(payload)

