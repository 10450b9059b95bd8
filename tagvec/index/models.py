"""Data models shared by the index components."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

SparseVector: TypeAlias = dict[int, float]
"""Dimension index -> weighted confidence; absent dimensions are zero."""

MetaFilter: TypeAlias = Callable[[Any], bool]
"""Predicate over item metadata (``None`` for items stored without meta)."""


class IndexTag(BaseModel):
    """Category/value label used to populate the category index."""

    category: str = Field(..., description="Tag category, e.g. 'color'")
    value: str = Field(..., description="Value within the category, e.g. 'red'")


class Tag(IndexTag):
    """Label with a confidence weight (semantically within [0, 1])."""

    confidence: float = Field(..., description="Strength or probability of the label")


class Item(BaseModel):
    """Tagged item with optional opaque metadata used by filters."""

    id: str = Field(..., description="Item identifier")
    tags: list[Tag] = Field(default_factory=list, description="Item tags")
    meta: Any | None = Field(None, description="Opaque metadata passed to filters")


class CategoryWeight(BaseModel):
    """Multiplier applied to a category's confidences at encode time."""

    category: str
    weight: float | None = None


class QueryResult(BaseModel):
    """Single ranked query result."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Item identifier")
    similarity: float = Field(..., description="Cosine similarity to the query")


class MemoryUsage(BaseModel):
    category_map_size: int
    vectors_size: int
    has_cached_query: bool


class IndexStats(BaseModel):
    """Snapshot of index size information."""

    total_items: int = Field(..., description="Stored items passing the filter")
    total_tags: int = Field(..., description="Number of indexed dimensions")
    memory_usage: MemoryUsage


def coerce_tags(
    tags: Iterable[IndexTag | dict[str, Any]],
    model: type[IndexTag] = Tag,
) -> list[Any]:
    """Validate ``tags`` into ``model`` instances, passing through existing ones."""
    return [tag if isinstance(tag, model) else model.model_validate(tag) for tag in tags]


def coerce_item(item: Item | dict[str, Any]) -> Item:
    """Validate ``item`` into an :class:`Item`."""
    return item if isinstance(item, Item) else Item.model_validate(item)
