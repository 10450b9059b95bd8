"""Transport-neutral import/export shape for an index.

The exported payload uses camelCase keys::

    {
      "categoryMap": {category: {value: dimension}},
      "vectorSize": int,
      "categoryWeights": [{"category": str, "weight": float}],
      "itemVectors": {item_id: [[dimension, value], ...]}   # optional
    }

``itemVectors`` is omitted entirely (not emptied) when items are excluded.
Reading and writing the payload to files or the network is left to callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from tagvec.index.categories import CategoryIndex, CategoryWeightTable
from tagvec.index.models import CategoryWeight, SparseVector
from tagvec.index.store import ItemStore


class SnapshotValidationError(ValueError):
    """Raised when an import payload is structurally invalid."""


class ExportedData(BaseModel):
    """Serialized form of the category index, weights and item vectors."""

    model_config = ConfigDict(populate_by_name=True)

    category_map: dict[str, dict[str, int]] = Field(..., alias="categoryMap")
    vector_size: int = Field(..., ge=0, alias="vectorSize")
    category_weights: list[CategoryWeight] = Field(
        default_factory=list, alias="categoryWeights"
    )
    item_vectors: dict[str, list[tuple[int, float]]] | None = Field(
        None, alias="itemVectors"
    )

    @model_validator(mode="after")
    def _check_dimensions(self) -> ExportedData:
        seen: set[int] = set()
        for category, values in self.category_map.items():
            for value, position in values.items():
                if not 0 <= position < self.vector_size:
                    raise ValueError(
                        f"Dimension {position} for {category}={value} is outside "
                        f"vectorSize {self.vector_size}"
                    )
                if position in seen:
                    raise ValueError(f"Dimension {position} is assigned more than once")
                seen.add(position)

        # Item dimensions may lie past vectorSize after a shrinking rebuild.
        for item_id, entries in (self.item_vectors or {}).items():
            for position, _ in entries:
                if position < 0:
                    raise ValueError(f"Item {item_id!r} uses negative dimension {position}")
        return self

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase mapping, omitting ``itemVectors`` when absent."""
        payload = self.model_dump(mode="json", by_alias=True, exclude={"item_vectors"})
        if self.item_vectors is not None:
            payload["itemVectors"] = {
                item_id: [[position, value] for position, value in entries]
                for item_id, entries in self.item_vectors.items()
            }
        return payload


def export_snapshot(
    categories: CategoryIndex,
    weights: CategoryWeightTable,
    store: ItemStore,
    *,
    include_items: bool = True,
) -> ExportedData:
    """Build an :class:`ExportedData` from live index components.

    Stored vectors are exported as-is, including dimensions left stale by a
    rebuild, so a re-import ranks exactly like the source index.
    """
    item_vectors: dict[str, list[tuple[int, float]]] | None = None
    if include_items:
        item_vectors = {
            item_id: list(vector.items()) for item_id, vector in store.vectors().items()
        }

    return ExportedData.model_construct(
        category_map=categories.to_mapping(),
        vector_size=categories.vector_size,
        category_weights=weights.all(),
        item_vectors=item_vectors,
    )


def parse_snapshot(data: ExportedData | Mapping[str, Any]) -> ExportedData:
    """Validate ``data`` into an :class:`ExportedData`.

    Raises:
        SnapshotValidationError: If the payload is structurally invalid
    """
    if isinstance(data, ExportedData):
        return data
    try:
        return ExportedData.model_validate(data)
    except ValidationError as exc:
        raise SnapshotValidationError(f"Invalid index snapshot: {exc}") from exc


def decode_item_vectors(snapshot: ExportedData) -> dict[str, SparseVector]:
    """Rebuild sparse vectors from ``[dimension, value]`` pairs."""
    vectors: dict[str, SparseVector] = {}
    for item_id, entries in (snapshot.item_vectors or {}).items():
        vectors[item_id] = {int(position): float(value) for position, value in entries}
    return vectors
