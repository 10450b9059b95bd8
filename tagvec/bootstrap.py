"""Application bootstrap: load a dataset file and wire a ready index."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from tagvec.config import Settings, get_settings
from tagvec.index import CategoryWeight, IndexTag, Item, TagVectorIndex

logger = logging.getLogger(__name__)


class DatasetError(ValueError):
    """Raised when a dataset file cannot be parsed."""


class Dataset(BaseModel):
    """Tagged items plus optional explicit index and category weights.

    When ``index`` is omitted the category index is built from the items'
    own tags in first-seen order.
    """

    index: list[IndexTag] | None = Field(None, description="Explicit index tags")
    weights: list[CategoryWeight] = Field(default_factory=list, description="Category weights")
    items: list[Item] = Field(default_factory=list, description="Items to add")

    def index_tags(self) -> list[IndexTag]:
        if self.index is not None:
            return list(self.index)
        return [tag for item in self.items for tag in item.tags]


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates settings and the populated index for the CLI layer."""

    settings: Settings
    index: TagVectorIndex[Any]
    source: Path


def _read_json(path: Path) -> Any:
    if not path.is_file():
        raise FileNotFoundError(f"Dataset not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DatasetError(f"{path} is not valid JSON: {exc}") from exc


def load_dataset(path: Path) -> Dataset:
    """Parse and validate a dataset file.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        DatasetError: If the file is not valid JSON or not a valid dataset
    """
    try:
        return Dataset.model_validate(_read_json(path))
    except ValidationError as exc:
        raise DatasetError(f"{path} is not a valid dataset: {exc}") from exc


def build_index(dataset: Dataset, settings: Settings | None = None) -> TagVectorIndex[Any]:
    """Create an index populated from ``dataset``.

    Weights are applied before items are added since they are baked in at
    encode time.
    """
    index: TagVectorIndex[Any] = TagVectorIndex(settings=settings)
    index.build_index(dataset.index_tags())
    index.set_category_weights(dataset.weights)
    index.add_item_batch(dataset.items)
    return index


def bootstrap_application(
    source: Path,
    *,
    snapshot: bool = False,
    settings: Settings | None = None,
) -> ApplicationContainer:
    """Load ``source`` (a dataset, or an exported snapshot) into a fresh index."""

    active_settings = settings or get_settings()
    source = Path(source)

    if snapshot:
        index: TagVectorIndex[Any] = TagVectorIndex(settings=active_settings)
        index.import_index(_read_json(source))
    else:
        index = build_index(load_dataset(source), active_settings)

    logger.info("Loaded %s with %d items", source, index.get_stats().total_items)
    return ApplicationContainer(settings=active_settings, index=index, source=source)
