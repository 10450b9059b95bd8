"""Pytest configuration and fixtures."""

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from tagvec.config import Settings
from tagvec.index import IndexTag, TagVectorIndex

from factories import make_tag


@pytest.fixture
def override_settings() -> Generator[Settings, None, None]:
    """Provide isolated tagvec settings scoped to tests."""

    import tagvec.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(default_page_size=10, batch_size=1000, log_level="WARNING")
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def index_tags() -> list[IndexTag]:
    """color:red, color:blue, size:large -> dimensions 0, 1, 2."""
    return [
        IndexTag(category="color", value="red"),
        IndexTag(category="color", value="blue"),
        IndexTag(category="size", value="large"),
    ]


@pytest.fixture
def index(override_settings: Settings, index_tags: list[IndexTag]) -> TagVectorIndex[Any]:
    """Index built over the sample tags with no items."""
    idx: TagVectorIndex[Any] = TagVectorIndex(settings=override_settings)
    idx.build_index(index_tags)
    return idx


@pytest.fixture
def populated_index(index: TagVectorIndex[Any]) -> TagVectorIndex[Any]:
    """Sample index with item1 (red, large) and item2 (blue, large)."""
    index.add_item(
        {
            "id": "item1",
            "tags": [make_tag("color", "red", 1.0), make_tag("size", "large", 0.8)],
            "meta": {"shop": "north"},
        }
    )
    index.add_item(
        {
            "id": "item2",
            "tags": [make_tag("color", "blue", 1.0), make_tag("size", "large", 0.9)],
            "meta": {"shop": "south"},
        }
    )
    return index


@pytest.fixture
def dataset_file(tmp_path: Path) -> Path:
    """Write a small dataset file for CLI and bootstrap tests."""
    payload = {
        "weights": [{"category": "color", "weight": 2.0}],
        "items": [
            {
                "id": "shirt",
                "tags": [
                    {"category": "color", "value": "red", "confidence": 1.0},
                    {"category": "size", "value": "large", "confidence": 0.5},
                ],
                "meta": {"kind": "top"},
            },
            {
                "id": "scarf",
                "tags": [{"category": "color", "value": "red", "confidence": 0.6}],
                "meta": {"kind": "accessory"},
            },
            {
                "id": "jeans",
                "tags": [
                    {"category": "color", "value": "blue", "confidence": 1.0},
                    {"category": "size", "value": "large", "confidence": 1.0},
                ],
                "meta": {"kind": "bottom"},
            },
        ],
    }
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
