"""Tests for deterministic hashing helpers."""

import itertools

from tagvec.index import Tag
from tagvec.utils.deterministic import compute_query_hash


def _tags() -> list[Tag]:
    return [
        Tag(category="size", value="large", confidence=0.8),
        Tag(category="color", value="red", confidence=1.0),
        Tag(category="color", value="blue", confidence=0.3),
    ]


class TestQueryHash:
    def test_hash_is_order_independent(self) -> None:
        hashes = {compute_query_hash(list(p)) for p in itertools.permutations(_tags())}
        assert len(hashes) == 1

    def test_hash_is_confidence_sensitive(self) -> None:
        changed = _tags()
        changed[0] = Tag(category="size", value="large", confidence=0.81)

        assert compute_query_hash(changed) != compute_query_hash(_tags())

    def test_models_and_mappings_hash_alike(self) -> None:
        mappings = [tag.model_dump() for tag in _tags()]
        assert compute_query_hash(mappings) == compute_query_hash(_tags())

    def test_empty_tag_list_has_stable_hash(self) -> None:
        assert compute_query_hash([]) == compute_query_hash(iter([]))

    def test_category_value_boundary_is_unambiguous(self) -> None:
        a = [Tag(category="ab", value="c", confidence=1.0)]
        b = [Tag(category="a", value="bc", confidence=1.0)]
        assert compute_query_hash(a) != compute_query_hash(b)
