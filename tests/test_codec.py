"""Tests for index import/export."""

from typing import Any

import pytest

from tagvec.index import ExportedData, SnapshotValidationError, TagVectorIndex

from factories import make_tag


class TestExport:
    def test_export_without_items_omits_item_vectors(
        self, populated_index: TagVectorIndex[Any]
    ) -> None:
        exported = populated_index.export_index(include_items=False)
        payload = exported.to_payload()

        assert exported.item_vectors is None
        assert "itemVectors" not in payload
        assert payload["categoryMap"] == {"color": {"red": 0, "blue": 1}, "size": {"large": 2}}
        assert payload["vectorSize"] == 3

    def test_export_with_items_has_one_entry_per_item(
        self, populated_index: TagVectorIndex[Any]
    ) -> None:
        payload = populated_index.export_index(include_items=True).to_payload()

        assert set(payload["itemVectors"]) == {"item1", "item2"}
        assert payload["itemVectors"]["item1"] == [[0, 1.0], [2, 0.8]]

    def test_export_includes_weights(self, populated_index: TagVectorIndex[Any]) -> None:
        populated_index.set_category_weight("color", 2.0)
        payload = populated_index.export_index(include_items=False).to_payload()

        assert payload["categoryWeights"] == [{"category": "color", "weight": 2.0}]

    def test_empty_store_exports_empty_mapping(self, index: TagVectorIndex[Any]) -> None:
        assert index.export_index().to_payload()["itemVectors"] == {}

    def test_export_after_shrinking_rebuild_keeps_stale_dimensions(
        self, populated_index: TagVectorIndex[Any]
    ) -> None:
        populated_index.build_index([{"category": "shape", "value": "round"}])

        payload = populated_index.export_index(include_items=True).to_payload()

        assert payload["vectorSize"] == 1
        assert payload["itemVectors"]["item1"] == [[0, 1.0], [2, 0.8]]


class TestImport:
    def test_round_trip_reproduces_query_results(
        self, populated_index: TagVectorIndex[Any], override_settings
    ) -> None:
        populated_index.set_category_weight("size", 0.5)
        payload = populated_index.export_index(include_items=True).to_payload()

        restored: TagVectorIndex[Any] = TagVectorIndex(settings=override_settings)
        restored.import_index(payload)

        for query in (
            [make_tag("color", "red", 1.0)],
            [make_tag("size", "large", 1.0), make_tag("color", "blue", 0.3)],
        ):
            assert restored.query(query) == populated_index.query(query)
        assert restored.get_category_weight("size") == 0.5

    def test_round_trip_after_shrinking_rebuild(
        self, populated_index: TagVectorIndex[Any], override_settings
    ) -> None:
        populated_index.build_index([{"category": "shape", "value": "round"}])
        payload = populated_index.export_index(include_items=True).to_payload()

        restored: TagVectorIndex[Any] = TagVectorIndex(settings=override_settings)
        restored.import_index(payload)

        query = [make_tag("shape", "round", 1.0)]
        expected = populated_index.query(query)

        assert [r.id for r in expected] == ["item1"]
        assert restored.query(query) == expected
        assert restored.get_item_vector("item2") == {1: 1.0, 2: 0.9}

    def test_import_without_item_vectors_empties_store(
        self, populated_index: TagVectorIndex[Any]
    ) -> None:
        payload = populated_index.export_index(include_items=False).to_payload()
        populated_index.import_index(payload)

        assert populated_index.get_stats().total_items == 0
        assert populated_index.get_stats().total_tags == 3

    def test_import_accepts_model_instance(self, index: TagVectorIndex[Any]) -> None:
        index.import_index(
            ExportedData(
                category_map={"shape": {"round": 0}},
                vector_size=1,
                item_vectors={"ball": [(0, 1.0)]},
            )
        )

        assert index.query_first([make_tag("shape", "round", 1.0)]).id == "ball"

    def test_imported_items_have_no_meta(self, populated_index: TagVectorIndex[Any]) -> None:
        populated_index.import_index(populated_index.export_index())

        assert populated_index.get_stats(lambda meta: meta is None).total_items == 2

    @pytest.mark.parametrize(
        "payload",
        [
            {"vectorSize": 1},
            {"categoryMap": {"color": {"red": 0}}},
            {"categoryMap": {"color": {"red": 3}}, "vectorSize": 1},
            {"categoryMap": {"color": {"red": 0, "blue": 0}}, "vectorSize": 2},
            {
                "categoryMap": {"color": {"red": 0}},
                "vectorSize": 1,
                "itemVectors": {"x": [[-1, 1.0]]},
            },
            {"categoryMap": "nope", "vectorSize": 1},
        ],
    )
    def test_malformed_payload_is_rejected_without_changes(
        self, populated_index: TagVectorIndex[Any], payload: dict[str, Any]
    ) -> None:
        before = populated_index.export_index().to_payload()

        with pytest.raises(SnapshotValidationError):
            populated_index.import_index(payload)

        assert populated_index.export_index().to_payload() == before
