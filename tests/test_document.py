# tests/test_document.py
"""
Tests for document helpers: merging, dotted lookup, flattening, serialization.
"""

import json
from decimal import Decimal

import pytest

from proptree.document import deep_merge, dumps, flatten, get_by_dot, merge_in, to_serializable
from proptree.provenance import ProvenanceStore

# ---------------------------------------------------------------------------
# deep_merge / merge_in
# ---------------------------------------------------------------------------


class TestDeepMerge:

    def test_nested_merge(self):
        base = {"a": 1, "b": {"c": 2}}
        updates = {"b": {"d": 3}, "e": 4}
        assert deep_merge(base, updates) == {"a": 1, "b": {"c": 2, "d": 3}, "e": 4}

    def test_leaf_overwrite(self):
        assert deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_type_conflict_takes_update(self):
        assert deep_merge({"a": 1}, {"a": {"b": 2}}) == {"a": {"b": 2}}
        assert deep_merge({"a": {"b": 2}}, {"a": 1}) == {"a": 1}

    def test_list_overwrite(self):
        assert deep_merge({"items": [1, 2, 3]}, {"items": [4]}) == {"items": [4]}

    def test_does_not_mutate_inputs(self):
        base = {"a": {"b": 1}}
        updates = {"a": {"c": 2}}
        result = deep_merge(base, updates)
        result["a"]["c"] = 99
        assert base == {"a": {"b": 1}}
        assert updates == {"a": {"c": 2}}

    def test_merge_in_mutates_target(self):
        target = {"a": {"b": 1}}
        returned = merge_in(target, {"a": {"c": 2}})
        assert returned is target
        assert target == {"a": {"b": 1, "c": 2}}


class TestMergeProvenance:

    def test_records_leaves(self):
        store = ProvenanceStore()
        deep_merge({"a": 1, "b": {"c": 2}}, {"a": 10, "b": {"d": 3}}, _source="test", _provenance=store)
        assert store.get("a").value == 10
        assert store.get("a").source == "test"
        assert store.get("b.d").value == 3
        assert store.get("b") is None

    def test_records_leaves_of_new_subtree(self):
        store = ProvenanceStore()
        merge_in({}, {"x": {"y": {"z": 1}}}, _source="line:1", _provenance=store)
        assert list(store.all_entries()) == ["x.y.z"]

    def test_override_chain(self):
        store = ProvenanceStore()
        result = deep_merge({"x": 1}, {"x": 2}, _source="line:1", _provenance=store)
        deep_merge(result, {"x": 3}, _source="line:2", _provenance=store)
        assert [e.source for e in store.get_history("x")] == ["line:1", "line:2"]


# ---------------------------------------------------------------------------
# get_by_dot / flatten
# ---------------------------------------------------------------------------


class TestGetByDot:

    def test_nested(self):
        assert get_by_dot({"a": {"b": {"c": 5}}}, "a.b.c") == 5

    def test_subtree(self):
        assert get_by_dot({"a": {"b": 1}}, "a") == {"b": 1}

    def test_missing(self):
        with pytest.raises(KeyError, match="missing part: 'x'"):
            get_by_dot({"a": {"b": 1}}, "a.x")

    def test_through_scalar(self):
        with pytest.raises(TypeError):
            get_by_dot({"a": 1}, "a.b")


def test_flatten():
    doc = {"a": {"b": 1, "c": {"d": [1, 2]}}, "e": "x", "empty": {}}
    assert flatten(doc) == {"a.b": 1, "a.c.d": [1, 2], "e": "x", "empty": {}}


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def test_to_serializable():
    doc = {"d": Decimal("3.14"), "l": (1, Decimal("2.5")), "n": {"x": True}}
    assert to_serializable(doc) == {"d": Decimal("3.14"), "l": [1, Decimal("2.5")], "n": {"x": True}}


def test_to_serializable_huge_int_becomes_decimal():
    big = 10 ** 5000
    converted = to_serializable({"n": big, "small": 7, "flag": True})
    assert converted["n"] == Decimal(big)
    assert type(converted["small"]) is int
    assert converted["flag"] is True


def test_dumps_round_trips_through_json():
    doc = {"a": {"b": Decimal("1.5"), "c": [1, "x", False]}}
    assert json.loads(dumps(doc)) == {"a": {"b": 1.5, "c": [1, "x", False]}}


def test_dumps_keeps_decimal_digits():
    text = dumps({"d": Decimal("0.1000000000000000000001")}, indent=None)
    assert text == '{"d": 0.1000000000000000000001}'


def test_dumps_out_of_float_range_is_valid_json():
    def reject(constant):
        raise ValueError(f"non-standard JSON constant {constant}")

    text = dumps({"x": Decimal("1e400"), "y": Decimal("-1e400")}, indent=None)
    assert "Infinity" not in text
    assert text == '{"x": 1E+400, "y": -1E+400}'
    json.loads(text, parse_constant=reject)


def test_dumps_huge_int():
    value = (10 ** 5000 - 1) // 9
    assert dumps({"n": value}, indent=None) == '{"n": ' + "1" * 5000 + "}"


class TestMergeProvenanceReplacement:

    def test_scalar_over_subtree_drops_nested_keys(self):
        store = ProvenanceStore()
        doc = {}
        merge_in(doc, {"a": {"b": 1, "c": {"d": 2}}}, _source="line:1", _provenance=store)
        merge_in(doc, {"a": 2}, _source="line:2", _provenance=store)
        assert doc == {"a": 2}
        assert list(store.all_entries()) == ["a"]
        assert store.get_history("a.b") == []

    def test_subtree_over_scalar_drops_scalar(self):
        store = ProvenanceStore()
        doc = {}
        merge_in(doc, {"a": 1}, _source="line:1", _provenance=store)
        merge_in(doc, {"a": {"b": 2}}, _source="line:2", _provenance=store)
        assert store.get("a") is None
        assert store.get_history("a") == []
        assert store.get("a.b").source == "line:2"

    def test_sibling_prefix_untouched(self):
        store = ProvenanceStore()
        doc = {}
        merge_in(doc, {"a": {"b": 1}, "ab": 5}, _source="line:1", _provenance=store)
        merge_in(doc, {"a": 3}, _source="line:2", _provenance=store)
        assert set(store.all_entries()) == {"a", "ab"}
