"""Unit tests for the closed value type."""

from __future__ import annotations

import pytest

from tracker_json.coding_key import CodingKey
from tracker_json.value import (
    INT64_MAX,
    INT64_MIN,
    Array,
    Bool,
    Double,
    Int,
    Null,
    Object,
    String,
    is_value,
    kind_name,
    walk,
)


def test_variants_with_equal_payloads_are_distinct() -> None:
    """Equality compares the variant, not just the Python payload."""
    assert Bool(True) != Int(1)
    assert Int(7) != Double(7.0)
    assert String("1") != Int(1)
    assert Null() == Null()
    assert Array() != Object()


def test_int_rejects_bool_and_out_of_range_values() -> None:
    """Int holds exactly the signed 64-bit range and never a bool."""
    assert Int(INT64_MAX).value == INT64_MAX
    assert Int(INT64_MIN).value == INT64_MIN
    with pytest.raises(ValueError):
        Int(INT64_MAX + 1)
    with pytest.raises(TypeError):
        Int(True)


def test_double_widens_ints_and_rejects_non_finite_values() -> None:
    """Double stores finite floats only."""
    widened = Double(3)
    assert isinstance(widened.value, float)
    assert widened == Double(3.0)
    with pytest.raises(ValueError):
        Double(float("nan"))
    with pytest.raises(ValueError):
        Double(float("inf"))


def test_object_rejects_duplicate_keys() -> None:
    """Keys are unique within one object."""
    with pytest.raises(ValueError, match="Duplicate object key"):
        Object(pairs=(("a", Int(1)), ("a", Int(2))))


def test_object_accessors_follow_insertion_order() -> None:
    """Object helpers expose members in stored order."""
    value = Object.from_mapping({"b": Int(1), "a": Int(2), "class": Null()})
    assert value.keys() == ["b", "a", "class"]
    assert value.get("a") == Int(2)
    assert value.get("missing") is None
    assert "class" in value
    assert len(value) == 3


def test_array_normalizes_lists_to_tuples_and_is_hashable() -> None:
    """Arrays are immutable and usable as set members."""
    value = Array(items=[Int(1), String("a")])  # type: ignore[arg-type]
    assert value.items == (Int(1), String("a"))
    assert value[1] == String("a")
    assert len({value, Array(items=(Int(1), String("a")))}) == 1


def test_walk_yields_nodes_in_document_order() -> None:
    """walk visits every node depth-first with its path."""
    tree = Object(pairs=(("a", Array(items=(Int(1), Null()))), ("b", Bool(False))))
    visited = [(path, kind_name(node)) for path, node in walk(tree)]
    assert visited == [
        ((), "Object"),
        ((CodingKey("a"),), "Array"),
        ((CodingKey("a"), 0), "Int"),
        ((CodingKey("a"), 1), "Null"),
        ((CodingKey("b"),), "Bool"),
    ]


def test_is_value_accepts_only_variants() -> None:
    """Raw Python data is not a value."""
    assert is_value(Null())
    assert not is_value(None)
    assert not is_value({"a": 1})
