"""Unit tests for encoding value trees and caller payloads."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tracker_json.coding_key import CodingKey
from tracker_json.config import CodecOptions
from tracker_json.decoder import decode
from tracker_json.encoder import encode, encode_text, to_value
from tracker_json.errors import EncodeDepthExceededError, UnsupportedValueError
from tracker_json.value import Array, Bool, Double, Int, Null, Object, String


def test_button_click_payload_keeps_member_order() -> None:
    """Encoding an object keeps its insertion order and decodes back equal."""
    payload = Object(
        pairs=(
            ("button_id", String("checkout")),
            ("button_text", String("Buy Now")),
            ("screen_name", String("cart")),
        )
    )
    encoded = encode(payload)
    assert encoded == b'{"button_id":"checkout","button_text":"Buy Now","screen_name":"cart"}'
    assert decode(encoded) == payload


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Null(), "null"),
        (Bool(True), "true"),
        (Int(7), "7"),
        (Double(7.0), "7.0"),
        (Double(1e16), "1e+16"),
        (String('a"b\n'), '"a\\"b\\n"'),
        (Array(), "[]"),
        (Object(), "{}"),
    ],
)
def test_variant_dispatch(value: object, expected: str) -> None:
    """Each variant maps to its JSON literal."""
    assert encode_text(value) == expected


def test_type_fidelity_survives_round_trip() -> None:
    """Int stays Int and Bool stays Bool through encode and decode."""
    assert decode(encode(Int(7))) == Int(7)
    assert decode(encode(Double(7.0))) == Double(7.0)
    assert decode(encode(Bool(True))) == Bool(True)


def test_object_order_is_not_sorted() -> None:
    """Members are written in stored order, not alphabetically."""
    value = Object(pairs=(("b", Int(1)), ("a", Int(2))))
    assert encode(value) == b'{"b":1,"a":2}'
    assert decode(encode(value)) == value


def test_non_ascii_text_is_kept_unless_escaping_is_requested() -> None:
    """Output is UTF-8 by default and ASCII-escaped on request."""
    assert encode(String("café")) == '"café"'.encode("utf-8")
    assert encode(String("café"), options=CodecOptions(ensure_ascii=True)) == b'"caf\\u00e9"'


def test_lone_surrogates_are_escaped_and_round_trip() -> None:
    """Decoded surrogate escapes in values and keys encode back as escapes."""
    value = decode(b'"\\ud800"')
    assert value == String("\ud800")
    assert encode(value) == b'"\\ud800"'
    assert decode(encode(value)) == value

    keyed = decode(b'{"\\udc00": 1, "ok": "x\\udfffy"}')
    assert encode(keyed) == b'{"\\udc00":1,"ok":"x\\udfffy"}'
    assert decode(encode(keyed)) == keyed


def test_raw_payload_is_projected_in_probing_order() -> None:
    """Caller mappings become value trees without losing types."""
    value = to_value({"ok": True, "n": 1, "x": 1.5, "s": "t", "none": None, "list": [1, (2,)]})
    assert value == Object(
        pairs=(
            ("ok", Bool(True)),
            ("n", Int(1)),
            ("x", Double(1.5)),
            ("s", String("t")),
            ("none", Null()),
            ("list", Array(items=(Int(1), Array(items=(Int(2),))))),
        )
    )
    assert encode({"ok": True, "n": 1}) == b'{"ok":true,"n":1}'


def test_raw_payload_may_embed_values() -> None:
    """Value nodes inside a raw payload are kept as they are."""
    assert to_value({"a": Double(2.0)}) == Object(pairs=(("a", Double(2.0)),))


@pytest.mark.parametrize(
    ("payload", "kind", "path"),
    [
        ({"when": datetime(2024, 1, 1, tzinfo=timezone.utc)}, "datetime", (CodingKey("when"),)),
        ({"blob": b"\x00\x01"}, "bytes", (CodingKey("blob"),)),
        ({"items": [1, {2, 3}]}, "set", (CodingKey("items"), 1)),
        ({"ratio": float("nan")}, "float", (CodingKey("ratio"),)),
        ({"big": 2**64}, "int", (CodingKey("big"),)),
        ({1: "numeric key"}, "int", ()),
        (object(), "object", ()),
    ],
)
def test_unsupported_values_are_rejected(
    payload: object, kind: str, path: tuple[object, ...]
) -> None:
    """Values outside the closed set fail with their kind and path."""
    with pytest.raises(UnsupportedValueError) as excinfo:
        encode(payload)
    assert excinfo.value.kind == kind
    assert excinfo.value.path == path


def test_foreign_node_inside_value_tree_is_rejected() -> None:
    """A Value tree holding a raw element is not encodable."""
    tree = Object(pairs=(("a", Array(items=(Int(1), 2))),))  # type: ignore[arg-type]
    with pytest.raises(UnsupportedValueError) as excinfo:
        encode(tree)
    assert excinfo.value.kind == "int"
    assert excinfo.value.path == (CodingKey("a"), 1)


def test_depth_limit_applies_to_values_and_raw_payloads() -> None:
    """Encoding fails once nesting exceeds max_depth."""
    options = CodecOptions(max_depth=2)
    assert encode([[1]], options=options) == b"[[1]]"
    with pytest.raises(EncodeDepthExceededError) as excinfo:
        encode([[[1]]], options=options)
    assert excinfo.value.path == (0, 0)

    nested = Array(items=(Array(items=(Array(items=(Int(1),)),)),))
    with pytest.raises(EncodeDepthExceededError):
        encode(nested, options=options)


def test_interpreter_recursion_limit_is_reported_as_such() -> None:
    """Payloads deeper than the stack allows fail cleanly below max_depth."""
    payload: list[object] = []
    for _ in range(100_000):
        payload = [payload]
    with pytest.raises(EncodeDepthExceededError) as excinfo:
        encode(payload, options=CodecOptions(max_depth=1_000_000))
    assert excinfo.value.stack_limited
    assert "recursion limit" in str(excinfo.value)
