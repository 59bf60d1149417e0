"""Unit tests for object keys and structural paths."""

from __future__ import annotations

from tracker_json.coding_key import CodingKey, format_path


def test_any_string_is_a_valid_key() -> None:
    """Reserved words, empty strings and punctuation are all keys."""
    for text in ("class", "", "a.b", "with space", "ключ"):
        key = CodingKey.from_string(text)
        assert key.string_value == text
        assert str(key) == text


def test_integer_addressing_is_unsupported() -> None:
    """Objects are never addressed by position."""
    assert CodingKey.from_int(0) is None
    assert CodingKey.from_int(42) is None
    assert CodingKey.from_string("0").int_value is None


def test_format_path_renders_keys_and_indices() -> None:
    """Identifier keys use dots; other keys are quoted."""
    assert format_path(()) == "$"
    path = (CodingKey("events"), 0, CodingKey("screen name"), CodingKey('say "hi"'))
    assert format_path(path) == '$.events[0]["screen name"]["say \\"hi\\""]'
