"""Closed value type for JSON payloads.

A :data:`Value` is exactly one of ``Null``, ``Bool``, ``Int``, ``Double``,
``String``, ``Array`` or ``Object``. Trees are immutable once constructed;
equality compares variant and recursive content, so ``Bool(True)`` never
equals ``Int(1)`` and ``Int(7)`` never equals ``Double(7.0)``.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from .coding_key import CodingKey, CodingPath

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Null:
    """JSON ``null``."""


@dataclass(frozen=True)
class Bool:
    """JSON ``true``/``false``."""

    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"Bool requires a bool, got {type(self.value).__name__}")


@dataclass(frozen=True)
class Int:
    """A signed 64-bit integer."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Int requires an int, got {type(self.value).__name__}")
        if not fits_int64(self.value):
            raise ValueError(f"Int value {self.value} does not fit in 64 bits")


@dataclass(frozen=True)
class Double:
    """A finite double-precision float."""

    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Double requires a float, got {type(self.value).__name__}")
        widened = float(self.value)
        if not math.isfinite(widened):
            raise ValueError(f"Double value {widened!r} is not representable in JSON")
        object.__setattr__(self, "value", widened)


@dataclass(frozen=True)
class String:
    """A UTF-8 text value."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"String requires a str, got {type(self.value).__name__}")


@dataclass(frozen=True)
class Array:
    """An ordered sequence of values."""

    items: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]


@dataclass(frozen=True)
class Object:
    """String-keyed members in insertion order. Keys are unique."""

    pairs: tuple[tuple[str, Value], ...] = ()

    def __post_init__(self) -> None:
        pairs = tuple((key, value) for key, value in self.pairs)
        seen: set[str] = set()
        for key, _ in pairs:
            if not isinstance(key, str):
                raise TypeError(f"Object keys must be str, got {type(key).__name__}")
            if key in seen:
                raise ValueError(f"Duplicate object key {key!r}")
            seen.add(key)
        object.__setattr__(self, "pairs", pairs)

    @classmethod
    def from_mapping(cls, members: Mapping[str, Value]) -> Object:
        """Build an object from a mapping, keeping its iteration order."""
        return cls(pairs=tuple(members.items()))

    def get(self, key: str) -> Optional[Value]:
        for member_key, value in self.pairs:
            if member_key == key:
                return value
        return None

    def keys(self) -> list[str]:
        return [key for key, _ in self.pairs]

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[tuple[str, Value]]:
        return iter(self.pairs)

    def __contains__(self, key: object) -> bool:
        return any(member_key == key for member_key, _ in self.pairs)


type Scalar = Union[Null, Bool, Int, Double, String]
type Value = Union[Null, Bool, Int, Double, String, Array, Object]

VALUE_TYPES: tuple[type, ...] = (Null, Bool, Int, Double, String, Array, Object)


def is_value(candidate: Any) -> bool:
    """Return whether ``candidate`` is one of the closed value variants."""
    return isinstance(candidate, VALUE_TYPES)


def fits_int64(number: int) -> bool:
    """Return whether an integer fits in a signed 64-bit range."""
    return INT64_MIN <= number <= INT64_MAX


def kind_name(value: Value) -> str:
    """Return the variant name of a value, e.g. ``"Int"``."""
    return type(value).__name__


def walk(value: Value, path: CodingPath = ()) -> Iterator[tuple[CodingPath, Value]]:
    """Yield ``(path, node)`` for every node in depth-first document order."""
    yield path, value
    if isinstance(value, Array):
        for index, item in enumerate(value.items):
            yield from walk(item, (*path, index))
    elif isinstance(value, Object):
        for key, item in value.pairs:
            yield from walk(item, (*path, CodingKey.from_string(key)))
