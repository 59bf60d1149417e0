"""Object key addressing and structural paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class CodingKey:
    """A string key used to read or write one member of a keyed construct.

    Keys are discovered at runtime, so any string (including the empty string
    and reserved words) is a valid key. Objects are never addressed by
    position: :meth:`from_int` always returns ``None``.
    """

    string_value: str

    @classmethod
    def from_string(cls, value: str) -> CodingKey:
        """Build a key from an arbitrary string."""
        return cls(string_value=value)

    @classmethod
    def from_int(cls, value: int) -> Optional[CodingKey]:
        """Objects are string-keyed only; integer addressing is unsupported."""
        del value
        return None

    @property
    def int_value(self) -> Optional[int]:
        return None

    def __str__(self) -> str:
        return self.string_value


type PathElement = Union[CodingKey, int]
type CodingPath = tuple[PathElement, ...]


def format_path(path: CodingPath) -> str:
    """Render a structural path as ``$.key[index]`` text.

    Args:
        path (CodingPath): Keys and array indices from the root to a node.

    Returns:
        str: ``$`` for the root, otherwise a dotted/bracketed chain. Keys that
        are not plain identifiers are rendered as quoted JSON strings.
    """
    parts = ["$"]
    for element in path:
        if isinstance(element, CodingKey):
            key = element.string_value
            if key.isidentifier():
                parts.append(f".{key}")
            else:
                parts.append(f"[{_quote(key)}]")
        else:
            parts.append(f"[{element}]")
    return "".join(parts)


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
