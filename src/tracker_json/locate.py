"""Locate structural paths inside raw JSON text.

The stdlib parser reports failures as character offsets. These helpers walk
the text up to an offset, tracking open containers, to recover the chain of
keys and indices that leads to it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from .coding_key import CodingKey, CodingPath, PathElement

_WHITESPACE = frozenset(" \t\r\n")


@dataclass
class _Frame:
    is_object: bool
    index: int = 0
    key: Optional[str] = None
    expecting_key: bool = True


def path_at_offset(text: str, offset: int) -> CodingPath:
    """Return the structural path of the node enclosing ``offset``.

    Args:
        text (str): JSON document text, possibly malformed or truncated.
        offset (int): Character offset, typically ``JSONDecodeError.pos``.

    Returns:
        CodingPath: Keys and indices of the open containers at ``offset``.
    """
    frames, _ = _walk(text, stop=offset, max_depth=None)
    return _frames_to_path(frames)


def find_depth_violation(text: str, max_depth: int) -> Optional[CodingPath]:
    """Return the path of the first container nested deeper than ``max_depth``."""
    frames, exceeded = _walk(text, stop=len(text), max_depth=max_depth)
    if not exceeded:
        return None
    return _frames_to_path(frames)


def _walk(
    text: str, *, stop: int, max_depth: Optional[int]
) -> tuple[list[_Frame], bool]:
    frames: list[_Frame] = []
    end = min(stop, len(text))
    position = 0
    while position < end:
        char = text[position]
        if char in _WHITESPACE:
            position += 1
            continue
        if char == '"':
            closing = _string_end(text, position)
            if closing is None or closing >= end:
                break
            if frames and frames[-1].is_object and frames[-1].expecting_key:
                frames[-1].key = _string_literal(text[position : closing + 1])
            position = closing + 1
            continue
        if char in "[{":
            if max_depth is not None and len(frames) >= max_depth:
                return frames, True
            frames.append(_Frame(is_object=char == "{"))
        elif char in "]}":
            if frames:
                frames.pop()
        elif char == "," and frames:
            top = frames[-1]
            if top.is_object:
                top.expecting_key = True
                top.key = None
            else:
                top.index += 1
        elif char == ":" and frames:
            frames[-1].expecting_key = False
        position += 1
    return frames, False


def _string_end(text: str, start: int) -> Optional[int]:
    position = start + 1
    while position < len(text):
        char = text[position]
        if char == "\\":
            position += 2
            continue
        if char == '"':
            return position
        position += 1
    return None


def _string_literal(literal: str) -> str:
    try:
        decoded = json.loads(literal)
    except ValueError:
        return literal[1:-1]
    return decoded if isinstance(decoded, str) else literal[1:-1]


def _frames_to_path(frames: list[_Frame]) -> CodingPath:
    path: list[PathElement] = []
    for frame in frames:
        if not frame.is_object:
            path.append(frame.index)
        elif frame.key is not None:
            path.append(CodingKey.from_string(frame.key))
    return tuple(path)
