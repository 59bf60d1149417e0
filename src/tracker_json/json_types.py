"""Typing aliases for native JSON trees on either side of the codec."""

from __future__ import annotations

from typing import Union

type JSONScalar = Union[str, int, float, bool, None]
type NativeJSON = Union[JSONScalar, list[NativeJSON], dict[str, NativeJSON]]
