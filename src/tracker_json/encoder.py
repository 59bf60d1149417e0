"""Encode value trees and caller payloads as canonical JSON.

Output is compact, keeps object members in their stored order and keeps
doubles distinguishable from integers (``7.0`` versus ``7``), so decoding the
result yields an equal tree. Values outside the closed variant set are
rejected before any output is produced.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable, Mapping
from typing import Any, Optional

from .coding_key import CodingKey, CodingPath
from .config import DEFAULT_OPTIONS, CodecOptions
from .errors import EncodeDepthExceededError, UnsupportedValueError
from .json_types import NativeJSON
from .value import (
    Array,
    Bool,
    Double,
    Int,
    Null,
    Object,
    String,
    Value,
    fits_int64,
    is_value,
)

# Lone surrogates decode from valid \uXXXX escapes but have no UTF-8 form.
_SURROGATE = re.compile(r"[\ud800-\udfff]")


def to_value(raw: Any, *, options: Optional[CodecOptions] = None) -> Value:
    """Project a caller payload onto the closed value type.

    Args:
        raw (Any): A payload built from ``bool``, ``int``, ``float``, ``str``,
            ``None``, lists, tuples and string-keyed mappings. ``Value`` nodes
            may appear anywhere and are kept as they are.
        options (Optional[CodecOptions]): Depth limit.

    Returns:
        Value: The equivalent value tree.

    Raises:
        UnsupportedValueError: Some node has no JSON representation.
        EncodeDepthExceededError: Containers nest deeper than ``max_depth``.
    """
    encoder = _TreeEncoder(options if options is not None else DEFAULT_OPTIONS)
    return encoder.run(encoder.project, raw)


def encode(payload: Any, *, options: Optional[CodecOptions] = None) -> bytes:
    """Encode a value tree or caller payload as UTF-8 JSON bytes."""
    return encode_text(payload, options=options).encode("utf-8")


def encode_text(payload: Any, *, options: Optional[CodecOptions] = None) -> str:
    """Encode a value tree or caller payload as JSON text.

    Args:
        payload (Any): A ``Value`` tree, or a raw payload accepted by
            :func:`to_value`.
        options (Optional[CodecOptions]): Depth limit and ASCII escaping.

    Returns:
        str: Compact JSON text. Lone surrogates are written as ``\\uXXXX``
        escapes so the text always has a UTF-8 form.
    """
    resolved = options if options is not None else DEFAULT_OPTIONS
    encoder = _TreeEncoder(resolved)
    value = payload if is_value(payload) else encoder.run(encoder.project, payload)
    native = encoder.run(encoder.native, value)
    text = json.dumps(
        native,
        ensure_ascii=resolved.ensure_ascii,
        allow_nan=False,
        separators=(",", ":"),
    )
    return _SURROGATE.sub(_escape_code_point, text)


def _escape_code_point(match: re.Match[str]) -> str:
    return f"\\u{ord(match.group()):04x}"


class _TreeEncoder:
    def __init__(self, options: CodecOptions) -> None:
        self._options = options

    def run(self, step: Callable[..., Any], node: Any) -> Any:
        try:
            return step(node, path=(), depth=0)
        except RecursionError as exc:
            raise EncodeDepthExceededError(
                max_depth=self._options.max_depth, stack_limited=True
            ) from exc

    def native(self, node: Any, *, path: CodingPath, depth: int) -> NativeJSON:
        if isinstance(node, Null):
            return None
        if isinstance(node, (Bool, Int, Double, String)):
            return node.value
        if isinstance(node, Array):
            self._check_depth(path=path, depth=depth + 1)
            return [
                self.native(item, path=(*path, index), depth=depth + 1)
                for index, item in enumerate(node.items)
            ]
        if isinstance(node, Object):
            self._check_depth(path=path, depth=depth + 1)
            return {
                key: self.native(item, path=(*path, CodingKey.from_string(key)), depth=depth + 1)
                for key, item in node.pairs
            }
        raise UnsupportedValueError(
            kind=type(node).__name__,
            path=path,
            reason="not a JSON value variant",
        )

    def project(self, node: Any, *, path: CodingPath, depth: int) -> Value:
        if is_value(node):
            return node
        if isinstance(node, bool):
            return Bool(node)
        if isinstance(node, int):
            if not fits_int64(node):
                raise UnsupportedValueError(
                    kind="int", path=path, reason="outside the signed 64-bit range"
                )
            return Int(int(node))
        if isinstance(node, float):
            if not math.isfinite(node):
                raise UnsupportedValueError(kind="float", path=path, reason="not finite")
            return Double(node)
        if isinstance(node, str):
            return String(str.__str__(node))
        if node is None:
            return Null()
        if isinstance(node, (list, tuple)):
            self._check_depth(path=path, depth=depth + 1)
            items: list[Value] = []
            for index, item in enumerate(node):
                items.append(self.project(item, path=(*path, index), depth=depth + 1))
            return Array(items=tuple(items))
        if isinstance(node, Mapping):
            self._check_depth(path=path, depth=depth + 1)
            return self._project_mapping(node, path=path, depth=depth + 1)
        raise UnsupportedValueError(kind=type(node).__name__, path=path)

    def _project_mapping(
        self, node: Mapping[Any, Any], *, path: CodingPath, depth: int
    ) -> Object:
        pairs: list[tuple[str, Value]] = []
        for key, item in node.items():
            if not isinstance(key, str):
                raise UnsupportedValueError(
                    kind=type(key).__name__,
                    path=path,
                    reason="object keys must be strings",
                )
            member_path = (*path, CodingKey.from_string(key))
            pairs.append((key, self.project(item, path=member_path, depth=depth)))
        return Object(pairs=tuple(pairs))

    def _check_depth(self, *, path: CodingPath, depth: int) -> None:
        if depth > self._options.max_depth:
            raise EncodeDepthExceededError(max_depth=self._options.max_depth, path=path)
