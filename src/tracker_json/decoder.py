"""Decode JSON input into value trees.

Scalars are probed in a fixed order: boolean, 64-bit integer, double,
string, null. The first probe that accepts the input wins, so ``true`` never
becomes ``1`` and an integral literal never widens to a double. Anything that
is not a scalar must be an array or an object.

A JSON number decodes as ``Int`` only when its literal text has no ``.``,
``e`` or ``E`` and its value fits in 64 bits; every other finite number
decodes as ``Double``.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from .coding_key import CodingKey, CodingPath
from .config import DEFAULT_OPTIONS, CodecOptions, DuplicateKeyPolicy
from .errors import DecodeDepthExceededError, UnrecognizedShapeError
from .locate import find_depth_violation, path_at_offset
from .value import Array, Bool, Double, Int, Null, Object, Scalar, String, Value, fits_int64

logger = logging.getLogger(__name__)

# Sign plus the 19 digits of 2**63.
_MAX_INT64_LITERAL_LENGTH = 20


@dataclass(frozen=True)
class _NumberLiteral:
    text: str
    integral: bool


@dataclass(frozen=True)
class _Unrepresentable:
    token: str


@dataclass(frozen=True)
class _Members:
    pairs: list[tuple[str, Any]]


def decode(data: Union[bytes, str], *, options: Optional[CodecOptions] = None) -> Value:
    """Decode a JSON document into a value tree.

    Args:
        data (Union[bytes, str]): UTF-8 bytes or text holding one JSON document.
            A bare top-level scalar such as ``42`` is valid.
        options (Optional[CodecOptions]): Depth limit and duplicate-key policy.

    Returns:
        Value: The decoded tree.

    Raises:
        UnrecognizedShapeError: The input is not valid JSON, or holds a number
            that cannot be represented as a finite double.
        DecodeDepthExceededError: Containers nest deeper than ``max_depth``.
    """
    resolved = options if options is not None else DEFAULT_OPTIONS
    text = _as_text(data)
    try:
        parsed = json.loads(
            text,
            parse_int=_integral_literal,
            parse_float=_fractional_literal,
            parse_constant=_constant_literal,
            object_pairs_hook=_Members,
        )
    except json.JSONDecodeError as exc:
        raise UnrecognizedShapeError(
            f"Malformed JSON: {exc.msg} (line {exc.lineno} column {exc.colno})",
            path=path_at_offset(text, exc.pos),
        ) from exc
    except RecursionError as exc:
        path = find_depth_violation(text, resolved.max_depth)
        if path is None:
            raise DecodeDepthExceededError(
                max_depth=resolved.max_depth, stack_limited=True
            ) from exc
        raise DecodeDepthExceededError(max_depth=resolved.max_depth, path=path) from exc
    return _TreeDecoder(resolved).decode_root(parsed)


def decode_obj(obj: Any, *, options: Optional[CodecOptions] = None) -> Value:
    """Decode an already-parsed JSON-like structure into a value tree.

    Args:
        obj (Any): Output of a JSON or YAML reader: dicts with string keys,
            lists, tuples, strings, numbers, booleans and ``None``.
        options (Optional[CodecOptions]): Depth limit and duplicate-key policy.

    Returns:
        Value: The decoded tree.
    """
    resolved = options if options is not None else DEFAULT_OPTIONS
    return _TreeDecoder(resolved).decode_root(obj)


class _TreeDecoder:
    def __init__(self, options: CodecOptions) -> None:
        self._options = options

    def decode_root(self, node: Any) -> Value:
        try:
            return self.decode(node, path=(), depth=0)
        except RecursionError as exc:
            raise DecodeDepthExceededError(
                max_depth=self._options.max_depth, stack_limited=True
            ) from exc

    def decode(self, node: Any, *, path: CodingPath, depth: int) -> Value:
        for probe in _SCALAR_PROBES:
            scalar = probe(node)
            if scalar is not None:
                return scalar

        if isinstance(node, (list, tuple)):
            self._check_depth(path=path, depth=depth + 1)
            return self._decode_array(node, path=path, depth=depth + 1)
        if isinstance(node, (_Members, Mapping)):
            self._check_depth(path=path, depth=depth + 1)
            return self._decode_object(node, path=path, depth=depth + 1)
        raise UnrecognizedShapeError(f"Cannot decode {_describe(node)}", path=path)

    def _check_depth(self, *, path: CodingPath, depth: int) -> None:
        if depth > self._options.max_depth:
            raise DecodeDepthExceededError(max_depth=self._options.max_depth, path=path)

    def _decode_array(
        self, node: Union[list[Any], tuple[Any, ...]], *, path: CodingPath, depth: int
    ) -> Array:
        items: list[Value] = []
        for index, element in enumerate(node):
            items.append(self.decode(element, path=(*path, index), depth=depth))
        return Array(items=tuple(items))

    def _decode_object(
        self, node: Union[_Members, Mapping[Any, Any]], *, path: CodingPath, depth: int
    ) -> Object:
        pairs = node.pairs if isinstance(node, _Members) else list(node.items())
        members: dict[str, Value] = {}
        duplicates: list[str] = []
        for key, element in pairs:
            if not isinstance(key, str):
                raise UnrecognizedShapeError(
                    f"Object key {key!r} of type {type(key).__name__} is not a string",
                    path=path,
                )
            value = self.decode(element, path=(*path, CodingKey.from_string(key)), depth=depth)
            if key in members:
                duplicates.append(key)
                if self._options.duplicate_keys is DuplicateKeyPolicy.KEEP_FIRST:
                    continue
            members[key] = value
        if duplicates:
            logger.debug(
                "Collapsed duplicate keys %s (%s)",
                duplicates,
                self._options.duplicate_keys.value,
            )
        return Object(pairs=tuple(members.items()))


def _probe_bool(node: Any) -> Optional[Scalar]:
    if isinstance(node, bool):
        return Bool(node)
    return None


def _probe_int(node: Any) -> Optional[Scalar]:
    if isinstance(node, _NumberLiteral):
        if not node.integral or len(node.text) > _MAX_INT64_LITERAL_LENGTH:
            return None
        number = int(node.text)
        return Int(number) if fits_int64(number) else None
    if isinstance(node, int) and not isinstance(node, bool) and fits_int64(node):
        return Int(node)
    return None


def _probe_double(node: Any) -> Optional[Scalar]:
    if isinstance(node, _NumberLiteral):
        number = float(node.text)
    elif isinstance(node, (int, float)) and not isinstance(node, bool):
        try:
            number = float(node)
        except OverflowError:
            return None
    else:
        return None
    return Double(number) if math.isfinite(number) else None


def _probe_string(node: Any) -> Optional[Scalar]:
    if isinstance(node, str):
        return String(node)
    return None


def _probe_null(node: Any) -> Optional[Scalar]:
    if node is None:
        return Null()
    return None


_SCALAR_PROBES: tuple[Callable[[Any], Optional[Scalar]], ...] = (
    _probe_bool,
    _probe_int,
    _probe_double,
    _probe_string,
    _probe_null,
)


def _integral_literal(text: str) -> _NumberLiteral:
    return _NumberLiteral(text=text, integral=True)


def _fractional_literal(text: str) -> _NumberLiteral:
    return _NumberLiteral(text=text, integral=False)


def _constant_literal(text: str) -> _Unrepresentable:
    # NaN and Infinity are not JSON; the token fails every probe.
    return _Unrepresentable(token=text)


def _describe(node: Any) -> str:
    if isinstance(node, _NumberLiteral):
        return f"number {node.text} (not a finite double)"
    if isinstance(node, _Unrepresentable):
        return f"non-standard token {node.token}"
    return f"value of type {type(node).__name__}"


def _as_text(data: Union[bytes, str]) -> str:
    if isinstance(data, str):
        return data
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UnrecognizedShapeError(f"Input is not valid UTF-8: {exc.reason}") from exc
