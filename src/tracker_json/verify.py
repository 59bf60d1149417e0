"""Round-trip verification of encoded payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from .coding_key import CodingKey, CodingPath, format_path
from .config import CodecOptions
from .decoder import decode
from .encoder import encode
from .value import Array, Object, Value, is_value, kind_name


@dataclass(frozen=True)
class Mismatch:
    """First difference between two value trees."""

    path: CodingPath
    expected: Any
    actual: Any


@dataclass(frozen=True)
class RoundTripReport:
    """Result of a decode, encode, decode cycle."""

    encoded: bytes
    mismatch: Optional[Mismatch]

    @property
    def ok(self) -> bool:
        return self.mismatch is None


def verify_round_trip(
    data: Union[bytes, str, Value], *, options: Optional[CodecOptions] = None
) -> RoundTripReport:
    """Check that re-encoding a payload yields an equal tree.

    Args:
        data (Union[bytes, str, Value]): JSON input, or an already built tree.
        options (Optional[CodecOptions]): Codec options for every step.

    Returns:
        RoundTripReport: Canonical encoding and the first mismatch, if any.
    """
    original = data if is_value(data) else decode(data, options=options)
    encoded = encode(original, options=options)
    restored = decode(encoded, options=options)
    return RoundTripReport(encoded=encoded, mismatch=first_mismatch(original, restored))


def first_mismatch(expected: Value, actual: Value, *, path: CodingPath = ()) -> Optional[Mismatch]:
    """Return the first structural difference between two trees."""
    if type(expected) is not type(actual):
        return Mismatch(path=path, expected=kind_name(expected), actual=kind_name(actual))

    if isinstance(expected, Array) and isinstance(actual, Array):
        if len(expected) != len(actual):
            return Mismatch(path=path, expected=len(expected), actual=len(actual))
        for index, (left, right) in enumerate(zip(expected.items, actual.items)):
            mismatch = first_mismatch(left, right, path=(*path, index))
            if mismatch is not None:
                return mismatch
        return None

    if isinstance(expected, Object) and isinstance(actual, Object):
        if expected.keys() != actual.keys():
            return Mismatch(path=path, expected=expected.keys(), actual=actual.keys())
        for (key, left), (_, right) in zip(expected.pairs, actual.pairs):
            mismatch = first_mismatch(left, right, path=(*path, CodingKey.from_string(key)))
            if mismatch is not None:
                return mismatch
        return None

    if expected == actual:
        return None
    return Mismatch(path=path, expected=expected, actual=actual)


def format_report(report: RoundTripReport) -> str:
    """Render report as CLI output text."""
    if report.mismatch is None:
        return f"Round trip OK ({len(report.encoded)} bytes)"
    mismatch = report.mismatch
    return "\n".join(
        [
            "Round trip mismatch",
            f"  path: {format_path(mismatch.path)}",
            f"  expected: {short_repr(mismatch.expected)}",
            f"  actual: {short_repr(mismatch.actual)}",
        ]
    )


def short_repr(value: Any, *, limit: int = 160) -> str:
    """A short representation for mismatch diagnostics."""
    text = repr(value)
    return text if len(text) <= limit else f"{text[: limit - 3]}..."
