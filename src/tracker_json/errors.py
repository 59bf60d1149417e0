"""Codec exception types.

Every error carries the structural path at which it occurred so that
failures inside large nested payloads remain actionable.
"""

from __future__ import annotations

from .coding_key import CodingPath, format_path


class CodecError(ValueError):
    """Base class for decode and encode failures."""

    def __init__(self, message: str, *, path: CodingPath = ()) -> None:
        self.path = path
        self.detail = message
        super().__init__(f"{message} at {format_path(path)}")


class DecodeError(CodecError):
    """Raised when JSON input cannot be decoded into a value tree."""


class UnrecognizedShapeError(DecodeError):
    """Input matched none of the recognized JSON shapes."""


class DecodeDepthExceededError(DecodeError):
    """Input nesting exceeded the configured maximum depth.

    ``stack_limited`` is set when the interpreter recursion limit was reached
    before ``max_depth``; the path is then unknown and left at the root.
    """

    def __init__(
        self, *, max_depth: int, path: CodingPath = (), stack_limited: bool = False
    ) -> None:
        self.max_depth = max_depth
        self.stack_limited = stack_limited
        super().__init__(_depth_message(max_depth, stack_limited), path=path)


class EncodeError(CodecError):
    """Raised when a value cannot be encoded as JSON."""


class UnsupportedValueError(EncodeError):
    """Caller supplied a value outside the closed set of JSON variants."""

    def __init__(self, *, kind: str, path: CodingPath = (), reason: str = "") -> None:
        self.kind = kind
        message = f"Unsupported value of kind {kind!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path=path)


class EncodeDepthExceededError(EncodeError):
    """Value nesting exceeded the configured maximum depth."""

    def __init__(
        self, *, max_depth: int, path: CodingPath = (), stack_limited: bool = False
    ) -> None:
        self.max_depth = max_depth
        self.stack_limited = stack_limited
        super().__init__(_depth_message(max_depth, stack_limited), path=path)


def _depth_message(max_depth: int, stack_limited: bool) -> str:
    if stack_limited:
        return (
            "Nesting exceeded the interpreter recursion limit before reaching "
            f"max_depth {max_depth}"
        )
    return f"Nesting deeper than {max_depth} levels"
