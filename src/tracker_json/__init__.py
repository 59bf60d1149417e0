"""JSON value codec for self-describing analytics event payloads."""

from __future__ import annotations

from .cli import main
from .coding_key import CodingKey, format_path
from .config import CodecOptions, DuplicateKeyPolicy, TrackerConfig, load_codec_options
from .decoder import decode, decode_obj
from .encoder import encode, encode_text, to_value
from .envelope import SchemaRef, SelfDescribingEvent, SelfDescribingJson, decode_envelope
from .errors import (
    CodecError,
    DecodeDepthExceededError,
    DecodeError,
    EncodeDepthExceededError,
    EncodeError,
    UnrecognizedShapeError,
    UnsupportedValueError,
)
from .events import EventData, EventSpecification
from .tracker import MemoryEmitter, Tracker
from .value import Array, Bool, Double, Int, Null, Object, String, Value

__all__ = [
    "Array",
    "Bool",
    "CodecError",
    "CodecOptions",
    "CodingKey",
    "DecodeDepthExceededError",
    "DecodeError",
    "Double",
    "DuplicateKeyPolicy",
    "EncodeDepthExceededError",
    "EncodeError",
    "EventData",
    "EventSpecification",
    "Int",
    "MemoryEmitter",
    "Null",
    "Object",
    "SchemaRef",
    "SelfDescribingEvent",
    "SelfDescribingJson",
    "String",
    "Tracker",
    "TrackerConfig",
    "UnrecognizedShapeError",
    "UnsupportedValueError",
    "Value",
    "decode",
    "decode_envelope",
    "decode_obj",
    "encode",
    "encode_text",
    "format_path",
    "load_codec_options",
    "main",
    "to_value",
]
