"""Self-describing JSON envelopes.

An envelope pairs an encoded payload with the Iglu URI of the schema that
describes it: ``{"schema": "iglu:<vendor>/<name>/<format>/<m>-<r>-<a>",
"data": ...}``. The same shape is used for a tracked event and for each
entity attached to it as context. Schemas are referenced, never resolved.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from .config import CodecOptions
from .decoder import decode
from .encoder import encode, to_value
from .value import Array, Object, String, Value, is_value, kind_name

_IGLU_URI = re.compile(
    r"^iglu:(?P<vendor>[a-zA-Z0-9\-_.]+)/(?P<name>[a-zA-Z0-9\-_]+)/"
    r"(?P<format>[a-zA-Z0-9\-_]+)/"
    r"(?P<model>[1-9][0-9]*)-(?P<revision>0|[1-9][0-9]*)-(?P<addition>0|[1-9][0-9]*)$"
)


class EnvelopeError(ValueError):
    """Raised for invalid schema URIs and malformed envelopes."""


@dataclass(frozen=True)
class SchemaRef:
    """Parsed Iglu schema URI."""

    vendor: str
    name: str
    format: str
    model: int
    revision: int
    addition: int

    @classmethod
    def parse(cls, uri: str) -> SchemaRef:
        """Parse ``iglu:<vendor>/<name>/<format>/<model>-<revision>-<addition>``."""
        match = _IGLU_URI.match(uri)
        if match is None:
            raise EnvelopeError(f"Invalid Iglu schema URI: {uri!r}")
        return cls(
            vendor=match.group("vendor"),
            name=match.group("name"),
            format=match.group("format"),
            model=int(match.group("model")),
            revision=int(match.group("revision")),
            addition=int(match.group("addition")),
        )

    @property
    def version(self) -> str:
        return f"{self.model}-{self.revision}-{self.addition}"

    def __str__(self) -> str:
        return f"iglu:{self.vendor}/{self.name}/{self.format}/{self.version}"


@dataclass(frozen=True)
class SelfDescribingJson:
    """A payload wrapped together with its schema URI."""

    schema: str
    data: Value

    def __post_init__(self) -> None:
        SchemaRef.parse(self.schema)
        if not is_value(self.data):
            raise EnvelopeError(
                f"Envelope data must be a Value, got {type(self.data).__name__}; "
                "use SelfDescribingJson.from_payload for raw payloads"
            )

    @classmethod
    def from_payload(
        cls, schema: str, payload: Any, *, options: Optional[CodecOptions] = None
    ) -> SelfDescribingJson:
        """Wrap a raw caller payload, projecting it through the encoder."""
        return cls(schema=schema, data=to_value(payload, options=options))

    @classmethod
    def from_value(cls, value: Value) -> SelfDescribingJson:
        """Rebuild an envelope from a decoded ``{"schema", "data"}`` object.

        Args:
            value (Value): Decoded envelope tree.

        Returns:
            SelfDescribingJson: The envelope.
        """
        if not isinstance(value, Object):
            raise EnvelopeError(f"Envelope must be an Object, got {kind_name(value)}")
        extra = sorted(set(value.keys()) - {"schema", "data"})
        if extra:
            raise EnvelopeError(f"Unexpected envelope members: {extra}")
        schema = value.get("schema")
        if not isinstance(schema, String):
            raise EnvelopeError("Envelope 'schema' member must be a String")
        data = value.get("data")
        if data is None:
            raise EnvelopeError("Envelope is missing its 'data' member")
        return cls(schema=schema.value, data=data)

    @property
    def schema_ref(self) -> SchemaRef:
        return SchemaRef.parse(self.schema)

    def to_value(self) -> Object:
        return Object(pairs=(("schema", String(self.schema)), ("data", self.data)))

    def encode(self, *, options: Optional[CodecOptions] = None) -> bytes:
        return encode(self.to_value(), options=options)


@dataclass(frozen=True)
class SelfDescribingEvent:
    """A trackable event with its context entities in attachment order."""

    payload: SelfDescribingJson
    entities: tuple[SelfDescribingJson, ...] = ()

    def with_entity(self, entity: SelfDescribingJson) -> SelfDescribingEvent:
        return SelfDescribingEvent(payload=self.payload, entities=(*self.entities, entity))

    def to_value(self) -> Object:
        return Object(
            pairs=(
                ("event", self.payload.to_value()),
                ("entities", Array(items=tuple(entity.to_value() for entity in self.entities))),
            )
        )


def decode_envelope(
    data: Union[bytes, str], *, options: Optional[CodecOptions] = None
) -> SelfDescribingJson:
    """Decode JSON bytes or text holding one self-describing envelope."""
    return SelfDescribingJson.from_value(decode(data, options=options))
