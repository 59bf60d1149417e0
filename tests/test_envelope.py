"""Unit tests for self-describing envelopes."""

from __future__ import annotations

import pytest

from tracker_json.envelope import (
    EnvelopeError,
    SchemaRef,
    SelfDescribingEvent,
    SelfDescribingJson,
    decode_envelope,
)
from tracker_json.value import Array, Int, Object, String

_SCHEMA = "iglu:com.dating-demo/dating-demo-button-click/jsonschema/1-0-0"
_USER_SCHEMA = "iglu:com.dating-demo/dating-demo-user/jsonschema/1-0-0"


def test_schema_ref_parses_and_renders_iglu_uris() -> None:
    """Iglu URIs split into vendor, name, format and version."""
    ref = SchemaRef.parse(_SCHEMA)
    assert ref.vendor == "com.dating-demo"
    assert ref.name == "dating-demo-button-click"
    assert ref.format == "jsonschema"
    assert (ref.model, ref.revision, ref.addition) == (1, 0, 0)
    assert ref.version == "1-0-0"
    assert str(ref) == _SCHEMA


@pytest.mark.parametrize(
    "uri",
    [
        "com.acme/event/jsonschema/1-0-0",
        "iglu:com.acme/event/jsonschema/0-0-0",
        "iglu:com.acme/event/jsonschema/1-0",
        "iglu:com.acme/event/1-0-0",
        "iglu:com.acme/ev ent/jsonschema/1-0-0",
    ],
)
def test_invalid_schema_uris_are_rejected(uri: str) -> None:
    """Malformed URIs raise EnvelopeError."""
    with pytest.raises(EnvelopeError):
        SchemaRef.parse(uri)


def test_envelope_encodes_schema_then_data() -> None:
    """The envelope shape is {"schema": ..., "data": ...}."""
    envelope = SelfDescribingJson.from_payload(_SCHEMA, {"button_id": "checkout", "count": 1})
    assert envelope.encode() == (
        b'{"schema":"' + _SCHEMA.encode() + b'","data":{"button_id":"checkout","count":1}}'
    )
    assert decode_envelope(envelope.encode()) == envelope


def test_envelope_requires_value_data() -> None:
    """Raw payloads must go through from_payload."""
    with pytest.raises(EnvelopeError, match="from_payload"):
        SelfDescribingJson(schema=_SCHEMA, data={"a": 1})  # type: ignore[arg-type]
    with pytest.raises(EnvelopeError):
        SelfDescribingJson(schema="not-a-uri", data=Object())


@pytest.mark.parametrize(
    ("value", "message"),
    [
        (Array(), "must be an Object"),
        (Object(pairs=(("schema", String(_SCHEMA)),)), "missing its 'data'"),
        (Object(pairs=(("schema", Int(1)), ("data", Object()))), "must be a String"),
        (
            Object(pairs=(("schema", String(_SCHEMA)), ("data", Object()), ("extra", Int(1)))),
            "Unexpected envelope members",
        ),
    ],
)
def test_malformed_envelopes_are_rejected(value: Object, message: str) -> None:
    """from_value validates the envelope shape, not the payload."""
    with pytest.raises(EnvelopeError, match=message):
        SelfDescribingJson.from_value(value)


def test_event_keeps_entities_in_attachment_order() -> None:
    """Entities are appended without mutating the original event."""
    payload = SelfDescribingJson.from_payload(_SCHEMA, {"button_id": "like"})
    user = SelfDescribingJson.from_payload(_USER_SCHEMA, {"user_id": "demo-user"})
    other = SelfDescribingJson.from_payload(_USER_SCHEMA, {"user_id": "other"})

    event = SelfDescribingEvent(payload=payload)
    extended = event.with_entity(user).with_entity(other)

    assert event.entities == ()
    assert extended.entities == (user, other)
    value = extended.to_value()
    assert value.keys() == ["event", "entities"]
    assert value.get("entities") == Array(items=(user.to_value(), other.to_value()))
