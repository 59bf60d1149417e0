"""Typed event data that projects named fields into envelope payloads."""

from __future__ import annotations

from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict

from .config import CodecOptions
from .encoder import to_value
from .envelope import SelfDescribingEvent, SelfDescribingJson
from .value import Object

EVENT_SPECIFICATION_SCHEMA = (
    "iglu:com.snowplowanalytics.snowplow/event_specification/jsonschema/1-0-3"
)


class EventData(BaseModel):
    """Base for typed event and entity payloads.

    Subclasses declare their fields and ``schema_uri``. Optional fields left
    as ``None`` are omitted from the payload, enums are written as their
    values, and field aliases become the JSON member names. Fields are not
    stringified: a ``datetime``, ``UUID`` or ``Decimal`` value fails with
    ``UnsupportedValueError``.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", populate_by_name=True, use_enum_values=True
    )

    schema_uri: ClassVar[str]

    def payload(self, *, options: Optional[CodecOptions] = None) -> Object:
        """Return the payload object in field declaration order."""
        raw: dict[str, Any] = self.model_dump(mode="python", by_alias=True, exclude_none=True)
        value = to_value(raw, options=options)
        if not isinstance(value, Object):
            raise TypeError(f"{type(self).__name__} did not serialize to an object")
        return value

    def to_entity(self, *, options: Optional[CodecOptions] = None) -> SelfDescribingJson:
        """Wrap the payload as a context entity."""
        return SelfDescribingJson(schema=self.schema_uri, data=self.payload(options=options))

    def to_event(
        self,
        *entities: Union[EventData, SelfDescribingJson],
        options: Optional[CodecOptions] = None,
    ) -> SelfDescribingEvent:
        """Build a trackable event carrying ``entities`` as context.

        Args:
            *entities (Union[EventData, SelfDescribingJson]): Context entities,
                attached in the given order.
            options (Optional[CodecOptions]): Codec limits for the projection.

        Returns:
            SelfDescribingEvent: The event with its entities.
        """
        event = SelfDescribingEvent(payload=self.to_entity(options=options))
        for entity in entities:
            attached = (
                entity.to_entity(options=options) if isinstance(entity, EventData) else entity
            )
            event = event.with_entity(attached)
        return event


class EventSpecification(EventData):
    """Entity referencing the event specification an event adheres to."""

    schema_uri: ClassVar[str] = EVENT_SPECIFICATION_SCHEMA

    id: str
    name: str
    data_product_id: str
    data_product_name: str
    data_product_domain: Optional[str] = None
