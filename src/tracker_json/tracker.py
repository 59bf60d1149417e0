"""Explicitly constructed tracker that encodes events for an emitter.

The tracker owns no transport. Encoded bytes are handed to an injected
emitter; shipping, batching and retrying them is the emitter's concern.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType
from typing import Optional, Union

from .config import TrackerConfig
from .decoder import decode
from .encoder import encode
from .envelope import SelfDescribingEvent
from .events import EventData
from .value import Object, String, Value

logger = logging.getLogger(__name__)

type Emitter = Callable[[bytes], None]


class TrackerError(RuntimeError):
    """Raised when a tracker is used outside its started lifecycle."""


class MemoryEmitter:
    """Emitter that keeps every encoded event in memory."""

    def __init__(self) -> None:
        self.payloads: list[bytes] = []

    def __call__(self, payload: bytes) -> None:
        self.payloads.append(payload)

    def decoded(self) -> list[Value]:
        return [decode(payload) for payload in self.payloads]


class Tracker:
    """Encode tracked events and pass them to an emitter.

    Lifecycle: construct, :meth:`start`, track any number of events, then
    :meth:`close`. The tracker can also be used as a context manager, which
    starts it on entry and closes it on exit. A closed tracker cannot be
    restarted.
    """

    def __init__(self, config: TrackerConfig, emitter: Emitter) -> None:
        self._config = config
        self._emitter = emitter
        self._started = False
        self._closed = False
        self._tracked = 0

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        return self._started and not self._closed

    @property
    def tracked_count(self) -> int:
        return self._tracked

    def start(self) -> None:
        if self._closed:
            raise TrackerError(f"Tracker {self._config.namespace!r} is closed")
        if self._started:
            return
        self._started = True
        logger.info(
            "Tracker %s started for app %s", self._config.namespace, self._config.app_id
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.info(
            "Tracker %s closed after %d events", self._config.namespace, self._tracked
        )

    def track(self, event: Union[SelfDescribingEvent, EventData]) -> bytes:
        """Encode one event and hand it to the emitter.

        Args:
            event (Union[SelfDescribingEvent, EventData]): The event. Bare
                event data is tracked without entities.

        Returns:
            bytes: The encoded event as passed to the emitter.
        """
        if not self.is_running:
            raise TrackerError(f"Tracker {self._config.namespace!r} is not running")
        if isinstance(event, EventData):
            event = event.to_event(options=self._config.codec)

        body = event.to_value()
        value = Object(pairs=(("tracker", self._metadata()), *body.pairs))
        payload = encode(value, options=self._config.codec)
        self._emitter(payload)
        self._tracked += 1
        logger.debug(
            "Tracked %s with %d entities (%d bytes)",
            event.payload.schema,
            len(event.entities),
            len(payload),
        )
        return payload

    def _metadata(self) -> Object:
        return Object(
            pairs=(
                ("namespace", String(self._config.namespace)),
                ("app_id", String(self._config.app_id)),
            )
        )

    def __enter__(self) -> Tracker:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()
