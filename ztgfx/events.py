"""
Structured decode events.

The decoders report progress through an injectable :class:`EventSink` instead
of writing to a log file directly. Each event carries a milestone name, a
logging level and a dict of values:

- LoggingEventSink: forwards events to a standard logger
- RecordingEventSink: keeps events in memory (diagnostics, tests)
- NullEventSink: discards everything
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class Milestone(str, Enum):
    """Named points in the decode pipeline at which events are emitted."""

    HEADER_VARIANT = "header_variant"
    HEADER = "header"
    FRAME = "frame"
    FRAME_RESYNC = "frame_resync"
    FRAME_OVERRUN = "frame_overrun"
    PALETTE = "palette"
    COMPOSITED = "composited"
    LOAD_FAILED = "load_failed"


@dataclass(frozen=True)
class DecodeEvent:
    """A single decode milestone with its values."""

    name: Milestone
    data: dict[str, Any] = field(default_factory=dict)
    level: int = logging.DEBUG

    def __str__(self) -> str:
        values = ", ".join(f"{key}={value!r}" for key, value in self.data.items())
        return f"{self.name.value}: {values}" if values else self.name.value


@runtime_checkable
class EventSink(Protocol):
    """Receives decode events."""

    def emit(self, event: DecodeEvent) -> None:
        ...


class NullEventSink:
    """Event sink which ignores all events."""

    def emit(self, event: DecodeEvent) -> None:
        pass


class LoggingEventSink:
    """Event sink forwarding every event to a logger.

    :param target: The logger to write to. The module logger by default.
    """

    def __init__(self, target: logging.Logger | None = None):
        self.logger = target or logger

    def emit(self, event: DecodeEvent) -> None:
        self.logger.log(event.level, str(event))


class RecordingEventSink:
    """Event sink keeping all events in order of emission."""

    def __init__(self) -> None:
        self.events: list[DecodeEvent] = []

    def emit(self, event: DecodeEvent) -> None:
        self.events.append(event)

    def of(self, name: Milestone | str) -> list[DecodeEvent]:
        """Returns all recorded events with the given milestone name."""
        name = Milestone(name)
        return [event for event in self.events if event.name == name]

    @property
    def names(self) -> list[Milestone]:
        return [event.name for event in self.events]

    @property
    def warnings(self) -> list[DecodeEvent]:
        return [event for event in self.events if event.level >= logging.WARNING]

    def clear(self) -> None:
        self.events.clear()


def emit(
    sink: EventSink | None,
    name: Milestone,
    level: int = logging.DEBUG,
    **data: Any,
) -> None:
    """Emits an event to ``sink`` if one is given."""
    if sink is not None:
        sink.emit(DecodeEvent(name=name, data=data, level=level))


__all__ = [
    "Milestone",
    "DecodeEvent",
    "EventSink",
    "NullEventSink",
    "LoggingEventSink",
    "RecordingEventSink",
    "emit",
]
