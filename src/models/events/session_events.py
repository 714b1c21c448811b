"""Session events - published by ControlSession after state changes"""

from dataclasses import dataclass
from typing import Any, List, Optional

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.field import Field


@dataclass(init=False)
class SessionStateChangedEvent(Event):
    """Navigable field list or active index changed (rebuild, navigation)"""
    fields: List[Field]
    active_index: int

    def __init__(self, fields: List[Field], active_index: int):
        super().__init__(
            type=EventType.SESSION_STATE_CHANGED,
            source=EventSource.SESSION,
        )
        self.fields = fields
        self.active_index = active_index


@dataclass(init=False)
class ControlWrittenEvent(Event):
    """A new raw value was accepted by the device"""
    name: str
    previous: Any
    value: Any

    def __init__(self, name: str, previous: Any, value: Any):
        super().__init__(
            type=EventType.CONTROL_WRITTEN,
            source=EventSource.SESSION,
        )
        self.name = name
        self.previous = previous
        self.value = value


@dataclass(init=False)
class SessionClosedEvent(Event):
    """Session finished (quit or fatal write error)"""
    reason: str
    error: Optional[Exception]

    def __init__(self, reason: str, error: Optional[Exception] = None):
        super().__init__(
            type=EventType.SESSION_CLOSED,
            source=EventSource.SESSION,
        )
        self.reason = reason
        self.error = error
