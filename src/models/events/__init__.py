"""
Event system for the camera control session
"""

# Event type, base class, and sources
from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource, KeyboardSource

# Hardware events
from models.events.hardware import KeyboardKeyPressEvent

# Session events
from models.events.session_events import (
    SessionStateChangedEvent,
    ControlWrittenEvent,
    SessionClosedEvent,
)

__all__ = [
    # Type, base, and sources
    "EventType",
    "Event",
    "EventSource",
    "KeyboardSource",

    # Hardware
    "KeyboardKeyPressEvent",

    # Session
    "SessionStateChangedEvent",
    "ControlWrittenEvent",
    "SessionClosedEvent",
]
