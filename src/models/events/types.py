from enum import Enum, auto


class EventType(Enum):
    # Input
    KEYBOARD_KEYPRESS = auto()

    # Session
    SESSION_STATE_CHANGED = auto()
    CONTROL_WRITTEN = auto()
    SESSION_CLOSED = auto()
