from enum import Enum, auto


class KeyboardSource(Enum):
    STDIN = auto()


class EventSource(Enum):
    """Event source identifiers for application events"""
    HARDWARE = auto()       # Hardware inputs (keyboard)
    SESSION = auto()        # ControlSession state changes
