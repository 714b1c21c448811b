"""
Enums for the camera control session
"""

from enum import Enum, auto


class FieldType(Enum):
    """
    Semantic field kinds a raw control is classified into

    NUMBER: scalar with a min/max range (slider)
    BOOLEAN: scalar toggled between 0 and 1
    RANGE: multi-dimensional control (e.g. pan/tilt), not navigable
    SELECT: discrete labeled options
    """
    NUMBER = auto()
    BOOLEAN = auto()
    RANGE = auto()
    SELECT = auto()


class SessionIntent(Enum):
    """User intents dispatched to the ControlSession"""
    NAVIGATE_UP = auto()
    NAVIGATE_DOWN = auto()
    ADJUST_LEFT = auto()     # decrease
    ADJUST_RIGHT = auto()    # increase
    QUIT = auto()


class DeviceBackend(Enum):
    """Descriptor source implementations"""
    UVC = auto()        # Real USB Video Class device (pyusb)
    VIRTUAL = auto()    # In-memory camera for development/tests


class UvcUnit(Enum):
    """UVC entities that host the standard controls"""
    CAMERA_TERMINAL = auto()
    PROCESSING_UNIT = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for filtering and coloring"""
    CONFIG = auto()     # Configuration loading
    DEVICE = auto()     # USB / descriptor source I/O
    SESSION = auto()    # Session state machine
    INPUT = auto()      # Keyboard adapters
    RENDER = auto()     # Terminal drawing
    EVENT = auto()      # Event bus events and handling
    SYSTEM = auto()     # Startup
    SHUTDOWN = auto()   # Shutdown sequence
