"""Services layer"""

from .event_bus import EventBus
from .field_classifier import classify
from .field_list_builder import FieldList, FieldListBuilder, build_field_list
from .adjustment_engine import step, to_device_value, STEP_RESOLUTION
from .control_session import ControlSession, KEY_BINDINGS

__all__ = [
    "EventBus",
    "classify",
    "FieldList",
    "FieldListBuilder",
    "build_field_list",
    "step",
    "STEP_RESOLUTION",
    "to_device_value",
    "ControlSession",
    "KEY_BINDINGS",
]
