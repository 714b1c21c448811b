"""
Models package - Data models for camera controls and the session
"""

from .enums import FieldType, SessionIntent, DeviceBackend, LogLevel, LogCategory
from .control import (
    MinMax,
    SubField,
    ControlDescriptor,
    ScalarValue,
    MultiDimensionalValue,
    RawValue,
    RawRange,
    RawEntry,
)
from .field import Field, NumberField, BooleanField, RangeField, SelectField

__all__ = [
    'FieldType',
    'SessionIntent',
    'DeviceBackend',
    'LogLevel',
    'LogCategory',
    'MinMax',
    'SubField',
    'ControlDescriptor',
    'ScalarValue',
    'MultiDimensionalValue',
    'RawValue',
    'RawRange',
    'RawEntry',
    'Field',
    'NumberField',
    'BooleanField',
    'RangeField',
    'SelectField',
]
