"""
Field Classifier - raw control -> typed Field

classify() depends only on (descriptor, raw value, raw range). Rules,
applied in order:

1. Descriptor declares discrete options      -> SELECT
   (a code outside the options reads as the first option)
2. More than one sub-field                   -> RANGE
3. Single sub-field, no range or range {0,1} -> BOOLEAN
   Single sub-field, any other range         -> NUMBER

A scalar whose range can't be read becomes a toggle rather than an
unbounded slider.
"""

from typing import Optional, Tuple

from models.control import (
    ControlDescriptor,
    MinMax,
    MultiDimensionalValue,
    RawRange,
    RawValue,
    ScalarValue,
)
from models.field import BooleanField, Field, NumberField, RangeField, SelectField
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DEVICE)


def classify(descriptor: ControlDescriptor, raw_value: RawValue, raw_range: RawRange) -> Field:
    """
    Classify one control into exactly one Field variant

    Args:
        descriptor: Structural metadata of the control
        raw_value: Current value as read from the device
        raw_range: None, one MinMax, or one MinMax per sub-field

    Returns:
        SelectField, RangeField, BooleanField or NumberField
    """
    options = descriptor.options
    if options:
        return _select_field(descriptor, raw_value)

    if descriptor.is_multi_dimensional:
        values = tuple(_sub_field_value(raw_value, sub.name) for sub in descriptor.fields)
        ranges = _per_field_ranges(raw_range, len(values)) if descriptor.supports_range else None
        return RangeField(name=descriptor.name, value=values, range=ranges)

    value = _sub_field_value(raw_value, descriptor.fields[0].name)
    bounds = _scalar_range(raw_range)

    if bounds is None or bounds.is_binary:
        return BooleanField(name=descriptor.name, value=1 if value else 0)

    return NumberField(name=descriptor.name, value=value, range=bounds)


def _select_field(descriptor: ControlDescriptor, raw_value: RawValue) -> SelectField:
    options = tuple((label, int(code)) for label, code in descriptor.options)
    code = int(_sub_field_value(raw_value, descriptor.options_field.name))

    if code not in {c for _, c in options}:
        log.warn(
            "Device reported a code outside the declared options, showing first option",
            control=descriptor.name,
            code=code,
            fallback=options[0][1]
        )
        code = options[0][1]

    return SelectField(name=descriptor.name, value=code, options=options)


def _sub_field_value(raw_value: RawValue, sub_field: str) -> float:
    """Pick one sub-field's number out of either value shape"""
    if isinstance(raw_value, ScalarValue):
        return raw_value.value
    if isinstance(raw_value, MultiDimensionalValue):
        return raw_value.get(sub_field)
    raise TypeError(f"Unsupported raw value: {raw_value!r}")


def _scalar_range(raw_range: RawRange) -> Optional[MinMax]:
    """Usable single range, or None when nothing usable was reported"""
    if isinstance(raw_range, tuple):
        if len(raw_range) != 1:
            return None
        raw_range = raw_range[0]

    if not isinstance(raw_range, MinMax):
        return None

    if raw_range.min > raw_range.max:
        return None

    return raw_range


def _per_field_ranges(raw_range: RawRange, count: int) -> Optional[Tuple[MinMax, ...]]:
    # Shape must match the value exactly, otherwise there is no range
    if not isinstance(raw_range, tuple) or len(raw_range) != count:
        return None
    return raw_range
