"""
Adjustment Engine - next raw value for one step on a field

step() is pure: it reads the field, returns the value to write and never
mutates anything. Rules per kind:

    NUMBER   value ± max/24, clamped into [min, max]
    BOOLEAN  1 - value (both directions flip)
    SELECT   neighbour option in declaration order, wrapping at both ends
    other    0

to_device_value() turns a NUMBER step into the integer written to the device.
"""

import math

from models.enums import FieldType
from models.field import Field, NumberField, SelectField
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SESSION)

# Fixed resolution: one step is 1/24 of the control's own maximum
STEP_RESOLUTION = 24


def step(field: Field, increase: bool) -> float:
    """
    Compute the raw value one step away from the field's current value

    Args:
        field: Field to adjust
        increase: True for right/increase, False for left/decrease

    Returns:
        New raw value to write to the device
    """
    if field.type == FieldType.NUMBER:
        return _step_number(field, increase)

    if field.type == FieldType.BOOLEAN:
        return 1 - field.value

    if field.type == FieldType.SELECT:
        return _step_select(field, increase)

    log.debug("Field kind is not adjustable", field=field.name, type=field.type.name)
    return 0


def _step_number(field: NumberField, increase: bool) -> float:
    low, high = field.range.min, field.range.max
    increment = high / STEP_RESOLUTION

    if increase:
        next_value = min(high, field.value + increment)
    else:
        next_value = max(low, field.value - increment)

    # Float error must not leave the value a hair short of a bound
    if math.isclose(next_value, high):
        return high
    if math.isclose(next_value, low):
        return low
    return next_value


def _step_select(field: SelectField, increase: bool) -> int:
    if not field.options:
        return field.value

    index = field.index_of(field.value)
    if index is None:
        first_code = field.options[0][1]
        log.warn(
            "Current value is not a declared option, using first option",
            field=field.name,
            value=field.value,
            fallback=first_code
        )
        return first_code

    index = (index + (1 if increase else -1)) % len(field.options)
    return field.options[index][1]


def to_device_value(field: Field, value: float, increase: bool) -> float:
    """
    Integer value to write for a stepped NUMBER

    Devices store integers. Rounding towards the step's direction (ceil on
    increase, floor on decrease) keeps a step smaller than 1 from truncating
    back onto the current value; the result is clamped into the range.
    Other kinds pass through unchanged.
    """
    if field.type != FieldType.NUMBER:
        return value

    nearest = round(value)
    if math.isclose(value, nearest, abs_tol=1e-9):
        rounded = nearest
    else:
        rounded = math.ceil(value) if increase else math.floor(value)

    low, high = field.range.min, field.range.max
    return max(low, min(high, rounded))
