"""
Field models - classified, UI-facing representation of a control

Closed variant over four kinds, discriminated by `type`:
    NumberField, BooleanField, RangeField, SelectField

Fields are immutable. Adjusting a field never touches it: the adjustment
engine computes a new raw value, the session writes it to the device and
the whole list is rebuilt from the device afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from models.control import MinMax
from models.enums import FieldType


@dataclass(frozen=True)
class NumberField:
    """Scalar control with a usable min/max range"""
    name: str
    value: float
    range: MinMax
    type: FieldType = field(default=FieldType.NUMBER, init=False)

    @property
    def fraction(self) -> float:
        """Position of value inside range, clamped to [0, 1]"""
        span = self.range.max - self.range.min
        if span <= 0:
            return 0.0
        return max(0.0, min(1.0, (self.value - self.range.min) / span))


@dataclass(frozen=True)
class BooleanField:
    """On/off control (value is 0 or 1)"""
    name: str
    value: int
    type: FieldType = field(default=FieldType.BOOLEAN, init=False)

    @property
    def is_on(self) -> bool:
        return self.value != 0


@dataclass(frozen=True)
class RangeField:
    """Multi-dimensional control; range is None when the device can't report one"""
    name: str
    value: Tuple[float, ...]
    range: Optional[Tuple[MinMax, ...]] = None
    type: FieldType = field(default=FieldType.RANGE, init=False)


@dataclass(frozen=True)
class SelectField:
    """Control with discrete (label, code) options"""
    name: str
    value: int
    options: Tuple[Tuple[str, int], ...]
    type: FieldType = field(default=FieldType.SELECT, init=False)

    def index_of(self, code: int) -> Optional[int]:
        for index, (_, option_code) in enumerate(self.options):
            if option_code == code:
                return index
        return None

    @property
    def active_label(self) -> Optional[str]:
        index = self.index_of(self.value)
        if index is None:
            return None
        return self.options[index][0]


Field = Union[NumberField, BooleanField, RangeField, SelectField]

# Kinds the rendering surface knows how to draw
NAVIGABLE_TYPES = frozenset({FieldType.NUMBER, FieldType.BOOLEAN, FieldType.SELECT})
