"""
Raw control models - what the descriptor source hands out

A control is described once (ControlDescriptor), read as a RawValue and,
when the device supports it, a RawRange. Values are an explicit tagged union
(ScalarValue / MultiDimensionalValue) instead of "number or dict".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class MinMax:
    """Inclusive numeric bounds"""
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    @property
    def is_binary(self) -> bool:
        """True for the exact {0, 1} range of on/off controls"""
        return self.min == 0 and self.max == 1


@dataclass(frozen=True)
class SubField:
    """
    One dimension of a control

    Attributes:
        name: Sub-field name (e.g. "value", "pan", "tilt")
        type_hint: Device-side type hint ("number", "boolean", "bitmap", "enum")
        options: Ordered (label, code) pairs for discrete controls, else None
    """
    name: str
    type_hint: str = "number"
    options: Optional[Tuple[Tuple[str, int], ...]] = None


@dataclass(frozen=True)
class ControlDescriptor:
    """
    Structural metadata of one named control

    Attributes:
        name: Unique control key (e.g. "brightness")
        fields: Sub-fields in declaration order (at least one)
        supports_range: Device answers min/max queries for this control
    """
    name: str
    fields: Tuple[SubField, ...]
    supports_range: bool = False

    @property
    def is_multi_dimensional(self) -> bool:
        return len(self.fields) > 1

    @property
    def options(self) -> Optional[Tuple[Tuple[str, int], ...]]:
        """Discrete option set declared by any sub-field, if there is one"""
        for sub in self.fields:
            if sub.options:
                return sub.options
        return None

    @property
    def options_field(self) -> Optional[SubField]:
        for sub in self.fields:
            if sub.options:
                return sub
        return None


@dataclass(frozen=True)
class ScalarValue:
    """Current value of a single-dimension control"""
    value: float


@dataclass(frozen=True)
class MultiDimensionalValue:
    """Current value of a multi-dimension control, ordered by sub-field"""
    values: Tuple[Tuple[str, float], ...]

    @classmethod
    def from_mapping(cls, mapping) -> "MultiDimensionalValue":
        return cls(tuple((name, value) for name, value in mapping.items()))

    def get(self, name: str, default: float = 0) -> float:
        for key, value in self.values:
            if key == name:
                return value
        return default

    def as_dict(self) -> dict:
        return dict(self.values)


RawValue = Union[ScalarValue, MultiDimensionalValue]

# None (no range), one MinMax, or one MinMax per sub-field
RawRange = Union[None, MinMax, Tuple[MinMax, ...]]


@dataclass(frozen=True)
class RawEntry:
    """One successfully fetched control: descriptor + value + range"""
    descriptor: ControlDescriptor
    value: RawValue
    range: RawRange = None

    @property
    def name(self) -> str:
        return self.descriptor.name
