"""
VirtualCamera - in-memory descriptor source

A webcam-like control set held in dataclasses. Used by the `virtual` device
backend and by the tests; writes are validated and truncated the way a real
device stores them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from hardware.uvc.controls import AUTO_EXPOSURE_MODES, POWER_LINE_FREQUENCIES
from hardware.uvc.descriptor_source import DeviceInfo, WriteValue
from models.control import (
    ControlDescriptor,
    MinMax,
    MultiDimensionalValue,
    RawRange,
    RawValue,
    ScalarValue,
    SubField,
)
from models.errors import ControlFetchError, ControlWriteError, UnknownControlError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DEVICE)


@dataclass
class VirtualControl:
    """Mutable state of one simulated control"""
    descriptor: ControlDescriptor
    value: RawValue
    range: RawRange = None


def scalar(name: str, value: float, low: Optional[float] = None, high: Optional[float] = None,
           options=None, type_hint: str = "number") -> VirtualControl:
    ranged = low is not None and high is not None
    return VirtualControl(
        descriptor=ControlDescriptor(
            name=name,
            fields=(SubField("value", type_hint, options),),
            supports_range=ranged,
        ),
        value=ScalarValue(value),
        range=MinMax(low, high) if ranged else None,
    )


def multi(name: str, values: Dict[str, float], ranges: Optional[Dict[str, MinMax]] = None) -> VirtualControl:
    return VirtualControl(
        descriptor=ControlDescriptor(
            name=name,
            fields=tuple(SubField(n) for n in values),
            supports_range=ranges is not None,
        ),
        value=MultiDimensionalValue.from_mapping(values),
        range=tuple(ranges[n] for n in values) if ranges else None,
    )


def default_controls() -> List[VirtualControl]:
    """A webcam-like control set"""
    return [
        scalar("brightness", 128, 0, 255),
        scalar("contrast", 32, 0, 95),
        scalar("saturation", 64, 0, 100),
        scalar("sharpness", 3, 1, 7),
        scalar("gain", 0, 0, 100),
        scalar("white_balance_temperature", 4600, 2800, 6500),
        scalar("absolute_focus", 0, 0, 1),
        scalar("auto_focus", 1, type_hint="boolean"),
        scalar("auto_white_balance_temperature", 1, type_hint="boolean"),
        scalar("auto_exposure_mode", 8, options=AUTO_EXPOSURE_MODES, type_hint="bitmap"),
        scalar("power_line_frequency", 1, options=POWER_LINE_FREQUENCIES, type_hint="enum"),
        multi(
            "absolute_pan_tilt",
            {"pan": 0, "tilt": 0},
            {"pan": MinMax(-36000, 36000), "tilt": MinMax(-36000, 36000)},
        ),
    ]


class VirtualCamera:
    """
    In-memory camera implementing IDescriptorSource

    Behaves like a device: writes outside a control's range are rejected,
    values are stored truncated to integers. Fetch and write failures can be
    injected per control name.

    Example:
        camera = VirtualCamera()
        await camera.set_value("brightness", 138.6)
        await camera.get_value("brightness")   # ScalarValue(138)

        camera.fail_fetch.add("gain")           # gain is skipped on rebuild
        camera.fail_write.add("contrast")       # writes to contrast raise
    """

    def __init__(self, controls: Optional[List[VirtualControl]] = None, name: str = "Virtual Camera"):
        if controls is None:
            controls = default_controls()
        self._controls: Dict[str, VirtualControl] = {c.descriptor.name: c for c in controls}
        self._info = DeviceInfo(vendor_id=0x0000, product_id=0x0000, name=name)
        self.fail_fetch: Set[str] = set()
        self.fail_write: Set[str] = set()
        self.writes: List[tuple] = []
        self.closed = False

    @property
    def info(self) -> DeviceInfo:
        return self._info

    def _control(self, name: str) -> VirtualControl:
        try:
            return self._controls[name]
        except KeyError:
            raise UnknownControlError(name) from None

    def _check_fetch(self, name: str) -> VirtualControl:
        control = self._control(name)
        if name in self.fail_fetch:
            raise ControlFetchError(name, "simulated fetch failure")
        return control

    async def supported_controls(self) -> List[str]:
        return list(self._controls)

    async def get_descriptor(self, name: str) -> ControlDescriptor:
        return self._check_fetch(name).descriptor

    async def get_value(self, name: str) -> RawValue:
        return self._check_fetch(name).value

    async def get_range(self, name: str) -> RawRange:
        control = self._check_fetch(name)
        if not control.descriptor.supports_range:
            return None
        return control.range

    async def set_value(self, name: str, value: WriteValue) -> None:
        control = self._control(name)
        if name in self.fail_write:
            raise ControlWriteError(name, value, "simulated write failure")

        if control.descriptor.is_multi_dimensional:
            new_value = self._coerce_multi(control, value)
        else:
            new_value = self._coerce_scalar(control, value)

        control.value = new_value
        self.writes.append((name, value))
        log.debug("Virtual control written", control=name, value=value)

    def _coerce_scalar(self, control: VirtualControl, value) -> ScalarValue:
        name = control.descriptor.name
        if not isinstance(value, (int, float)):
            raise ControlWriteError(name, value, "expected a number")

        stored = int(value)
        options = control.descriptor.options
        if options and stored not in {code for _, code in options}:
            raise ControlWriteError(name, value, "not a declared option")
        if isinstance(control.range, MinMax) and not control.range.contains(stored):
            raise ControlWriteError(name, value, f"outside {control.range.min}..{control.range.max}")
        return ScalarValue(stored)

    def _coerce_multi(self, control: VirtualControl, value) -> MultiDimensionalValue:
        name = control.descriptor.name
        sub_names = [f.name for f in control.descriptor.fields]

        if isinstance(value, dict):
            if set(value) != set(sub_names):
                raise ControlWriteError(name, value, "every sub-field is required")
            values = [value[n] for n in sub_names]
        elif isinstance(value, (list, tuple)) and len(value) == len(sub_names):
            values = list(value)
        else:
            raise ControlWriteError(name, value, "expected one value per sub-field")

        ranges = control.range if isinstance(control.range, tuple) else ()
        for bounds, v in zip(ranges, values):
            if not bounds.contains(int(v)):
                raise ControlWriteError(name, value, f"outside {bounds.min}..{bounds.max}")

        return MultiDimensionalValue(tuple((n, int(v)) for n, v in zip(sub_names, values)))

    def close(self) -> None:
        self.closed = True
