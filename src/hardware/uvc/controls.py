"""
Standard UVC control table

Each entry says where a control lives (unit + selector), which bmControls
bit advertises it, how its bytes are laid out and which requests it answers.
A control reports a range iff it answers GET_MIN.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from hardware.uvc import constants as uvc
from models.control import ControlDescriptor, SubField
from models.enums import UvcUnit


@dataclass(frozen=True)
class FieldLayout:
    """Byte layout of one sub-field inside the control payload"""
    name: str
    offset: int
    size: int
    signed: bool = False
    type_hint: str = "number"
    options: Optional[Tuple[Tuple[str, int], ...]] = None


@dataclass(frozen=True)
class UvcControl:
    name: str
    unit: UvcUnit
    selector: int
    bit: int
    fields: Tuple[FieldLayout, ...]
    requests: FrozenSet[int] = uvc.REQUESTS_RANGED

    @property
    def length(self) -> int:
        """Payload size in bytes"""
        return max(f.offset + f.size for f in self.fields)

    @property
    def supports_range(self) -> bool:
        return uvc.GET_MIN in self.requests

    def to_descriptor(self) -> ControlDescriptor:
        return ControlDescriptor(
            name=self.name,
            fields=tuple(
                SubField(name=f.name, type_hint=f.type_hint, options=f.options)
                for f in self.fields
            ),
            supports_range=self.supports_range,
        )


def _value(size: int, signed: bool = False) -> Tuple[FieldLayout, ...]:
    return (FieldLayout("value", 0, size, signed),)


def _toggle() -> Tuple[FieldLayout, ...]:
    return (FieldLayout("value", 0, 1, type_hint="boolean"),)


CT = UvcUnit.CAMERA_TERMINAL
PU = UvcUnit.PROCESSING_UNIT

AUTO_EXPOSURE_MODES = (
    ("MANUAL", 0b0001),
    ("AUTO", 0b0010),
    ("SHUTTER_PRIORITY", 0b0100),
    ("APERTURE_PRIORITY", 0b1000),
)

POWER_LINE_FREQUENCIES = (
    ("DISABLED", 0),
    ("50_HZ", 1),
    ("60_HZ", 2),
    ("AUTO", 3),
)

CONTROLS: Tuple[UvcControl, ...] = (
    # Camera Terminal
    UvcControl("scanning_mode", CT, uvc.CT_SCANNING_MODE, 0, _toggle(), uvc.REQUESTS_TOGGLE),
    UvcControl(
        "auto_exposure_mode", CT, uvc.CT_AE_MODE, 1,
        (FieldLayout("mode", 0, 1, type_hint="bitmap", options=AUTO_EXPOSURE_MODES),),
        uvc.REQUESTS_MODE,
    ),
    UvcControl("auto_exposure_priority", CT, uvc.CT_AE_PRIORITY, 2, _toggle(), uvc.REQUESTS_TOGGLE),
    UvcControl("absolute_exposure_time", CT, uvc.CT_EXPOSURE_TIME_ABSOLUTE, 3, _value(4)),
    UvcControl("absolute_focus", CT, uvc.CT_FOCUS_ABSOLUTE, 5, _value(2)),
    UvcControl("absolute_iris", CT, uvc.CT_IRIS_ABSOLUTE, 7, _value(2)),
    UvcControl("absolute_zoom", CT, uvc.CT_ZOOM_ABSOLUTE, 9, _value(2)),
    UvcControl(
        "absolute_pan_tilt", CT, uvc.CT_PANTILT_ABSOLUTE, 11,
        (FieldLayout("pan", 0, 4, signed=True), FieldLayout("tilt", 4, 4, signed=True)),
    ),
    UvcControl("absolute_roll", CT, uvc.CT_ROLL_ABSOLUTE, 13, _value(2, signed=True)),
    UvcControl("auto_focus", CT, uvc.CT_FOCUS_AUTO, 17, _toggle(), uvc.REQUESTS_TOGGLE),
    UvcControl("privacy", CT, uvc.CT_PRIVACY, 18, _toggle(), uvc.REQUESTS_TOGGLE),

    # Processing Unit
    UvcControl("brightness", PU, uvc.PU_BRIGHTNESS, 0, _value(2, signed=True)),
    UvcControl("contrast", PU, uvc.PU_CONTRAST, 1, _value(2)),
    UvcControl("hue", PU, uvc.PU_HUE, 2, _value(2, signed=True)),
    UvcControl("saturation", PU, uvc.PU_SATURATION, 3, _value(2)),
    UvcControl("sharpness", PU, uvc.PU_SHARPNESS, 4, _value(2)),
    UvcControl("gamma", PU, uvc.PU_GAMMA, 5, _value(2)),
    UvcControl("white_balance_temperature", PU, uvc.PU_WHITE_BALANCE_TEMPERATURE, 6, _value(2)),
    UvcControl(
        "white_balance_component", PU, uvc.PU_WHITE_BALANCE_COMPONENT, 7,
        (FieldLayout("blue", 0, 2), FieldLayout("red", 2, 2)),
    ),
    UvcControl("backlight_compensation", PU, uvc.PU_BACKLIGHT_COMPENSATION, 8, _value(2)),
    UvcControl("gain", PU, uvc.PU_GAIN, 9, _value(2)),
    UvcControl(
        "power_line_frequency", PU, uvc.PU_POWER_LINE_FREQUENCY, 10,
        (FieldLayout("value", 0, 1, type_hint="enum", options=POWER_LINE_FREQUENCIES),),
        uvc.REQUESTS_TOGGLE,
    ),
    UvcControl("hue_auto", PU, uvc.PU_HUE_AUTO, 11, _toggle(), uvc.REQUESTS_TOGGLE),
    UvcControl("auto_white_balance_temperature", PU, uvc.PU_WHITE_BALANCE_TEMPERATURE_AUTO, 12, _toggle(), uvc.REQUESTS_TOGGLE),
    UvcControl("auto_white_balance_component", PU, uvc.PU_WHITE_BALANCE_COMPONENT_AUTO, 13, _toggle(), uvc.REQUESTS_TOGGLE),
    UvcControl("digital_multiplier", PU, uvc.PU_DIGITAL_MULTIPLIER, 14, _value(2)),
    UvcControl("digital_multiplier_limit", PU, uvc.PU_DIGITAL_MULTIPLIER_LIMIT, 15, _value(2)),
    UvcControl("contrast_auto", PU, uvc.PU_CONTRAST_AUTO, 18, _toggle(), uvc.REQUESTS_TOGGLE),
)

CONTROLS_BY_NAME: Dict[str, UvcControl] = {c.name: c for c in CONTROLS}
