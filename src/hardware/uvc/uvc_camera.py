"""
UvcCamera - USB Video Class camera over pyusb (libusb)

Talks to the camera's Video Control interface with class-specific control
transfers (GET_CUR / GET_MIN / GET_MAX / SET_CUR). Which controls exist is
read from the Camera Terminal and Processing Unit descriptors (bmControls).

pyusb calls block, so every transfer runs in the default executor.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional

import usb.core
import usb.util

from hardware.uvc import constants as uvc
from hardware.uvc.controls import CONTROLS, CONTROLS_BY_NAME, UvcControl
from hardware.uvc.descriptor_source import DeviceInfo, WriteValue
from models.control import (
    ControlDescriptor,
    MinMax,
    MultiDimensionalValue,
    RawRange,
    RawValue,
    ScalarValue,
)
from models.enums import UvcUnit
from models.errors import (
    ControlFetchError,
    ControlWriteError,
    DeviceError,
    UnknownControlError,
)
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DEVICE)

CONTROL_TIMEOUT_MS = 1000


@dataclass(frozen=True)
class UnitInfo:
    """Entity on the Video Control interface that hosts controls"""
    unit_id: int
    bm_controls: int

    def supports(self, bit: int) -> bool:
        return bool(self.bm_controls & (1 << bit))


# ---------------------------------------------------------------------------
# Descriptor parsing and payload codecs (pure)
# ---------------------------------------------------------------------------

def parse_video_control_units(extra: bytes) -> Dict[UvcUnit, UnitInfo]:
    """
    Walk class-specific VC descriptors and find the camera terminal and
    processing unit.

    Args:
        extra: Concatenated extra descriptors of the Video Control interface

    Returns:
        Mapping with CAMERA_TERMINAL and/or PROCESSING_UNIT entries
    """
    units: Dict[UvcUnit, UnitInfo] = {}
    data = bytes(extra)
    i = 0

    while i + 2 < len(data):
        length = data[i]
        if length < 3 or i + length > len(data):
            break

        desc = data[i:i + length]
        if desc[1] == uvc.CS_INTERFACE:
            subtype = desc[2]

            if subtype == uvc.VC_INPUT_TERMINAL and length >= 15:
                terminal_type = int.from_bytes(desc[4:6], "little")
                if terminal_type == uvc.ITT_CAMERA:
                    size = desc[14]
                    units[UvcUnit.CAMERA_TERMINAL] = UnitInfo(
                        unit_id=desc[3],
                        bm_controls=int.from_bytes(desc[15:15 + size], "little"),
                    )

            elif subtype == uvc.VC_PROCESSING_UNIT and length >= 8:
                size = desc[7]
                units[UvcUnit.PROCESSING_UNIT] = UnitInfo(
                    unit_id=desc[3],
                    bm_controls=int.from_bytes(desc[8:8 + size], "little"),
                )

        i += length

    return units


def _read_fields(control: UvcControl, data: bytes) -> List[int]:
    if len(data) < control.length:
        raise ValueError(f"short payload: {len(data)} < {control.length} bytes")
    return [
        int.from_bytes(data[f.offset:f.offset + f.size], "little", signed=f.signed)
        for f in control.fields
    ]


def decode_value(control: UvcControl, data: bytes) -> RawValue:
    values = _read_fields(control, data)
    if len(control.fields) == 1:
        return ScalarValue(values[0])
    return MultiDimensionalValue(tuple(
        (f.name, v) for f, v in zip(control.fields, values)
    ))


def decode_range(control: UvcControl, min_data: bytes, max_data: bytes) -> RawRange:
    lows = _read_fields(control, min_data)
    highs = _read_fields(control, max_data)
    bounds = tuple(MinMax(lo, hi) for lo, hi in zip(lows, highs))
    if len(bounds) == 1:
        return bounds[0]
    return bounds


def encode_value(control: UvcControl, value: WriteValue) -> bytes:
    """
    Build the SET_CUR payload

    Numbers are truncated to integers. Multi-field controls need a value for
    every sub-field so a write never applies partially.

    Raises:
        ValueError: Wrong shape or a value that doesn't fit its field
    """
    if len(control.fields) == 1:
        if not isinstance(value, (int, float)):
            raise ValueError(f"expected a number, got {value!r}")
        values = [value]
    elif isinstance(value, dict):
        missing = [f.name for f in control.fields if f.name not in value]
        if missing:
            raise ValueError(f"missing sub-fields: {', '.join(missing)}")
        values = [value[f.name] for f in control.fields]
    elif isinstance(value, (list, tuple)):
        if len(value) != len(control.fields):
            raise ValueError(f"expected {len(control.fields)} values, got {len(value)}")
        values = list(value)
    else:
        raise ValueError(f"unsupported value for multi-field control: {value!r}")

    payload = bytearray(control.length)
    for layout, v in zip(control.fields, values):
        try:
            chunk = int(v).to_bytes(layout.size, "little", signed=layout.signed)
        except OverflowError as e:
            raise ValueError(f"{layout.name}={v} does not fit in {layout.size} bytes") from e
        payload[layout.offset:layout.offset + layout.size] = chunk
    return bytes(payload)


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------

def _find_control_interface(dev) -> Optional["usb.core.Interface"]:
    for cfg in dev:
        for intf in cfg:
            if (intf.bInterfaceClass == uvc.USB_CLASS_VIDEO
                    and intf.bInterfaceSubClass == uvc.SC_VIDEOCONTROL):
                return intf
    return None


def _product_name(dev) -> str:
    try:
        return usb.util.get_string(dev, dev.iProduct) or ""
    except (usb.core.USBError, ValueError, NotImplementedError):
        # Reading strings needs permissions some setups don't grant
        return ""


def find_uvc_devices(vendor_id: Optional[int] = None, product_id: Optional[int] = None) -> list:
    """Raw pyusb devices that expose a Video Control interface"""
    filters = {}
    if vendor_id is not None:
        filters["idVendor"] = vendor_id
    if product_id is not None:
        filters["idProduct"] = product_id

    try:
        found = usb.core.find(
            find_all=True,
            custom_match=lambda d: _find_control_interface(d) is not None,
            **filters
        )
        return list(found)
    except usb.core.NoBackendError as e:
        raise DeviceError("No libusb backend available", details={"reason": str(e)}) from e


def discover(vendor_id: Optional[int] = None, product_id: Optional[int] = None) -> List[DeviceInfo]:
    devices = [
        DeviceInfo(
            vendor_id=dev.idVendor,
            product_id=dev.idProduct,
            bus=dev.bus,
            address=dev.address,
            name=_product_name(dev),
        )
        for dev in find_uvc_devices(vendor_id, product_id)
    ]
    log.info("UVC discovery finished", devices=len(devices))
    return devices


# ---------------------------------------------------------------------------
# Device
# ---------------------------------------------------------------------------

class UvcCamera:
    """
    Descriptor source backed by a real UVC camera

    Example:
        camera = UvcCamera.open(discover()[0])
        names = await camera.supported_controls()
        value = await camera.get_value("brightness")
        await camera.set_value("brightness", 140)
        camera.close()
    """

    def __init__(self, device, info: DeviceInfo, detach_kernel_driver: bool = False):
        self._device = device
        self._info = info
        self._detached = False

        intf = _find_control_interface(device)
        if intf is None:
            raise DeviceError("Device has no Video Control interface", details={"device": info.label})

        self._interface_number = intf.bInterfaceNumber
        self._units = parse_video_control_units(intf.extra_descriptors)

        if detach_kernel_driver:
            self._detach_kernel_driver()

        log.info(
            "UVC camera opened",
            device=info.label,
            interface=self._interface_number,
            units=", ".join(f"{u.name}={i.unit_id}" for u, i in self._units.items()) or "none"
        )

    @classmethod
    def open(cls, info: DeviceInfo, detach_kernel_driver: bool = False) -> "UvcCamera":
        for dev in find_uvc_devices(info.vendor_id, info.product_id):
            if info.bus is None or (dev.bus == info.bus and dev.address == info.address):
                return cls(dev, info, detach_kernel_driver=detach_kernel_driver)
        raise DeviceError("Camera disappeared before it could be opened", details={"device": info.label})

    @property
    def info(self) -> DeviceInfo:
        return self._info

    def _detach_kernel_driver(self) -> None:
        try:
            if self._device.is_kernel_driver_active(self._interface_number):
                self._device.detach_kernel_driver(self._interface_number)
                self._detached = True
                log.info("Kernel driver detached", interface=self._interface_number)
        except (usb.core.USBError, NotImplementedError) as e:
            log.warn("Could not detach kernel driver", reason=str(e))

    # -------------------------------
    # Transfers (blocking)
    # -------------------------------

    def _lookup(self, name: str) -> UvcControl:
        control = CONTROLS_BY_NAME.get(name)
        if control is None or not self._is_supported(control):
            raise UnknownControlError(name)
        return control

    def _is_supported(self, control: UvcControl) -> bool:
        unit = self._units.get(control.unit)
        return unit is not None and unit.supports(control.bit)

    def _w_index(self, control: UvcControl) -> int:
        return (self._units[control.unit].unit_id << 8) | self._interface_number

    def _get(self, control: UvcControl, request: int) -> bytes:
        data = self._device.ctrl_transfer(
            uvc.REQ_TYPE_GET,
            request,
            control.selector << 8,
            self._w_index(control),
            control.length,
            CONTROL_TIMEOUT_MS,
        )
        return bytes(data)

    def _set(self, control: UvcControl, payload: bytes) -> None:
        written = self._device.ctrl_transfer(
            uvc.REQ_TYPE_SET,
            uvc.SET_CUR,
            control.selector << 8,
            self._w_index(control),
            payload,
            CONTROL_TIMEOUT_MS,
        )
        if written != len(payload):
            raise usb.core.USBError(f"short write ({written}/{len(payload)} bytes)")

    def _read_value(self, name: str) -> RawValue:
        control = self._lookup(name)
        try:
            return decode_value(control, self._get(control, uvc.GET_CUR))
        except (usb.core.USBError, ValueError) as e:
            raise ControlFetchError(name, str(e)) from e

    def _read_range(self, name: str) -> RawRange:
        control = self._lookup(name)
        if not control.supports_range:
            return None
        try:
            return decode_range(
                control,
                self._get(control, uvc.GET_MIN),
                self._get(control, uvc.GET_MAX),
            )
        except (usb.core.USBError, ValueError) as e:
            raise ControlFetchError(name, str(e)) from e

    def _write_value(self, name: str, value: WriteValue) -> None:
        control = self._lookup(name)
        try:
            self._set(control, encode_value(control, value))
        except (usb.core.USBError, ValueError) as e:
            raise ControlWriteError(name, value, str(e)) from e

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn, *args)

    # -------------------------------
    # IDescriptorSource
    # -------------------------------

    async def supported_controls(self) -> List[str]:
        return [c.name for c in CONTROLS if self._is_supported(c)]

    async def get_descriptor(self, name: str) -> ControlDescriptor:
        return self._lookup(name).to_descriptor()

    async def get_value(self, name: str) -> RawValue:
        return await self._run(self._read_value, name)

    async def get_range(self, name: str) -> RawRange:
        return await self._run(self._read_range, name)

    async def set_value(self, name: str, value: WriteValue) -> None:
        await self._run(self._write_value, name, value)
        log.debug("Control written", control=name, value=value)

    def close(self) -> None:
        if self._detached:
            try:
                self._device.attach_kernel_driver(self._interface_number)
            except usb.core.USBError as e:
                log.warn("Could not re-attach kernel driver", reason=str(e))
        usb.util.dispose_resources(self._device)
        log.info("UVC camera closed", device=self._info.label)
