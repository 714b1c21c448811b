"""
IDescriptorSource Protocol
==========================
Boundary between the session and a camera.

Minimal contract for any device backend (UVC over USB, virtual camera).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Union, Mapping, Sequence

from models.control import ControlDescriptor, RawRange, RawValue

# What set_value accepts: a number for single-field controls, a
# sub-field -> number mapping or an ordered sequence for multi-field ones
WriteValue = Union[float, Mapping[str, float], Sequence[float]]


@dataclass(frozen=True)
class DeviceInfo:
    """Addressable camera returned by discovery"""
    vendor_id: int
    product_id: int
    bus: Optional[int] = None
    address: Optional[int] = None
    name: str = ""

    @property
    def label(self) -> str:
        ident = f"{self.vendor_id:04x}:{self.product_id:04x}"
        return f"{self.name} ({ident})" if self.name else ident


class IDescriptorSource(Protocol):
    """
    Protocol every camera backend implements.

    - supported_controls: names the device exposes, in device order
    - get_descriptor / get_value: raise ControlFetchError on failure
    - get_range: None when the control can't report a range (not an error),
      ControlFetchError when the query itself fails
    - set_value: atomic from the caller's view; raises ControlWriteError
    """

    @property
    def info(self) -> DeviceInfo:
        ...

    async def supported_controls(self) -> List[str]:
        ...

    async def get_descriptor(self, name: str) -> ControlDescriptor:
        ...

    async def get_value(self, name: str) -> RawValue:
        ...

    async def get_range(self, name: str) -> RawRange:
        ...

    async def set_value(self, name: str, value: WriteValue) -> None:
        ...

    def close(self) -> None:
        ...
