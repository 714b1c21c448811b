"""
UVC camera access

- IDescriptorSource: what the session needs from a camera
- UvcCamera: real USB Video Class device (pyusb)
- VirtualCamera: in-memory camera
"""
from .descriptor_source import IDescriptorSource, DeviceInfo, WriteValue
from .virtual_camera import VirtualCamera
from .factory import create_descriptor_source

__all__ = [
    "IDescriptorSource",
    "DeviceInfo",
    "WriteValue",
    "VirtualCamera",
    "create_descriptor_source",
]
