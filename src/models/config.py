"""
Configuration models

Built from config.yaml by ConfigManager. Every field has a default so a
missing or partial file still yields a complete AppConfig.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.enums import DeviceBackend, LogLevel


@dataclass
class DeviceConfig:
    """
    Camera selection

    Attributes:
        backend: UVC (real USB device) or VIRTUAL (in-memory camera)
        vendor_id: Only consider devices with this USB vendor id
        product_id: Only consider devices with this USB product id
        index: Which discovered device to open (0 = first)
        detach_kernel_driver: Detach uvcvideo from the control interface before use
    """
    backend: DeviceBackend = DeviceBackend.UVC
    vendor_id: Optional[int] = None
    product_id: Optional[int] = None
    index: int = 0
    detach_kernel_driver: bool = False


@dataclass
class UIConfig:
    bar_width: int = 24
    clear_screen: bool = True
    colors: bool = True


@dataclass
class LoggingConfig:
    level: LogLevel = LogLevel.WARN
    colors: bool = True
    file: Optional[str] = None   # None = stderr


@dataclass
class AppConfig:
    device: DeviceConfig = field(default_factory=DeviceConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
