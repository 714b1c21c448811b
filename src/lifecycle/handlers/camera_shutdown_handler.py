from __future__ import annotations

from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from hardware.uvc.descriptor_source import IDescriptorSource

log = get_logger().for_category(LogCategory.SHUTDOWN)


class CameraShutdownHandler(IShutdownHandler):
    """
    Releases the camera (USB resources, kernel driver re-attach).

    Priority: 10 (shutdown last)
    """

    def __init__(self, source: "IDescriptorSource"):
        self.source = source

    @property
    def shutdown_priority(self) -> int:
        return 10

    async def shutdown(self) -> None:
        log.info("Releasing camera...")
        self.source.close()
