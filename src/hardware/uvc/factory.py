# factory.py
from models.config import DeviceConfig
from models.enums import DeviceBackend
from models.errors import DeviceNotFoundError
from hardware.uvc.descriptor_source import IDescriptorSource
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DEVICE)


def create_descriptor_source(config: DeviceConfig) -> IDescriptorSource:
    """
    Discover cameras for the configured backend and open one of them.

    Raises:
        DeviceNotFoundError: Discovery found nothing at the configured index
    """
    if config.backend == DeviceBackend.VIRTUAL:
        from hardware.uvc.virtual_camera import VirtualCamera
        log.info("Using virtual camera")
        return VirtualCamera()

    from hardware.uvc.uvc_camera import UvcCamera, discover

    devices = discover(config.vendor_id, config.product_id)
    if len(devices) <= config.index:
        raise DeviceNotFoundError(
            config.backend.name,
            details={"found": len(devices), "index": config.index}
        )

    info = devices[config.index]
    log.info("Opening camera", device=info.label, index=config.index)
    return UvcCamera.open(info, detach_kernel_driver=config.detach_kernel_driver)
