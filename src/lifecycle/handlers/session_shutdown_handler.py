from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from lifecycle.shutdown_coordinator import ShutdownCoordinator
    from services.control_session import ControlSession

log = get_logger().for_category(LogCategory.SHUTDOWN)


class SessionShutdownHandler(IShutdownHandler):
    """
    Closes the control session if it is still open (signal, keyboard loss).

    Priority: 100 (first)
    """

    def __init__(self, session: "ControlSession", coordinator: Optional["ShutdownCoordinator"] = None):
        self.session = session
        self.coordinator = coordinator

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        if self.session.is_closed:
            return
        reason = (self.coordinator.reason if self.coordinator else None) or "shutdown"
        log.debug("Closing session", reason=reason)
        await self.session.close(reason)
