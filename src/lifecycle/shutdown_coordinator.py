"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Manages signal handlers, waits for the first reason to stop (signal, session
closed, keyboard failure) and runs shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import Iterable, List, Optional

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(TaskCancellationHandler([keyboard_task]))
        coordinator.register(CameraShutdownHandler(camera))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown([session_task, keyboard_task])
        await coordinator.shutdown_all()
    """

    def __init__(self, timeout_per_handler: float = 5.0):
        """
        Args:
            timeout_per_handler: Timeout for each individual handler (seconds)
        """
        self._handlers: List = []
        self._shutdown_event = asyncio.Event()
        self._timeout_per_handler = timeout_per_handler
        self.reason: Optional[str] = None

    def register(self, handler) -> None:
        """
        Register a shutdown handler.

        Handler must have a shutdown_priority property and an async shutdown().
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def trigger(self, reason: str) -> None:
        """Request shutdown; the first reason wins"""
        if self.reason is None:
            self.reason = reason
        self._shutdown_event.set()

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT and SIGTERM handlers that trigger shutdown"""

        def signal_handler(sig: signal.Signals) -> None:
            log.info(f"Signal {sig.name} received, triggering shutdown")
            self.trigger(sig.name)

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))

        log.debug("Signal handlers installed (SIGINT, SIGTERM)")

    async def wait_for_shutdown(self, watched: Iterable[asyncio.Task] = ()) -> None:
        """
        Return on a shutdown signal or as soon as any watched task finishes.

        Watched tasks are not cancelled here; their results stay available to
        the caller.
        """
        waiter = asyncio.ensure_future(self._shutdown_event.wait())
        wait_set = {waiter, *watched}

        try:
            done, _ = await asyncio.wait(wait_set, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not waiter.done():
                waiter.cancel()

        for task in done:
            if task is not waiter:
                self.trigger(f"task finished: {task.get_name()}")

    async def shutdown_all(self) -> None:
        """
        Execute graceful shutdown of all handlers in priority order.

        Handlers are called highest priority first. A failing or hanging
        handler is logged and the sequence continues.
        """
        log.info("Initiating shutdown sequence", reason=self.reason or "UNKNOWN")

        for handler in sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True):
            handler_name = handler.__class__.__name__
            try:
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"{handler_name} shutdown complete")

            except asyncio.TimeoutError:
                log.error(f"{handler_name} shutdown timeout ({self._timeout_per_handler}s)")

            except Exception as e:
                log.error(f"Error shutting down {handler_name}", error=str(e), error_type=type(e).__name__)

        log.info("Shutdown sequence complete")
