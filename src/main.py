#!/usr/bin/env python3
"""
main.py - Application entry point for uvcctl
--------------------------------------------

Responsible for:
- loading configuration and setting up logging
- opening the camera and wiring session, renderer and keyboard
- graceful shutdown on q, Ctrl+C, SIGTERM or a failed write

Exit status: 0 on quit or signal, 1 when no camera was found, the session
could not start, keyboard input is unavailable or a write was rejected.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

# Set UTF-8 encoding for output (« » markers and log symbols)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding and sys.stdout.encoding.upper() != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding and sys.stderr.encoding.upper() != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

from hardware.input.keyboard import start_keyboard
from hardware.uvc import create_descriptor_source
from lifecycle import ShutdownCoordinator
from lifecycle.handlers import CameraShutdownHandler, SessionShutdownHandler, TaskCancellationHandler
from managers import ConfigManager
from models.config import LoggingConfig
from models.enums import LogCategory, LogLevel
from models.errors import ControlWriteError, DomainError
from services import ControlSession, EventBus
from services.middleware import log_middleware
from ui import TerminalRenderer
from utils.logger import get_logger, configure_logger

__version__ = "0.1.0"

log = get_logger().for_category(LogCategory.SYSTEM)

EXAMPLES = """\
examples:
  $ uvcctl                          adjust the first camera found
  $ uvcctl --config ~/uvcctl.yaml   use another config file

keys:
  up/k, down/j      select a control
  left/h, right/l   decrease / increase (toggle, cycle options)
  q                 quit
"""


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="uvcctl",
        description="Adjust USB Video Class camera controls from the terminal.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="YAML config file (default: config/config.yaml next to the sources)",
    )
    return parser.parse_args(argv)


def setup_logging(config: LoggingConfig):
    """
    Point the logger at stderr or the configured file

    Returns:
        Opened log file (caller closes it) or None
    """
    stream = None
    if config.file:
        try:
            stream = open(config.file, "a", encoding="utf-8")
        except OSError as e:
            log.warn("Could not open log file, logging to stderr", file=config.file, reason=str(e))

    configure_logger(
        min_level=config.level,
        use_colors=config.colors and stream is None,
        stream=stream,
    )
    return stream


async def main(args: argparse.Namespace) -> int:
    """Main async entry point (dependency injection and event loop startup)."""

    # Warnings only until the configured level is known
    configure_logger(min_level=LogLevel.WARN)
    config = ConfigManager(args.config).load()
    log_file = setup_logging(config.logging)

    try:
        return await run_session(config)
    finally:
        if log_file is not None:
            configure_logger(min_level=config.logging.level, use_colors=config.logging.colors)
            log_file.close()


async def run_session(config) -> int:
    log.info("Starting uvcctl", version=__version__)

    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)

    # ========================================================================
    # 1. DEVICE
    # ========================================================================

    try:
        source = create_descriptor_source(config.device)
    except DomainError as e:
        log.error("No camera available", reason=e.message, code=e.code)
        return 1

    # ========================================================================
    # 2. SESSION + RENDERER
    # ========================================================================

    TerminalRenderer(
        event_bus,
        width=config.ui.bar_width,
        clear_screen=config.ui.clear_screen,
        use_colors=config.ui.colors,
    )
    session = ControlSession(source, event_bus)

    try:
        await session.start()
    except Exception as e:
        log.error("Could not read camera controls", error=str(e), error_type=type(e).__name__)
        source.close()
        return 1

    # ========================================================================
    # 3. INPUT + SHUTDOWN
    # ========================================================================

    keyboard_task = asyncio.create_task(start_keyboard(event_bus), name="keyboard")
    session_task = asyncio.create_task(session.wait_closed(), name="session")

    coordinator = ShutdownCoordinator()
    coordinator.register(SessionShutdownHandler(session, coordinator))
    coordinator.register(TaskCancellationHandler([keyboard_task]))
    coordinator.register(CameraShutdownHandler(source))
    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    await coordinator.wait_for_shutdown([session_task, keyboard_task])
    await coordinator.shutdown_all()
    # Closing the session above lets its waiter finish
    await asyncio.wait([session_task], timeout=1.0)

    return exit_status(session_task, keyboard_task)


def exit_status(session_task: asyncio.Task, keyboard_task: asyncio.Task) -> int:
    """Map how the session and keyboard ended to a process exit status"""
    if not session_task.done() or session_task.cancelled():
        return 1

    error = session_task.exception()
    if isinstance(error, ControlWriteError):
        log.error("Exiting after failed write", control=error.details.get("control"), reason=error.details.get("reason"))
        return 1
    if error is not None:
        log.error("Session ended with an error", error=str(error), error_type=type(error).__name__)
        return 1

    if keyboard_task.done() and not keyboard_task.cancelled() and keyboard_task.exception() is not None:
        log.error("Keyboard input failed", error=str(keyboard_task.exception()))
        return 1

    return 0


def run(argv: Optional[List[str]] = None) -> None:
    """Console script entry point"""
    args = parse_args(argv)
    try:
        status = asyncio.run(main(args))
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
        status = 0
    sys.exit(status)


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    run()
