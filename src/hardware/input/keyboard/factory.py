import asyncio
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory
from .adapters.base import IKeyboardAdapter
from .adapters.stdin import StdinKeyboardAdapter

log = get_logger().for_category(LogCategory.INPUT)


async def start_keyboard(event_bus: EventBus, adapter: IKeyboardAdapter = None) -> None:
    """
    Run the keyboard adapter until cancelled.

    Raises:
        RuntimeError: Keyboard input unavailable (e.g. stdin is not a TTY)
    """
    adapter = adapter or StdinKeyboardAdapter(event_bus)
    log.info("Starting keyboard adapter", adapter=adapter.__class__.__name__)

    try:
        await adapter.run()
    except asyncio.CancelledError:
        raise
    except Exception as e:
        log.error(
            "Keyboard adapter failed",
            adapter=adapter.__class__.__name__,
            reason=str(e)
        )
        raise RuntimeError("Keyboard input unavailable") from e
