import asyncio
import sys
import select
import termios
import tty
from typing import Optional, List
from services.event_bus import EventBus
from models.events import KeyboardKeyPressEvent
from utils.logger import get_logger, LogCategory
from .base import IKeyboardAdapter

log = get_logger().for_category(LogCategory.INPUT)

# CSI (ESC [) and SS3 (ESC O) arrow sequences; terminals in application
# cursor mode send the latter
ARROW_SEQUENCES = {
    '\x1b[A': 'UP',
    '\x1b[B': 'DOWN',
    '\x1b[C': 'RIGHT',
    '\x1b[D': 'LEFT',
    '\x1bOA': 'UP',
    '\x1bOB': 'DOWN',
    '\x1bOC': 'RIGHT',
    '\x1bOD': 'LEFT',
}


class StdinKeyboardAdapter(IKeyboardAdapter):
    """
    Terminal keyboard adapter

    Intended for:
    - Local Unix terminals
    - SSH sessions

    Features:
    - Async-friendly (select + asyncio)
    - Escape sequence handling (arrow keys)
    - Ctrl+Key detection
    - Terminal put in cbreak mode, restored on exit

    Publishes KeyboardKeyPressEvent to EventBus and awaits the publish, so a
    key is fully handled before the next one is read.
    """

    def __init__(self, event_bus: EventBus, stdin=None):
        self.event_bus = event_bus
        self._stdin = stdin or sys.stdin
        self._old_settings = None
        self._buffer = ""

    async def run(self) -> None:
        """
        Main async loop reading from stdin (non-blocking with select.select())

        Blocks until cancelled. Raises RuntimeError if stdin is not a TTY.
        """
        if not self._stdin.isatty():
            log.warn("STDIN is not a TTY, cannot read keys")
            raise RuntimeError("STDIN is not a TTY")

        self._old_settings = termios.tcgetattr(self._stdin)
        tty.setcbreak(self._stdin.fileno())

        log.info("STDIN keyboard adapter active (cbreak mode enabled)")

        try:
            while True:
                ready, _, _ = select.select([self._stdin], [], [], 0.01)

                if not ready:
                    # Yield control to event loop
                    await asyncio.sleep(0)
                    continue

                try:
                    char = self._stdin.read(1)
                except (IOError, OSError) as e:
                    log.error("STDIN read error, stopping adapter", reason=str(e))
                    raise RuntimeError("STDIN read failed") from e

                if not char:
                    continue

                self._buffer += char
                await self._process_buffer()

        except asyncio.CancelledError:
            log.debug("STDIN keyboard adapter cancelled")
            raise

        finally:
            # Restore terminal settings (always runs, even on cancellation)
            if self._old_settings:
                termios.tcsetattr(self._stdin, termios.TCSADRAIN, self._old_settings)
                log.debug("Terminal settings restored")

    async def _process_buffer(self) -> None:
        """
        Consume buffered input and emit keyboard events.

        Emits as soon as a full token is available; an incomplete escape
        sequence stays buffered until the rest arrives.
        """
        while self._buffer:
            # Arrow keys: ESC [ A-D / ESC O A-D
            if self._buffer.startswith(('\x1b[', '\x1bO')):
                if len(self._buffer) < 3:
                    return  # wait for full sequence

                seq = self._buffer[:3]
                self._buffer = self._buffer[3:]

                key = ARROW_SEQUENCES.get(seq)
                if key:
                    await self._publish_key(key)
                else:
                    log.debug("Unknown escape sequence", sequence=repr(seq))
                continue

            # Standalone ESC (only if nothing else follows)
            if self._buffer == '\x1b':
                return

            if self._buffer.startswith('\x1b'):
                self._buffer = self._buffer[1:]
                await self._publish_key("ESCAPE")
                continue

            char = self._buffer[0]
            self._buffer = self._buffer[1:]

            if char in ('\r', '\n'):
                await self._publish_key("ENTER")
            elif char == '\t':
                await self._publish_key("TAB")
            elif char == '\x7f':
                await self._publish_key("BACKSPACE")
            elif char == ' ':
                await self._publish_key("SPACE")
            elif '\x01' <= char <= '\x1a':
                key = chr(ord(char) + 96).upper()
                await self._publish_key(key, modifiers=["CTRL"])
            elif char.isprintable():
                if char.isupper():
                    await self._publish_key(char, modifiers=["SHIFT"])
                else:
                    await self._publish_key(char.upper())

    async def _publish_key(self, key: str, modifiers: Optional[List[str]] = None) -> None:
        log.debug(f"Keyboard key pressed (stdin): {key}", modifiers=modifiers)
        await self.event_bus.publish(KeyboardKeyPressEvent(key, modifiers))
