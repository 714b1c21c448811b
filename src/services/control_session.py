"""
Control Session - interactive navigate/adjust loop over one camera

Owns the active row index and the current field list. Every adjustment is
written through to the device and followed by a full rebuild; the field list
is never patched locally.

Keypresses are serialized by the EventBus: the keyboard adapter awaits
publish(), which awaits on_keypress(), so a write and its rebuild finish
before the next key is read.
"""

import asyncio
from typing import Dict, List, Optional, TYPE_CHECKING

from models.enums import SessionIntent
from models.errors import ControlWriteError
from models.events import (
    ControlWrittenEvent,
    EventType,
    KeyboardKeyPressEvent,
    SessionClosedEvent,
    SessionStateChangedEvent,
)
from models.field import Field
from services.adjustment_engine import step, to_device_value
from services.event_bus import EventBus
from services.field_list_builder import FieldList, FieldListBuilder
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from hardware.uvc.descriptor_source import IDescriptorSource

log = get_logger().for_category(LogCategory.SESSION)

KEY_BINDINGS: Dict[str, SessionIntent] = {
    "UP": SessionIntent.NAVIGATE_UP,
    "K": SessionIntent.NAVIGATE_UP,
    "DOWN": SessionIntent.NAVIGATE_DOWN,
    "J": SessionIntent.NAVIGATE_DOWN,
    "LEFT": SessionIntent.ADJUST_LEFT,
    "H": SessionIntent.ADJUST_LEFT,
    "RIGHT": SessionIntent.ADJUST_RIGHT,
    "L": SessionIntent.ADJUST_RIGHT,
    "Q": SessionIntent.QUIT,
}


class ControlSession:
    """
    One interactive session against a descriptor source

    Example:
        session = ControlSession(camera, event_bus)
        await session.start()
        await session.wait_closed()      # raises ControlWriteError on a failed write
    """

    def __init__(
        self,
        source: "IDescriptorSource",
        event_bus: EventBus,
        builder: Optional[FieldListBuilder] = None
    ):
        self.source = source
        self.event_bus = event_bus
        self.builder = builder or FieldListBuilder(source)

        self.active_index = 0
        self.field_list = FieldList()

        self._closed = asyncio.Event()
        self._close_reason: Optional[str] = None
        self._error: Optional[Exception] = None

    # -------------------------------
    # State
    # -------------------------------

    @property
    def fields(self) -> List[Field]:
        """Navigable fields, in display order"""
        return self.field_list.navigable

    @property
    def active_field(self) -> Optional[Field]:
        if not self.fields:
            return None
        return self.fields[self.active_index]

    @property
    def is_closed(self) -> bool:
        return self._closed.is_set()

    @property
    def close_reason(self) -> Optional[str]:
        return self._close_reason

    # -------------------------------
    # Lifecycle
    # -------------------------------

    async def start(self) -> None:
        """
        Build the initial list and start listening for keys

        Errors from the initial rebuild propagate: without a first list there
        is nothing to show.
        """
        self.field_list = await self.builder.rebuild()
        self.active_index = 0

        log.info(
            "Session started",
            device=self.source.info.label,
            fields=len(self.fields),
            skipped=len(self.field_list.skipped)
        )

        self.event_bus.subscribe(
            EventType.KEYBOARD_KEYPRESS,
            self.on_keypress,
            priority=10,
            filter_fn=lambda e: not e.modifiers
        )
        await self._publish_state()

    async def close(self, reason: str, error: Optional[Exception] = None) -> None:
        """Close once; later calls are ignored"""
        if self.is_closed:
            return

        self._close_reason = reason
        self._error = error
        self.event_bus.unsubscribe(EventType.KEYBOARD_KEYPRESS, self.on_keypress)
        self._closed.set()

        log.info("Session closed", reason=reason)
        await self.event_bus.publish(SessionClosedEvent(reason, error))

    async def quit(self) -> None:
        await self.close("quit")

    async def wait_closed(self) -> None:
        """
        Block until the session closes

        Raises:
            ControlWriteError: The session closed because a write failed
        """
        await self._closed.wait()
        if self._error is not None:
            raise self._error

    # -------------------------------
    # Input
    # -------------------------------

    async def on_keypress(self, event: KeyboardKeyPressEvent) -> None:
        intent = KEY_BINDINGS.get(event.key)
        if intent is None:
            log.debug("Unbound key ignored", key=event.key)
            return
        await self.handle_intent(intent)

    async def handle_intent(self, intent: SessionIntent) -> None:
        if self.is_closed:
            return

        if intent == SessionIntent.NAVIGATE_UP:
            await self.navigate(-1)
        elif intent == SessionIntent.NAVIGATE_DOWN:
            await self.navigate(1)
        elif intent == SessionIntent.ADJUST_LEFT:
            await self.adjust(increase=False)
        elif intent == SessionIntent.ADJUST_RIGHT:
            await self.adjust(increase=True)
        elif intent == SessionIntent.QUIT:
            await self.quit()

    # -------------------------------
    # Operations
    # -------------------------------

    async def navigate(self, delta: int) -> None:
        """Move the active row; stops at both ends"""
        if not self.fields:
            return

        new_index = max(0, min(len(self.fields) - 1, self.active_index + delta))
        if new_index == self.active_index:
            return

        self.active_index = new_index
        log.debug("Active field changed", index=new_index, field=self.fields[new_index].name)
        await self._publish_state()

    async def adjust(self, increase: bool) -> None:
        """
        Step the active field, write it, rebuild

        A rejected write closes the session; the list is left as it was.
        """
        field = self.active_field
        if field is None:
            return

        value = to_device_value(field, step(field, increase), increase)

        try:
            await self.source.set_value(field.name, value)
        except ControlWriteError as e:
            log.error("Write failed, closing session", control=field.name, value=value, reason=e.message)
            await self.close("write_failed", e)
            return

        log.info("Control written", control=field.name, previous=field.value, value=value)
        await self.event_bus.publish(ControlWrittenEvent(field.name, field.value, value))
        await self.rebuild()

    async def rebuild(self) -> None:
        """
        Re-fetch everything from the device

        On failure the previous list stays on screen until the next action.
        """
        try:
            field_list = await self.builder.rebuild()
        except Exception as e:
            log.error("Rebuild failed, keeping previous list", error=str(e), error_type=type(e).__name__)
            return

        self.field_list = field_list
        self.active_index = max(0, min(self.active_index, len(self.fields) - 1))
        await self._publish_state()

    async def _publish_state(self) -> None:
        await self.event_bus.publish(SessionStateChangedEvent(list(self.fields), self.active_index))
