"""
Tests for the shutdown coordinator and handlers
"""

import asyncio
import contextlib

import pytest

from hardware.uvc.virtual_camera import VirtualCamera
from lifecycle.handlers import CameraShutdownHandler, SessionShutdownHandler, TaskCancellationHandler
from lifecycle.shutdown_coordinator import ShutdownCoordinator
from services.control_session import ControlSession


class RecordingHandler:
    def __init__(self, name, priority, calls, error=None):
        self.name = name
        self.priority = priority
        self.calls = calls
        self.error = error

    @property
    def shutdown_priority(self):
        return self.priority

    async def shutdown(self):
        self.calls.append(self.name)
        if self.error:
            raise self.error


@pytest.mark.asyncio
async def test_returns_on_trigger():
    coordinator = ShutdownCoordinator()

    async def trigger_later():
        await asyncio.sleep(0.01)
        coordinator.trigger("SIGINT")

    asyncio.ensure_future(trigger_later())
    await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=1.0)

    assert coordinator.reason == "SIGINT"


@pytest.mark.asyncio
async def test_returns_when_watched_task_finishes():
    coordinator = ShutdownCoordinator()

    async def finishes():
        await asyncio.sleep(0.01)

    async def runs_forever():
        await asyncio.sleep(3600)

    done_task = asyncio.ensure_future(finishes())
    forever = asyncio.ensure_future(runs_forever())
    try:
        await asyncio.wait_for(coordinator.wait_for_shutdown([done_task, forever]), timeout=1.0)
        assert coordinator.reason.startswith("task finished")
        assert not forever.done()
    finally:
        forever.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await forever


@pytest.mark.asyncio
async def test_first_reason_wins():
    coordinator = ShutdownCoordinator()
    coordinator.trigger("quit")
    coordinator.trigger("SIGTERM")
    assert coordinator.reason == "quit"


@pytest.mark.asyncio
async def test_handlers_run_by_priority_and_failures_continue():
    calls = []
    coordinator = ShutdownCoordinator()
    coordinator.register(RecordingHandler("low", 10, calls))
    coordinator.register(RecordingHandler("high", 100, calls, error=RuntimeError("boom")))
    coordinator.register(RecordingHandler("mid", 50, calls))

    await coordinator.shutdown_all()

    assert calls == ["high", "mid", "low"]


@pytest.mark.asyncio
async def test_hanging_handler_times_out():
    calls = []

    class Hangs:
        shutdown_priority = 90

        async def shutdown(self):
            await asyncio.sleep(3600)

    coordinator = ShutdownCoordinator(timeout_per_handler=0.01)
    coordinator.register(Hangs())
    coordinator.register(RecordingHandler("after", 1, calls))

    await coordinator.shutdown_all()

    assert calls == ["after"]


def test_register_rejects_incomplete_handler():
    coordinator = ShutdownCoordinator()
    with pytest.raises(ValueError):
        coordinator.register(object())


@pytest.mark.asyncio
async def test_task_cancellation_handler():
    task = asyncio.ensure_future(asyncio.sleep(3600))
    await TaskCancellationHandler([task]).shutdown()
    assert task.cancelled()


@pytest.mark.asyncio
async def test_session_and_camera_handlers(scenario_camera, event_bus):
    session = ControlSession(scenario_camera, event_bus)
    await session.start()

    coordinator = ShutdownCoordinator()
    coordinator.trigger("SIGTERM")
    coordinator.register(SessionShutdownHandler(session, coordinator))
    coordinator.register(CameraShutdownHandler(scenario_camera))

    await coordinator.shutdown_all()

    assert session.is_closed
    assert session.close_reason == "SIGTERM"
    assert scenario_camera.closed


@pytest.mark.asyncio
async def test_session_handler_leaves_closed_session_alone(event_bus):
    session = ControlSession(VirtualCamera([]), event_bus)
    await session.start()
    await session.quit()

    await SessionShutdownHandler(session).shutdown()

    assert session.close_reason == "quit"
