"""
Shared fixtures

Puts src/ on sys.path (the application imports its packages top-level) and
provides a virtual camera, an event bus and a small control set.
"""

import io
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hardware.uvc.virtual_camera import VirtualCamera, scalar  # noqa: E402
from models.enums import LogLevel  # noqa: E402
from services.event_bus import EventBus  # noqa: E402
from utils.logger import configure_logger  # noqa: E402

WHITE_BALANCE_MODES = (("manual", 0), ("auto", 1))


@pytest.fixture(autouse=True)
def quiet_logger():
    """Collect log output instead of writing to stderr"""
    stream = io.StringIO()
    configure_logger(min_level=LogLevel.DEBUG, use_colors=False, stream=stream)
    yield stream
    configure_logger(min_level=LogLevel.WARN, use_colors=True, stream=None)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def camera():
    """Webcam-like default control set"""
    return VirtualCamera()


@pytest.fixture
def scenario_camera():
    """
    Three controls: auto_focus (boolean), brightness 128 in 0..255,
    white_balance (select, code 0 of manual/auto)
    """
    return VirtualCamera([
        scalar("auto_focus", 1, type_hint="boolean"),
        scalar("brightness", 128, 0, 255),
        scalar("white_balance", 0, options=WHITE_BALANCE_MODES, type_hint="enum"),
    ])
