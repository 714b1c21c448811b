"""
Shutdown handlers for application components.

Each handler is responsible for shutting down one aspect of the application.
They are called in priority order by ShutdownCoordinator.
"""

from .camera_shutdown_handler import CameraShutdownHandler
from .session_shutdown_handler import SessionShutdownHandler
from .task_cancellation_handler import TaskCancellationHandler

__all__ = [
    "CameraShutdownHandler",
    "SessionShutdownHandler",
    "TaskCancellationHandler",
]
