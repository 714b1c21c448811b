"""
Shutdown handler protocol for component-based graceful shutdown.
"""

from typing import Protocol


class IShutdownHandler(Protocol):
    """
    Protocol for components that need graceful shutdown.

    Example:
        class CameraShutdownHandler:
            @property
            def shutdown_priority(self) -> int:
                return 10  # Shutdown last

            async def shutdown(self) -> None:
                self.camera.close()
    """

    @property
    def shutdown_priority(self) -> int:
        """
        Higher priority shuts down earlier.
        """
        ...

    async def shutdown(self) -> None:
        ...
