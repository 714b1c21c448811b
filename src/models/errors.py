"""
Domain errors

Device-level failures are wrapped into these at the descriptor source
boundary so the session never sees transport-specific exceptions.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DeviceError(DomainError):
    """Device unavailable or transport error"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="DEVICE_ERROR",
            message=message,
            details=details
        )


class DeviceNotFoundError(DomainError):
    """Discovery returned no usable device"""
    def __init__(self, backend: str, details: Optional[dict] = None):
        super().__init__(
            code="DEVICE_NOT_FOUND",
            message=f"No {backend} camera found",
            details={"backend": backend, **(details or {})}
        )


class UnknownControlError(DomainError):
    """Control name is not exposed by the device"""
    def __init__(self, name: str):
        super().__init__(
            code="UNKNOWN_CONTROL",
            message=f"Control '{name}' is not supported by this device",
            details={"control": name}
        )


class ControlFetchError(DomainError):
    """Descriptor, value or range of one control could not be read"""
    def __init__(self, name: str, reason: str):
        super().__init__(
            code="CONTROL_FETCH_FAILED",
            message=f"Could not fetch control '{name}': {reason}",
            details={"control": name, "reason": reason}
        )


class ControlWriteError(DomainError):
    """Device rejected or failed a value write"""
    def __init__(self, name: str, value, reason: str):
        super().__init__(
            code="CONTROL_WRITE_FAILED",
            message=f"Could not set '{name}' to {value}: {reason}",
            details={"control": name, "value": value, "reason": reason}
        )
