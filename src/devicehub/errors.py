"""Error types and constants for consistent error handling across the application."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standardized error codes for consistent error handling."""

    # Lookup errors
    DEVICE_NOT_FOUND = "device_not_found"
    COMMAND_NOT_FOUND = "command_not_found"

    # Device-related errors
    DEVICE_DISCONNECTED = "device_disconnected"
    DEVICE_TIMEOUT = "device_timeout"
    DEVICE_RESPONSE_ERROR = "device_response_error"

    # Transport errors
    NETWORK_ERROR = "network_error"
    PROTOCOL_UNIMPLEMENTED = "protocol_unimplemented"

    # Vendor API errors
    VENDOR_API_ERROR = "vendor_api_error"
    LINK_BUTTON_NOT_PRESSED = "link_button_not_pressed"

    # Validation errors
    VALIDATION_ERROR = "validation_error"
    INVALID_TRANSITION = "invalid_transition"

    # Generic errors
    INTERNAL_ERROR = "internal_error"


class IoTError(Exception):
    """Base exception class for devicehub errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize the error.

        Args:
            code: Error code identifier
            message: Human-readable error message
            details: Additional error context and data
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(IoTError):
    """Raised when a device or command id is unknown."""


class DeviceNotFoundError(NotFoundError):
    """Raised when a device is not found."""

    def __init__(self, device_id: str, details: Optional[Dict[str, Any]] = None):
        """Initialize device not found error.

        Args:
            device_id: Device id that was not found
            details: Additional error context
        """
        super().__init__(
            ErrorCode.DEVICE_NOT_FOUND,
            f"Device {device_id} not found",
            details={"device_id": device_id, **(details or {})},
        )


class CommandNotFoundError(NotFoundError):
    """Raised when a command id is not defined on a device."""

    def __init__(self, command_id: str, device_name: str):
        """Initialize command not found error.

        Args:
            command_id: Command id that was not found
            device_name: Name of the device that was searched
        """
        super().__init__(
            ErrorCode.COMMAND_NOT_FOUND,
            f"Command {command_id} not found on device {device_name}",
            details={"command_id": command_id, "device_name": device_name},
        )


class InputValidationError(IoTError):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorCode.VALIDATION_ERROR, message, details)


class InvalidTransitionError(IoTError):
    """Raised when an execution would move backwards or leave a terminal state."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            ErrorCode.INVALID_TRANSITION,
            f"Cannot transition execution from '{current}' to '{requested}'",
            details={"current": current, "requested": requested},
        )


class ProtocolNotImplementedError(IoTError):
    """Raised by placeholder adapters for protocols without a transport."""

    def __init__(self, protocol: str):
        super().__init__(
            ErrorCode.PROTOCOL_UNIMPLEMENTED,
            f"Protocol {protocol} not implemented",
            details={"protocol": protocol},
        )


class NetworkError(IoTError):
    """Raised when a request could not reach its target."""

    def __init__(
        self,
        target: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize network error.

        Args:
            target: URL or address that failed
            cause: Original transport exception
            details: Additional error context
        """
        message = f"Request to {target} failed"
        if cause:
            message += f": {cause}"
        super().__init__(
            ErrorCode.NETWORK_ERROR,
            message,
            details={"target": target, **(details or {})},
            cause=cause,
        )


class DeviceTimeoutError(NetworkError):
    """Raised when a request exceeds its timeout."""

    def __init__(self, target: str, timeout: float, cause: Optional[Exception] = None):
        """Initialize timeout error.

        Args:
            target: URL or address that timed out
            timeout: Timeout duration in seconds
            cause: Original exception, if any
        """
        IoTError.__init__(
            self,
            ErrorCode.DEVICE_TIMEOUT,
            f"Request to {target} timed out after {timeout} seconds",
            details={"target": target, "timeout": timeout},
            cause=cause,
        )


class DeviceResponseError(IoTError):
    """Raised when a generic HTTP device answers with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, url: str):
        super().__init__(
            ErrorCode.DEVICE_RESPONSE_ERROR,
            f"HTTP {status_code}: {reason}",
            details={"status_code": status_code, "url": url},
        )
        self.status_code = status_code


class VendorAPIError(IoTError):
    """Raised when a vendor API rejects a request."""

    retryable = False

    def __init__(
        self,
        vendor: str,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize vendor API error.

        Args:
            vendor: Vendor name (e.g. 'hue', 'nest')
            message: Message taken from the vendor response
            status_code: HTTP status, when the failure came from the status line
            details: Additional error context
        """
        super().__init__(
            ErrorCode.VENDOR_API_ERROR,
            message,
            details={"vendor": vendor, "status_code": status_code, **(details or {})},
        )
        self.vendor = vendor
        self.status_code = status_code


class HueLinkButtonError(VendorAPIError):
    """Raised while pairing when the bridge link button was not pressed."""

    retryable = True

    def __init__(self) -> None:
        super().__init__(
            "hue",
            "Link button not pressed. Please press the link button on your "
            "Hue bridge and try again.",
            details={"error_type": 101},
        )
        self.code = ErrorCode.LINK_BUTTON_NOT_PRESSED


class DeviceDisconnectedError(IoTError):
    """Raised when an operation needs a live connection that is not there."""

    def __init__(self, target: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            ErrorCode.DEVICE_DISCONNECTED,
            f"{target} is not connected",
            details={"target": target, **(details or {})},
        )
