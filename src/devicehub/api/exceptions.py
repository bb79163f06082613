"""Exception handling utilities for API routes.

Provides HTTP error factories and a decorator that maps devicehub errors onto
them, so route handlers can call the service without try/except.
"""

import functools
import logging
from typing import Any, Callable, TypeVar, cast

from fastapi import HTTPException
from pydantic import ValidationError

from ..errors import (
    DeviceTimeoutError,
    InputValidationError,
    IoTError,
    NotFoundError,
    ProtocolNotImplementedError,
)

logger = logging.getLogger(__name__)

# TypeVar for wrapping async functions
F = TypeVar("F", bound=Callable[..., Any])


# ============================================================================
# HTTP Error Factory Functions
# ============================================================================


def device_not_found(device_id: str) -> HTTPException:
    """Create a standardized 404 error for device not found."""
    return HTTPException(status_code=404, detail=f"Device not found: {device_id}")


def execution_not_found(execution_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Execution not found: {execution_id}")


def invalid_request(message: str) -> HTTPException:
    """Create a standardized 422 error for invalid input.

    Args:
        message: Detailed validation error message
    """
    return HTTPException(status_code=422, detail=f"Invalid request: {message}")


def protocol_not_implemented(message: str) -> HTTPException:
    return HTTPException(status_code=501, detail=message)


def upstream_error(message: str) -> HTTPException:
    """Create a 502 error for failures reported by a device or vendor API."""
    return HTTPException(status_code=502, detail=message)


def upstream_timeout(message: str) -> HTTPException:
    """Create a standardized 504 error for device or vendor timeouts."""
    return HTTPException(status_code=504, detail=message)


def storage_error(message: str) -> HTTPException:
    """Create a standardized 500 error for storage/file system errors."""
    return HTTPException(status_code=500, detail=f"Storage error: {message}")


def http_error_for(exc: IoTError) -> HTTPException:
    """Map a devicehub error onto the matching HTTP error."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=exc.message)
    if isinstance(exc, InputValidationError):
        return invalid_request(exc.message)
    if isinstance(exc, ProtocolNotImplementedError):
        return protocol_not_implemented(exc.message)
    if isinstance(exc, DeviceTimeoutError):
        return upstream_timeout(exc.message)
    return upstream_error(exc.message)


# ============================================================================
# Error Handling Decorators
# ============================================================================


def handle_device_errors(func: F) -> F:
    """Decorator for consistent error handling across API endpoints.

    - HTTPException: Pass through (already formatted for response)
    - IoTError: Mapped by ``http_error_for``
    - ValidationError/ValueError: 422
    - OSError: File system errors (500 status)
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except IoTError as e:
            logger.warning(f"{func.__name__} failed: {e.message}")
            raise http_error_for(e) from e
        except (ValidationError, ValueError) as e:
            logger.error(f"Validation error in {func.__name__}: {e}")
            raise invalid_request(str(e)) from e
        except OSError as e:
            logger.error(f"Storage error in {func.__name__}: {e}", exc_info=True)
            raise storage_error(str(e)) from e

    return cast(F, wrapper)
