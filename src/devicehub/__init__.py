"""devicehub: registry, command execution and status polling for networked devices."""

__version__ = "0.1.0"

from .constants import DeviceType, Protocol  # noqa: E402
from .device_service import DeviceService, build_service  # noqa: E402
from .errors import ErrorCode, IoTError  # noqa: E402
from .models import (  # noqa: E402
    CommandParameter,
    Device,
    DeviceCommand,
    DeviceCreate,
    DeviceUpdate,
    Execution,
    ExecutionStatus,
)
from .settings import Settings  # noqa: E402

__all__ = [
    "CommandParameter",
    "Device",
    "DeviceCommand",
    "DeviceCreate",
    "DeviceService",
    "DeviceType",
    "DeviceUpdate",
    "ErrorCode",
    "Execution",
    "ExecutionStatus",
    "IoTError",
    "Protocol",
    "Settings",
    "build_service",
    "__version__",
]
