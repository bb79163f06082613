"""Device, command and execution models.

Field names are camelCase so the JSON produced by ``model_dump(mode="json")``
is exactly the record format shared with the REST and mobile clients.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import DeviceType, Protocol
from .errors import InvalidTransitionError
from .utils.validation import ensure_unique_values
from .utils.time import now_ms

ParameterType = Literal["string", "number", "boolean", "array", "object"]
HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]
DeviceStatus = Literal["online", "offline", "error"]


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid4().hex


class CommandParameter(BaseModel):
    """A single named argument accepted by a command."""

    name: str
    type: ParameterType
    required: bool = False
    default: Any = None
    description: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class DeviceCommand(BaseModel):
    """A named, parameterized operation defined on a device."""

    id: str
    name: str
    description: str = ""
    parameters: List[CommandParameter] = Field(default_factory=list)
    endpoint: Optional[str] = None
    method: Optional[HttpMethod] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_parameters(self) -> "DeviceCommand":
        """Parameter names must be unique within a command."""
        ensure_unique_values([param.name for param in self.parameters], "parameter name")
        return self


class _DeviceFields(BaseModel):
    """Fields shared by device records and creation requests."""

    name: str
    type: DeviceType
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    ipAddress: Optional[str] = None
    macAddress: Optional[str] = None
    protocol: Protocol
    apiEndpoint: Optional[str] = None
    apiKey: Optional[str] = None
    capabilities: List[str] = Field(default_factory=list)
    currentState: Dict[str, Any] = Field(default_factory=dict)
    commands: List[DeviceCommand] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    @model_validator(mode="after")
    def validate_commands(self) -> "_DeviceFields":
        """Command ids must be unique within the owning device."""
        ensure_unique_values([command.id for command in self.commands], "command id")
        return self


class DeviceCreate(_DeviceFields):
    """Input accepted when registering a device.

    ``id`` may be supplied by callers that mirror an external inventory;
    otherwise the registry assigns one.
    """

    id: Optional[str] = None


class Device(_DeviceFields):
    """A registered controllable endpoint."""

    id: str
    status: DeviceStatus = "offline"
    lastSeen: Optional[int] = None
    createdAt: int = Field(default_factory=now_ms)

    def find_command(self, command_id: str) -> Optional[DeviceCommand]:
        """Return the command with ``command_id`` or None."""
        for command in self.commands:
            if command.id == command_id:
                return command
        return None


class DeviceUpdate(BaseModel):
    """Partial update for a device; only fields that are set are merged."""

    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[DeviceType] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    ipAddress: Optional[str] = None
    macAddress: Optional[str] = None
    protocol: Optional[Protocol] = None
    apiEndpoint: Optional[str] = None
    apiKey: Optional[str] = None
    status: Optional[DeviceStatus] = None
    lastSeen: Optional[int] = None
    capabilities: Optional[List[str]] = None
    currentState: Optional[Dict[str, Any]] = None
    commands: Optional[List[DeviceCommand]] = None

    model_config = ConfigDict(extra="forbid", protected_namespaces=())


class ExecutionStatus(str, Enum):
    """Lifecycle states of a command execution."""

    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


_STATUS_RANK = {
    ExecutionStatus.PENDING: 0,
    ExecutionStatus.EXECUTING: 1,
    ExecutionStatus.COMPLETED: 2,
    ExecutionStatus.FAILED: 2,
}


class Execution(BaseModel):
    """One invocation of a command against a device.

    Status only ever moves forward: pending -> executing -> completed | failed.
    """

    id: str = Field(default_factory=new_id)
    deviceId: str
    commandId: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    timestamp: int = Field(default_factory=now_ms)
    status: ExecutionStatus = ExecutionStatus.PENDING
    result: Any = None
    error: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @property
    def is_terminal(self) -> bool:
        return self.status in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED)

    def _advance(self, target: ExecutionStatus) -> None:
        if self.is_terminal or _STATUS_RANK[target] <= _STATUS_RANK[self.status]:
            raise InvalidTransitionError(self.status.value, target.value)
        self.status = target

    def mark_executing(self) -> None:
        """Move from pending to executing."""
        self._advance(ExecutionStatus.EXECUTING)

    def mark_completed(self, result: Any) -> None:
        """Record a successful adapter result."""
        self._advance(ExecutionStatus.COMPLETED)
        self.result = result

    def mark_failed(self, error: str) -> None:
        """Record the failure message."""
        self._advance(ExecutionStatus.FAILED)
        self.error = error


__all__ = [
    "CommandParameter",
    "Device",
    "DeviceCommand",
    "DeviceCreate",
    "DeviceStatus",
    "DeviceUpdate",
    "Execution",
    "ExecutionStatus",
    "HttpMethod",
    "ParameterType",
    "new_id",
]
