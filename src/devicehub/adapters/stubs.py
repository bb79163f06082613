"""Placeholder adapters for protocols without a transport yet."""

from __future__ import annotations

from typing import Any, Dict, NoReturn

from ..constants import Protocol
from ..errors import ProtocolNotImplementedError
from ..models import Device, DeviceCommand
from .base import ProtocolAdapter


class UnimplementedAdapter(ProtocolAdapter):
    """Adapter whose every operation raises ProtocolNotImplementedError."""

    def __init__(self, protocol: Protocol):
        self.protocol = protocol

    def _unsupported(self) -> NoReturn:
        raise ProtocolNotImplementedError(self.protocol.value)

    async def check_status(self, device: Device) -> Dict[str, Any]:
        self._unsupported()

    async def send(
        self, device: Device, command: DeviceCommand, parameters: Dict[str, Any]
    ) -> Any:
        self._unsupported()
