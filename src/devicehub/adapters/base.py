"""Protocol adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from ..models import Device, DeviceCommand


class ProtocolAdapter(ABC):
    """Transport for one device protocol.

    Adapters own their timeouts; callers never wrap them in another one.
    """

    @abstractmethod
    async def check_status(self, device: Device) -> Dict[str, Any]:
        """Probe the device and return ``{"online": bool}``."""

    @abstractmethod
    async def send(
        self, device: Device, command: DeviceCommand, parameters: Dict[str, Any]
    ) -> Any:
        """Deliver a command and return the device's response payload."""

    async def close(self) -> None:
        """Release any transport resources."""
        return None
