"""Protocol adapters and the registry that selects one per device."""

from __future__ import annotations

from typing import Dict, Optional

from ..constants import Protocol
from ..errors import ProtocolNotImplementedError
from .base import ProtocolAdapter
from .http import HTTPAdapter
from .mqtt import MQTTAdapter, MQTTClient, MQTTConfig, MQTTMessage
from .stubs import UnimplementedAdapter


class AdapterRegistry:
    """Maps each Protocol to the adapter that serves it."""

    def __init__(self, adapters: Optional[Dict[Protocol, ProtocolAdapter]] = None):
        self._adapters: Dict[Protocol, ProtocolAdapter] = dict(adapters or {})

    def register(self, protocol: Protocol, adapter: ProtocolAdapter) -> None:
        self._adapters[protocol] = adapter

    def get(self, protocol: Protocol) -> ProtocolAdapter:
        adapter = self._adapters.get(protocol)
        if adapter is None:
            raise ProtocolNotImplementedError(Protocol(protocol).value)
        return adapter

    async def close(self) -> None:
        """Close every distinct adapter once."""
        seen = set()
        for adapter in self._adapters.values():
            if id(adapter) in seen:
                continue
            seen.add(id(adapter))
            await adapter.close()


def build_default_adapters(
    status_timeout: float,
    command_timeout: float,
    mqtt_client: Optional[MQTTClient] = None,
) -> AdapterRegistry:
    """Create the standard protocol table.

    HTTP and wifi share one HTTPAdapter; websocket, serial and bluetooth get
    placeholders.
    """
    http_adapter = HTTPAdapter(status_timeout=status_timeout, command_timeout=command_timeout)
    registry = AdapterRegistry(
        {
            Protocol.HTTP: http_adapter,
            Protocol.WIFI: http_adapter,
            Protocol.MQTT: MQTTAdapter(mqtt_client or MQTTClient()),
        }
    )
    for protocol in (Protocol.WEBSOCKET, Protocol.SERIAL, Protocol.BLUETOOTH):
        registry.register(protocol, UnimplementedAdapter(protocol))
    return registry


__all__ = [
    "AdapterRegistry",
    "HTTPAdapter",
    "MQTTAdapter",
    "MQTTClient",
    "MQTTConfig",
    "MQTTMessage",
    "ProtocolAdapter",
    "UnimplementedAdapter",
    "build_default_adapters",
]
