"""Test configuration ensuring the src package is importable."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from devicehub.adapters import AdapterRegistry, ProtocolAdapter  # noqa: E402
from devicehub.models import Device, DeviceCommand, DeviceCreate  # noqa: E402
from devicehub.registry import DeviceRegistry  # noqa: E402
from devicehub.settings import Settings  # noqa: E402
from devicehub.storage import DeviceStorage  # noqa: E402


# ========== Helpers ==========


def mock_client(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
    """Return an AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_device_create(**overrides: Any) -> DeviceCreate:
    """Create an HTTP light definition for tests (TEST FIXTURE).

    Commands:
        toggle: no parameters
        set_brightness: required ``level`` with default 50
        set_name: required ``name`` without default
    """
    data: Dict[str, Any] = {
        "name": "Desk Lamp",
        "type": "smart_light",
        "protocol": "http",
        "apiEndpoint": "http://lamp.local",
        "commands": [
            {"id": "toggle", "name": "Toggle", "description": "Toggle power"},
            {
                "id": "set_brightness",
                "name": "Set Brightness",
                "parameters": [
                    {"name": "level", "type": "number", "required": True, "default": 50}
                ],
                "endpoint": "/brightness",
                "method": "PUT",
            },
            {
                "id": "set_name",
                "name": "Set Name",
                "parameters": [{"name": "name", "type": "string", "required": True}],
            },
        ],
    }
    data.update(overrides)
    return DeviceCreate.model_validate(data)


class FakeAdapter(ProtocolAdapter):
    """Scriptable adapter that records calls."""

    def __init__(
        self,
        online: bool = True,
        result: Any = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.online = online
        self.result = result if result is not None else {"ok": True}
        self.error = error
        self.delay = delay
        self.sent: List[Dict[str, Any]] = []
        self.checked: List[str] = []
        self.closed = False

    async def check_status(self, device: Device) -> Dict[str, Any]:
        self.checked.append(device.id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return {"online": self.online}

    async def send(self, device: Device, command: DeviceCommand, parameters: Dict[str, Any]) -> Any:
        self.sent.append({"device": device.id, "command": command.id, "parameters": parameters})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

    async def close(self) -> None:
        self.closed = True


# ========== Fixtures ==========


@pytest.fixture
def devices_dir(tmp_path: Path) -> Path:
    return tmp_path / "devices"


@pytest.fixture
def storage(devices_dir: Path) -> DeviceStorage:
    return DeviceStorage(devices_dir)


@pytest.fixture
def registry(storage: DeviceStorage) -> DeviceRegistry:
    return DeviceRegistry(storage)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temp dir, with no background status checks."""
    return Settings(config_dir=tmp_path, check_on_add=False)


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def adapters(fake_adapter: FakeAdapter) -> AdapterRegistry:
    from devicehub.constants import Protocol

    return AdapterRegistry({Protocol.HTTP: fake_adapter, Protocol.MQTT: fake_adapter})
