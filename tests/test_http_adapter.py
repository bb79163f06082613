"""Tests for the generic HTTP device adapter."""

import asyncio
import json

import httpx
import pytest

from devicehub.adapters import HTTPAdapter
from devicehub.errors import (
    DeviceResponseError,
    DeviceTimeoutError,
    InputValidationError,
    NetworkError,
)
from devicehub.models import Device

from conftest import make_device_create, mock_client


def _device(**overrides) -> Device:
    return Device(id="lamp1", **make_device_create(**overrides).model_dump(exclude={"id"}))


class TestCheckStatus:
    @pytest.mark.asyncio
    async def test_online_on_2xx_with_bearer(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"state": "ok"})

        adapter = HTTPAdapter(client=mock_client(handler))
        result = await adapter.check_status(_device(apiKey="secret"))

        assert result == {"online": True}
        assert str(seen[0].url) == "http://lamp.local/status"
        assert seen[0].method == "GET"
        assert seen[0].headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_no_auth_header_without_api_key(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        adapter = HTTPAdapter(client=mock_client(handler))
        await adapter.check_status(_device())

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_offline_on_non_2xx(self):
        adapter = HTTPAdapter(client=mock_client(lambda request: httpx.Response(503)))
        assert await adapter.check_status(_device()) == {"online": False}

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200)

        adapter = HTTPAdapter(status_timeout=0.05, client=mock_client(handler))
        with pytest.raises(DeviceTimeoutError):
            await adapter.check_status(_device())

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        adapter = HTTPAdapter(client=mock_client(handler))
        with pytest.raises(NetworkError) as exc_info:
            await adapter.check_status(_device())
        assert not isinstance(exc_info.value, DeviceTimeoutError)

    @pytest.mark.asyncio
    async def test_missing_endpoint(self):
        adapter = HTTPAdapter(client=mock_client(lambda request: httpx.Response(200)))
        with pytest.raises(InputValidationError):
            await adapter.check_status(_device(apiEndpoint=None))


class TestSend:
    @pytest.mark.asyncio
    async def test_default_path_and_json_body(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"done": True})

        device = _device()
        adapter = HTTPAdapter(client=mock_client(handler))
        result = await adapter.send(device, device.find_command("toggle"), {"force": True})

        assert result == {"done": True}
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "http://lamp.local/command/toggle"
        assert json.loads(seen[0].content) == {"force": True}

    @pytest.mark.asyncio
    async def test_custom_endpoint_and_method(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"level": 80})

        device = _device()
        adapter = HTTPAdapter(client=mock_client(handler))
        await adapter.send(device, device.find_command("set_brightness"), {"level": 80})

        assert seen[0].method == "PUT"
        assert str(seen[0].url) == "http://lamp.local/brightness"

    @pytest.mark.asyncio
    async def test_get_has_no_body(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        device = _device(
            commands=[{"id": "info", "name": "Info", "endpoint": "/info", "method": "GET"}]
        )
        adapter = HTTPAdapter(client=mock_client(handler))
        assert await adapter.send(device, device.find_command("info"), {"ignored": 1}) == []
        assert seen[0].content == b""

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self):
        device = _device()
        adapter = HTTPAdapter(client=mock_client(lambda request: httpx.Response(204)))
        assert await adapter.send(device, device.find_command("toggle"), {}) is None

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_status(self):
        device = _device()
        adapter = HTTPAdapter(client=mock_client(lambda request: httpx.Response(500)))

        with pytest.raises(DeviceResponseError) as exc_info:
            await adapter.send(device, device.find_command("toggle"), {})

        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == "HTTP 500: Internal Server Error"

    @pytest.mark.asyncio
    async def test_send_timeout(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200)

        device = _device()
        adapter = HTTPAdapter(command_timeout=0.05, client=mock_client(handler))
        with pytest.raises(DeviceTimeoutError):
            await adapter.send(device, device.find_command("toggle"), {})


@pytest.mark.asyncio
async def test_close_releases_client():
    adapter = HTTPAdapter(client=mock_client(lambda request: httpx.Response(200)))
    await adapter.close()
    assert adapter._client is None
