"""Generic HTTP device adapter.

Devices expose ``GET {apiEndpoint}/status`` for health checks and accept
commands at ``{apiEndpoint}{command.endpoint}`` (default
``/command/{command.id}``) with the parameters as a JSON body.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from ..constants import COMMAND_TIMEOUT_DEFAULT, STATUS_TIMEOUT_DEFAULT
from ..errors import DeviceResponseError, DeviceTimeoutError, InputValidationError, NetworkError
from ..models import Device, DeviceCommand
from .base import ProtocolAdapter

logger = logging.getLogger(__name__)


class HTTPAdapter(ProtocolAdapter):
    """Adapter for devices reachable over plain HTTP (also used for wifi devices)."""

    def __init__(
        self,
        status_timeout: float = STATUS_TIMEOUT_DEFAULT,
        command_timeout: float = COMMAND_TIMEOUT_DEFAULT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.status_timeout = status_timeout
        self.command_timeout = command_timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _base_url(device: Device) -> str:
        if not device.apiEndpoint:
            raise InputValidationError(
                f"Device {device.name} has no apiEndpoint", details={"device_id": device.id}
            )
        return device.apiEndpoint

    @staticmethod
    def _get_headers(device: Device) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if device.apiKey:
            headers["Authorization"] = f"Bearer {device.apiKey}"
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        timeout: float,
        headers: Dict[str, str],
        json_body: Any = None,
    ) -> httpx.Response:
        client = await self._get_client()
        try:
            return await asyncio.wait_for(
                client.request(method, url, headers=headers, json=json_body, timeout=timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise DeviceTimeoutError(url, timeout, cause=exc) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(url, cause=exc) from exc

    async def check_status(self, device: Device) -> Dict[str, Any]:
        url = f"{self._base_url(device)}/status"
        response = await self._request(
            "GET", url, self.status_timeout, self._get_headers(device)
        )
        if response.is_success:
            return {"online": True}
        logger.debug("Status check for %s returned HTTP %s", device.id, response.status_code)
        return {"online": False}

    async def send(
        self, device: Device, command: DeviceCommand, parameters: Dict[str, Any]
    ) -> Any:
        path = command.endpoint or f"/command/{command.id}"
        url = f"{self._base_url(device)}{path}"
        method = command.method or "POST"
        body = None if method == "GET" else parameters

        response = await self._request(
            method, url, self.command_timeout, self._get_headers(device), json_body=body
        )
        if not response.is_success:
            raise DeviceResponseError(response.status_code, response.reason_phrase, url)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
