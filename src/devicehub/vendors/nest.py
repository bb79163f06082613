"""Google Nest client for the Smart Device Management (SDM) API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..errors import InputValidationError
from .base import VendorClient

logger = logging.getLogger(__name__)

SDM_BASE_URL = "https://smartdevicemanagement.googleapis.com/v1"
THERMOSTAT_MODES = ("OFF", "HEAT", "COOL", "HEATCOOL")


class NestClient(VendorClient):
    """Reads Nest devices and issues SDM commands with a caller-supplied token.

    Device names are full SDM resource names
    (``enterprises/{project}/devices/{id}``).
    """

    vendor = "nest"

    def __init__(self, *args: Any, base_url: str = SDM_BASE_URL, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.base_url = base_url

    async def list_devices(self, access_token: str, project_id: str) -> List[Dict[str, Any]]:
        data = await self._request_json(
            "GET",
            f"{self.base_url}/enterprises/{project_id}/devices",
            "list Nest devices",
            headers=self._bearer_headers(access_token),
        )
        devices = (data or {}).get("devices", [])
        logger.info("Retrieved %d Nest device(s)", len(devices))
        return devices

    async def get_device(self, access_token: str, device_name: str) -> Dict[str, Any]:
        return await self._request_json(
            "GET",
            f"{self.base_url}/{device_name}",
            "get Nest device",
            headers=self._bearer_headers(access_token),
        )

    async def _execute(
        self, access_token: str, device_name: str, command: str, params: Dict[str, Any], action: str
    ) -> Any:
        return await self._request_json(
            "POST",
            f"{self.base_url}/{device_name}:executeCommand",
            action,
            headers=self._bearer_headers(access_token),
            json={"command": command, "params": params},
        )

    async def set_thermostat_mode(self, access_token: str, device_name: str, mode: str) -> Any:
        """Set the thermostat mode (OFF, HEAT, COOL or HEATCOOL)."""
        if mode not in THERMOSTAT_MODES:
            raise InputValidationError(
                f"Invalid thermostat mode '{mode}'", details={"allowed": list(THERMOSTAT_MODES)}
            )
        result = await self._execute(
            access_token,
            device_name,
            "sdm.devices.commands.ThermostatMode.SetMode",
            {"mode": mode},
            "set thermostat mode",
        )
        logger.info("Set Nest thermostat mode to %s", mode)
        return result

    async def set_heat_temperature(
        self, access_token: str, device_name: str, temperature_celsius: float
    ) -> Any:
        return await self._execute(
            access_token,
            device_name,
            "sdm.devices.commands.ThermostatTemperatureSetpoint.SetHeat",
            {"heatCelsius": temperature_celsius},
            "set heat temperature",
        )

    async def set_cool_temperature(
        self, access_token: str, device_name: str, temperature_celsius: float
    ) -> Any:
        return await self._execute(
            access_token,
            device_name,
            "sdm.devices.commands.ThermostatTemperatureSetpoint.SetCool",
            {"coolCelsius": temperature_celsius},
            "set cool temperature",
        )

    async def set_temperature_range(
        self, access_token: str, device_name: str, heat_celsius: float, cool_celsius: float
    ) -> Any:
        """Set both setpoints for HEATCOOL mode."""
        return await self._execute(
            access_token,
            device_name,
            "sdm.devices.commands.ThermostatTemperatureSetpoint.SetRange",
            {"heatCelsius": heat_celsius, "coolCelsius": cool_celsius},
            "set temperature range",
        )

    async def generate_camera_stream(self, access_token: str, device_name: str) -> Dict[str, Any]:
        """Request an RTSP live stream; returns the ``results`` object (stream URLs, token)."""
        data = await self._execute(
            access_token,
            device_name,
            "sdm.devices.commands.CameraLiveStream.GenerateRtspStream",
            {},
            "generate camera stream",
        )
        return (data or {}).get("results", {})


__all__ = ["NestClient", "THERMOSTAT_MODES"]
