"""TP-Link Kasa cloud client.

Per-device calls go through the cloud ``passthrough`` method: the device
request is JSON-encoded into ``params.requestData`` and the device answer
comes back JSON-encoded in ``result.responseData``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..errors import VendorAPIError
from ..utils.time import now_ms
from .base import VendorClient

logger = logging.getLogger(__name__)

KASA_CLOUD_URL = "https://wap.tplinkcloud.com"
LIGHTING_SERVICE = "smartlife.iot.smartbulb.lightingservice"


class KasaDevice(BaseModel):
    """Device entry as returned by ``getDeviceList``."""

    deviceId: str
    appServerUrl: str
    alias: str = ""
    deviceName: str = ""
    deviceType: str = ""
    deviceModel: str = ""
    deviceMac: str = ""
    status: int = 0

    model_config = ConfigDict(extra="allow")


class KasaClient(VendorClient):
    vendor = "kasa"

    def __init__(self, *args: Any, base_url: str = KASA_CLOUD_URL, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.base_url = base_url

    async def _cloud_call(
        self,
        url: str,
        body: Dict[str, Any],
        action: str,
        token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """POST a cloud RPC and return its ``result`` after checking ``error_code``."""
        data = await self._request_json(
            "POST",
            url,
            action,
            headers={"Content-Type": "application/json"},
            json=body,
            params={"token": token} if token else None,
        ) or {}
        if data.get("error_code") != 0:
            raise VendorAPIError(
                self.vendor,
                f"Kasa error: {data.get('msg', 'unknown error')}",
                details={"error_code": data.get("error_code")},
            )
        return data.get("result") or {}

    async def _passthrough(
        self, token: str, device: KasaDevice, request_data: Dict[str, Any], action: str
    ) -> Dict[str, Any]:
        result = await self._cloud_call(
            device.appServerUrl,
            {
                "method": "passthrough",
                "params": {
                    "deviceId": device.deviceId,
                    "requestData": json.dumps(request_data),
                },
            },
            action,
            token=token,
        )
        raw = result.get("responseData")
        if not raw:
            return {}
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise VendorAPIError(self.vendor, f"Failed to {action}: malformed responseData") from exc

    async def authenticate(self, email: str, password: str) -> Dict[str, str]:
        """Log in to the Kasa cloud and return ``{"token": ...}``."""
        result = await self._cloud_call(
            self.base_url,
            {
                "method": "login",
                "params": {
                    "appType": "Kasa_Android",
                    "cloudUserName": email,
                    "cloudPassword": password,
                    "terminalUUID": f"DEVICEHUB-{now_ms()}",
                },
            },
            "authenticate with Kasa",
        )
        logger.info("Kasa authentication successful")
        return {"token": result.get("token")}

    async def get_device_list(self, token: str) -> List[KasaDevice]:
        result = await self._cloud_call(
            self.base_url, {"method": "getDeviceList"}, "get device list", token=token
        )
        devices = [KasaDevice.model_validate(entry) for entry in result.get("deviceList", [])]
        logger.info("Retrieved %d Kasa device(s)", len(devices))
        return devices

    async def get_device_state(self, token: str, device: KasaDevice) -> Dict[str, Any]:
        response = await self._passthrough(
            token, device, {"system": {"get_sysinfo": {}}}, "get device state"
        )
        return response.get("system", {}).get("get_sysinfo", {})

    async def _set_relay_state(self, token: str, device: KasaDevice, state: int) -> None:
        await self._passthrough(
            token,
            device,
            {"system": {"set_relay_state": {"state": state}}},
            "turn on device" if state else "turn off device",
        )

    async def turn_on(self, token: str, device: KasaDevice) -> None:
        await self._set_relay_state(token, device, 1)

    async def turn_off(self, token: str, device: KasaDevice) -> None:
        await self._set_relay_state(token, device, 0)

    async def set_brightness(self, token: str, device: KasaDevice, brightness: int) -> None:
        """Set dimmer brightness, clamped to 0-100."""
        clamped = max(0, min(100, brightness))
        await self._passthrough(
            token,
            device,
            {"smartlife.iot.dimmer": {"set_brightness": {"brightness": clamped}}},
            "set brightness",
        )

    async def set_color(
        self, token: str, device: KasaDevice, hue: int, saturation: int, value: int
    ) -> None:
        await self._passthrough(
            token,
            device,
            {
                LIGHTING_SERVICE: {
                    "transition_light_state": {
                        "hue": hue,
                        "saturation": saturation,
                        "brightness": value,
                        "color_temp": 0,
                    }
                }
            },
            "set color",
        )

    async def set_color_temperature(self, token: str, device: KasaDevice, color_temp: int) -> None:
        """Set white color temperature in kelvin, clamped to 2500-9000."""
        clamped = max(2500, min(9000, color_temp))
        await self._passthrough(
            token,
            device,
            {LIGHTING_SERVICE: {"transition_light_state": {"color_temp": clamped}}},
            "set color temperature",
        )

    async def get_energy_usage(self, token: str, device: KasaDevice) -> Dict[str, Any]:
        response = await self._passthrough(
            token, device, {"emeter": {"get_realtime": {}}}, "get energy usage"
        )
        return response.get("emeter", {}).get("get_realtime", {})


__all__ = ["KasaClient", "KasaDevice"]
