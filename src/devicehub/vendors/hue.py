"""Philips Hue bridge client.

Bridges answer most failures with HTTP 200 and a body like
``[{"error": {"type": 7, "description": "..."}}]``; those are raised as
VendorAPIError as well.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from ..errors import HueLinkButtonError, InputValidationError, VendorAPIError
from ..utils.time import now_ms
from .base import VendorClient

logger = logging.getLogger(__name__)

DISCOVERY_URL = "https://discovery.meethue.com/"
LINK_BUTTON_ERROR_TYPE = 101


class HueBridge(BaseModel):
    id: str
    ipAddress: str
    username: str = ""
    name: str = ""
    modelid: str = ""
    swversion: str = ""


def _clamp(value: float, low: int, high: int) -> int:
    return max(low, min(high, round(value)))


def _gamma(channel: float) -> float:
    channel = channel / 255
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def rgb_to_xy(r: int, g: int, b: int) -> Tuple[float, float]:
    """Convert 8-bit sRGB to CIE 1931 xy chromaticity.

    Gamma-expands each channel, converts to XYZ with the sRGB (D65) matrix
    and projects to xy, rounded to four decimal places. Black maps to (0, 0).
    """
    red, green, blue = _gamma(r), _gamma(g), _gamma(b)

    x_ = red * 0.4124564 + green * 0.3575761 + blue * 0.1804375
    y_ = red * 0.2126729 + green * 0.7151522 + blue * 0.0721750
    z_ = red * 0.0193339 + green * 0.1191920 + blue * 0.9503041

    total = x_ + y_ + z_
    if total == 0:
        return (0.0, 0.0)
    return (round(x_ / total, 4), round(y_ / total, 4))


class HueClient(VendorClient):
    """Client for the local Hue bridge REST API (v1)."""

    vendor = "hue"

    @staticmethod
    def _bridge_url(bridge_ip: str, username: Optional[str] = None) -> str:
        if not bridge_ip:
            raise InputValidationError("Hue bridge IP address is required")
        if username is None:
            return f"http://{bridge_ip}/api"
        if not username:
            raise InputValidationError("Hue bridge username is required")
        return f"http://{bridge_ip}/api/{username}"

    def _check_errors(self, data: Any) -> None:
        error = None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            error = data[0].get("error")
        elif isinstance(data, dict):
            error = data.get("error")
        if not error:
            return
        if error.get("type") == LINK_BUTTON_ERROR_TYPE:
            raise HueLinkButtonError()
        raise VendorAPIError(
            self.vendor,
            error.get("description", "Unknown bridge error"),
            details={"error_type": error.get("type")},
        )

    async def discover_bridges(self) -> List[HueBridge]:
        """Find bridges registered with the Hue cloud discovery service."""
        bridges = await self._request_json("GET", DISCOVERY_URL, "discover Hue bridges")
        result = [
            HueBridge(id=bridge["id"], ipAddress=bridge["internalipaddress"])
            for bridge in bridges or []
        ]
        logger.info("Discovered %d Hue bridge(s)", len(result))
        return result

    async def create_user(self, bridge_ip: str, device_type: str = "devicehub") -> str:
        """Pair with a bridge and return the new API username.

        Raises:
            HueLinkButtonError: The link button was not pressed first
        """
        data = await self._request_json(
            "POST",
            self._bridge_url(bridge_ip),
            "create Hue user",
            json={"devicetype": f"{device_type}#{now_ms()}"},
        )
        self._check_errors(data)
        try:
            username = data[0]["success"]["username"]
        except (IndexError, KeyError, TypeError) as exc:
            raise VendorAPIError(self.vendor, "Unexpected response from bridge") from exc
        logger.info("Authenticated with Hue bridge %s", bridge_ip)
        return username

    async def get_bridge_config(self, bridge_ip: str, username: str) -> Dict[str, Any]:
        data = await self._request_json(
            "GET", f"{self._bridge_url(bridge_ip, username)}/config", "get bridge config"
        )
        self._check_errors(data)
        return data

    async def get_lights(self, bridge_ip: str, username: str) -> Dict[str, Any]:
        data = await self._request_json(
            "GET", f"{self._bridge_url(bridge_ip, username)}/lights", "get lights"
        )
        self._check_errors(data)
        return data or {}

    async def get_light(self, bridge_ip: str, username: str, light_id: str) -> Dict[str, Any]:
        data = await self._request_json(
            "GET",
            f"{self._bridge_url(bridge_ip, username)}/lights/{light_id}",
            f"get light {light_id}",
        )
        self._check_errors(data)
        return {"id": light_id, **data}

    async def set_light_state(
        self,
        bridge_ip: str,
        username: str,
        light_id: str,
        command: Dict[str, Any],
    ) -> List[Dict[str, Any]]:
        """Apply a state change.

        ``command`` may contain on, bri, hue, sat, ct, xy and transitiontime;
        keys whose value is None are not sent.
        """
        body = {key: value for key, value in command.items() if value is not None}
        data = await self._request_json(
            "PUT",
            f"{self._bridge_url(bridge_ip, username)}/lights/{light_id}/state",
            f"set light {light_id} state",
            json=body,
        )
        self._check_errors(data)
        logger.debug("Light %s state updated: %s", light_id, body)
        return data

    async def turn_on(
        self, bridge_ip: str, username: str, light_id: str, transition_time: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        return await self.set_light_state(
            bridge_ip, username, light_id, {"on": True, "transitiontime": transition_time}
        )

    async def turn_off(
        self, bridge_ip: str, username: str, light_id: str, transition_time: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        return await self.set_light_state(
            bridge_ip, username, light_id, {"on": False, "transitiontime": transition_time}
        )

    async def set_brightness(
        self,
        bridge_ip: str,
        username: str,
        light_id: str,
        brightness: float,
        transition_time: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Set brightness, clamped to 0-254."""
        command = {"on": True, "bri": _clamp(brightness, 0, 254), "transitiontime": transition_time}
        return await self.set_light_state(bridge_ip, username, light_id, command)

    async def set_color(
        self,
        bridge_ip: str,
        username: str,
        light_id: str,
        hue: float,
        saturation: float,
        transition_time: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Set hue (0-65535) and saturation (0-254)."""
        command = {
            "on": True,
            "hue": _clamp(hue, 0, 65535),
            "sat": _clamp(saturation, 0, 254),
            "transitiontime": transition_time,
        }
        return await self.set_light_state(bridge_ip, username, light_id, command)

    async def set_color_temperature(
        self,
        bridge_ip: str,
        username: str,
        light_id: str,
        temperature: float,
        transition_time: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Set color temperature in mireds, clamped to 153-500."""
        command = {"on": True, "ct": _clamp(temperature, 153, 500), "transitiontime": transition_time}
        return await self.set_light_state(bridge_ip, username, light_id, command)

    async def set_rgb(
        self,
        bridge_ip: str,
        username: str,
        light_id: str,
        r: int,
        g: int,
        b: int,
        transition_time: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        x, y = rgb_to_xy(r, g, b)
        command = {"on": True, "xy": [x, y], "transitiontime": transition_time}
        return await self.set_light_state(bridge_ip, username, light_id, command)

    async def create_scene(
        self, bridge_ip: str, username: str, name: str, lights: List[str]
    ) -> str:
        """Create a scene from the current state of ``lights`` and return its id."""
        data = await self._request_json(
            "POST",
            f"{self._bridge_url(bridge_ip, username)}/scenes",
            "create scene",
            json={"name": name, "lights": lights, "recycle": False},
        )
        self._check_errors(data)
        try:
            scene_id = data[0]["success"]["id"]
        except (IndexError, KeyError, TypeError) as exc:
            raise VendorAPIError(self.vendor, "Unexpected response from bridge") from exc
        logger.info("Created Hue scene %s (%s)", name, scene_id)
        return scene_id

    async def activate_scene(
        self, bridge_ip: str, username: str, scene_id: str
    ) -> List[Dict[str, Any]]:
        data = await self._request_json(
            "PUT",
            f"{self._bridge_url(bridge_ip, username)}/groups/0/action",
            "activate scene",
            json={"scene": scene_id},
        )
        self._check_errors(data)
        return data


__all__ = ["HueBridge", "HueClient", "rgb_to_xy"]
