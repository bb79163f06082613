"""Ring doorbell and camera client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .base import VendorClient

logger = logging.getLogger(__name__)

RING_API_URL = "https://api.ring.com"
RING_AUTH_URL = "https://oauth.ring.com/oauth/token"
RING_CLIENT_ID = "ring_official_android"


class RingClient(VendorClient):
    vendor = "ring"

    def __init__(
        self,
        *args: Any,
        base_url: str = RING_API_URL,
        auth_url: str = RING_AUTH_URL,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.base_url = base_url
        self.auth_url = auth_url

    async def _token_request(self, body: Dict[str, Any], action: str) -> Dict[str, Any]:
        body = {**body, "client_id": RING_CLIENT_ID, "scope": "client"}
        return await self._request_json(
            "POST",
            self.auth_url,
            action,
            headers={"Content-Type": "application/json"},
            json=body,
        ) or {}

    async def authenticate(self, email: str, password: str) -> Dict[str, str]:
        """Exchange account credentials for ``{access_token, refresh_token}``."""
        data = await self._token_request(
            {"grant_type": "password", "username": email, "password": password},
            "authenticate with Ring",
        )
        logger.info("Ring authentication successful")
        return {
            "access_token": data.get("access_token"),
            "refresh_token": data.get("refresh_token"),
        }

    async def refresh_token(self, refresh_token: str) -> Dict[str, str]:
        data = await self._token_request(
            {"grant_type": "refresh_token", "refresh_token": refresh_token},
            "refresh Ring token",
        )
        return {"access_token": data.get("access_token")}

    async def _get(self, access_token: str, path: str, action: str, **kwargs: Any) -> Any:
        return await self._request_json(
            "GET",
            f"{self.base_url}{path}",
            action,
            headers={"Authorization": f"Bearer {access_token}"},
            **kwargs,
        )

    async def _put(self, access_token: str, path: str, action: str, json: Any = None) -> None:
        await self._request_json(
            "PUT",
            f"{self.base_url}{path}",
            action,
            headers=self._bearer_headers(access_token),
            json=json,
        )

    async def get_locations(self, access_token: str) -> List[Dict[str, Any]]:
        data = await self._get(access_token, "/clients_api/ring_devices", "get Ring locations")
        return (data or {}).get("user_locations", [])

    async def get_devices(self, access_token: str) -> Dict[str, List[Dict[str, Any]]]:
        """Return doorbots, stickup cams and chimes."""
        data = await self._get(access_token, "/clients_api/ring_devices", "get Ring devices") or {}
        return {
            "doorbots": data.get("doorbots", []),
            "stickup_cams": data.get("stickup_cams", []),
            "chimes": data.get("chimes", []),
        }

    async def get_device_health(self, access_token: str, device_id: str) -> Dict[str, Any]:
        return await self._get(
            access_token, f"/clients_api/doorbots/{device_id}/health", "get device health"
        )

    async def get_device_events(
        self, access_token: str, device_id: str, limit: int = 10
    ) -> List[Dict[str, Any]]:
        events = await self._get(
            access_token,
            f"/clients_api/doorbots/{device_id}/history",
            "get device events",
            params={"limit": limit},
        )
        return events or []

    async def get_recording_url(self, access_token: str, event_id: int) -> str:
        data = await self._get(
            access_token, f"/clients_api/dings/{event_id}/recording", "get recording URL"
        )
        return (data or {}).get("url")

    async def _set_motion_detection(self, access_token: str, device_id: str, enabled: bool) -> None:
        await self._put(
            access_token,
            f"/clients_api/doorbots/{device_id}/motion_settings",
            f"{'enable' if enabled else 'disable'} motion detection",
            json={"doorbot": {"settings": {"motion_detection_enabled": enabled}}},
        )
        logger.info("Ring motion detection %s for %s", "enabled" if enabled else "disabled", device_id)

    async def enable_motion_detection(self, access_token: str, device_id: str) -> None:
        await self._set_motion_detection(access_token, device_id, True)

    async def disable_motion_detection(self, access_token: str, device_id: str) -> None:
        await self._set_motion_detection(access_token, device_id, False)

    async def trigger_siren(self, access_token: str, device_id: str) -> None:
        await self._put(access_token, f"/clients_api/doorbots/{device_id}/siren_on", "trigger siren")

    async def turn_off_siren(self, access_token: str, device_id: str) -> None:
        await self._put(access_token, f"/clients_api/doorbots/{device_id}/siren_off", "turn off siren")


__all__ = ["RingClient"]
