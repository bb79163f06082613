"""Philips Hue bridge routes."""

from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from ..vendors import HueBridge, HueClient
from .exceptions import handle_device_errors

router = APIRouter(prefix="/api/hue", tags=["hue"])


class HueAuthRequest(BaseModel):
    bridgeIp: str
    deviceType: str = "devicehub"


class HueLightStateRequest(BaseModel):
    bridgeIp: str
    username: str
    on: Optional[bool] = None
    bri: Optional[int] = Field(default=None, ge=0, le=254)
    hue: Optional[int] = Field(default=None, ge=0, le=65535)
    sat: Optional[int] = Field(default=None, ge=0, le=254)
    ct: Optional[int] = Field(default=None, ge=153, le=500)
    xy: Optional[Tuple[float, float]] = None
    transitiontime: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


def _hue(request: Request) -> HueClient:
    return request.app.state.service.hue


@router.get("/discover")
@handle_device_errors
async def discover_bridges(request: Request) -> List[HueBridge]:
    return await _hue(request).discover_bridges()


@router.post("/authenticate")
@handle_device_errors
async def authenticate(request: Request, payload: HueAuthRequest) -> Dict[str, str]:
    """Pair with a bridge; press its link button first."""
    username = await _hue(request).create_user(payload.bridgeIp, payload.deviceType)
    return {"username": username}


@router.get("/lights")
@handle_device_errors
async def get_lights(request: Request, bridgeIp: str, username: str) -> Dict[str, Any]:
    return await _hue(request).get_lights(bridgeIp, username)


@router.post("/lights/{light_id}/state")
@handle_device_errors
async def set_light_state(
    request: Request, light_id: str, payload: HueLightStateRequest
) -> List[Dict[str, Any]]:
    command = payload.model_dump(exclude={"bridgeIp", "username"}, exclude_none=True)
    if "xy" in command:
        command["xy"] = list(command["xy"])
    return await _hue(request).set_light_state(
        payload.bridgeIp, payload.username, light_id, command
    )
