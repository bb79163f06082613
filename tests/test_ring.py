"""Tests for the Ring client."""

import json

import httpx
import pytest

from devicehub.errors import VendorAPIError
from devicehub.vendors import RingClient

from conftest import mock_client


class RingFake:
    def __init__(self):
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.url.host == "oauth.ring.com":
            return httpx.Response(200, json={"access_token": "at", "refresh_token": "rt"})
        if path == "/clients_api/ring_devices":
            return httpx.Response(
                200,
                json={
                    "doorbots": [{"id": 1}],
                    "stickup_cams": [],
                    "user_locations": [{"location_id": "home"}],
                },
            )
        if path.endswith("/health"):
            return httpx.Response(200, json={"device_health": {"wifi_name": "x"}})
        if path.endswith("/history"):
            return httpx.Response(200, json=[{"id": 10, "kind": "motion"}])
        if path.endswith("/recording"):
            return httpx.Response(200, json={"url": "https://video"})
        return httpx.Response(204)


@pytest.fixture
def fake() -> RingFake:
    return RingFake()


@pytest.fixture
def ring(fake) -> RingClient:
    return RingClient(client=mock_client(fake))


@pytest.mark.asyncio
async def test_authenticate_and_refresh(ring, fake):
    assert await ring.authenticate("me@example.com", "pw") == {
        "access_token": "at",
        "refresh_token": "rt",
    }
    assert await ring.refresh_token("rt") == {"access_token": "at"}

    auth_body = json.loads(fake.requests[0].content)
    assert auth_body == {
        "grant_type": "password",
        "username": "me@example.com",
        "password": "pw",
        "client_id": "ring_official_android",
        "scope": "client",
    }
    assert json.loads(fake.requests[1].content)["grant_type"] == "refresh_token"


@pytest.mark.asyncio
async def test_reads(ring, fake):
    assert await ring.get_locations("at") == [{"location_id": "home"}]
    assert await ring.get_devices("at") == {
        "doorbots": [{"id": 1}],
        "stickup_cams": [],
        "chimes": [],
    }
    assert (await ring.get_device_health("at", "1"))["device_health"]["wifi_name"] == "x"
    assert await ring.get_device_events("at", "1", limit=5) == [{"id": 10, "kind": "motion"}]
    assert await ring.get_recording_url("at", 10) == "https://video"

    events_request = fake.requests[3]
    assert events_request.url.path == "/clients_api/doorbots/1/history"
    assert events_request.url.params["limit"] == "5"
    assert fake.requests[0].headers["Authorization"] == "Bearer at"


@pytest.mark.asyncio
async def test_motion_detection_and_siren(ring, fake):
    await ring.enable_motion_detection("at", "1")
    await ring.disable_motion_detection("at", "1")
    await ring.trigger_siren("at", "1")
    await ring.turn_off_siren("at", "1")

    assert [r.method for r in fake.requests] == ["PUT"] * 4
    assert json.loads(fake.requests[0].content) == {
        "doorbot": {"settings": {"motion_detection_enabled": True}}
    }
    assert json.loads(fake.requests[1].content) == {
        "doorbot": {"settings": {"motion_detection_enabled": False}}
    }
    assert fake.requests[2].url.path == "/clients_api/doorbots/1/siren_on"
    assert fake.requests[3].url.path == "/clients_api/doorbots/1/siren_off"


@pytest.mark.asyncio
async def test_auth_failure():
    ring = RingClient(client=mock_client(lambda request: httpx.Response(401)))
    with pytest.raises(VendorAPIError) as exc_info:
        await ring.authenticate("me@example.com", "wrong")
    assert exc_info.value.status_code == 401
    assert "Unauthorized" in exc_info.value.message
