"""Tests for the TP-Link Kasa cloud client."""

import json

import httpx
import pytest

from devicehub.errors import VendorAPIError
from devicehub.vendors import KasaClient, KasaDevice

from conftest import mock_client

PLUG = KasaDevice(deviceId="dev-1", appServerUrl="https://use1-wap.tplinkcloud.com", alias="Plug")


class KasaFake:
    def __init__(self, error_code: int = 0):
        self.requests = []
        self.error_code = error_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        if self.error_code:
            return httpx.Response(200, json={"error_code": self.error_code, "msg": "Token expired"})
        if body["method"] == "login":
            return httpx.Response(200, json={"error_code": 0, "result": {"token": "tok"}})
        if body["method"] == "getDeviceList":
            return httpx.Response(
                200,
                json={
                    "error_code": 0,
                    "result": {
                        "deviceList": [
                            {
                                "deviceId": "dev-1",
                                "appServerUrl": "https://use1-wap.tplinkcloud.com",
                                "alias": "Plug",
                                "fwVer": "1.0",
                            }
                        ]
                    },
                },
            )
        nested = json.loads(body["params"]["requestData"])
        if "emeter" in nested:
            response = {"emeter": {"get_realtime": {"power_mw": 1200}}}
        else:
            response = {"system": {"get_sysinfo": {"relay_state": 1}}}
        return httpx.Response(
            200, json={"error_code": 0, "result": {"responseData": json.dumps(response)}}
        )

    def nested(self, index: int) -> dict:
        return json.loads(json.loads(self.requests[index].content)["params"]["requestData"])


@pytest.mark.asyncio
async def test_authenticate_and_device_list():
    fake = KasaFake()
    kasa = KasaClient(client=mock_client(fake))

    assert await kasa.authenticate("me@example.com", "pw") == {"token": "tok"}
    login = json.loads(fake.requests[0].content)
    assert login["params"]["appType"] == "Kasa_Android"
    assert login["params"]["cloudUserName"] == "me@example.com"

    [device] = await kasa.get_device_list("tok")
    assert device.deviceId == "dev-1"
    assert fake.requests[1].url.params["token"] == "tok"
    assert str(fake.requests[1].url).startswith("https://wap.tplinkcloud.com")


@pytest.mark.asyncio
async def test_passthrough_commands():
    fake = KasaFake()
    kasa = KasaClient(client=mock_client(fake))

    assert await kasa.get_device_state("tok", PLUG) == {"relay_state": 1}
    await kasa.turn_on("tok", PLUG)
    await kasa.turn_off("tok", PLUG)
    await kasa.set_brightness("tok", PLUG, 150)
    await kasa.set_color("tok", PLUG, 120, 80, 60)
    await kasa.set_color_temperature("tok", PLUG, 12000)
    assert await kasa.get_energy_usage("tok", PLUG) == {"power_mw": 1200}

    envelope = json.loads(fake.requests[0].content)
    assert envelope["method"] == "passthrough"
    assert envelope["params"]["deviceId"] == "dev-1"
    assert fake.requests[0].url.host == "use1-wap.tplinkcloud.com"
    assert fake.requests[0].url.params["token"] == "tok"

    assert fake.nested(1) == {"system": {"set_relay_state": {"state": 1}}}
    assert fake.nested(2) == {"system": {"set_relay_state": {"state": 0}}}
    assert fake.nested(3) == {"smartlife.iot.dimmer": {"set_brightness": {"brightness": 100}}}
    assert fake.nested(4) == {
        "smartlife.iot.smartbulb.lightingservice": {
            "transition_light_state": {
                "hue": 120,
                "saturation": 80,
                "brightness": 60,
                "color_temp": 0,
            }
        }
    }
    assert fake.nested(5) == {
        "smartlife.iot.smartbulb.lightingservice": {
            "transition_light_state": {"color_temp": 9000}
        }
    }


@pytest.mark.asyncio
async def test_error_code_checked_before_response_data():
    kasa = KasaClient(client=mock_client(KasaFake(error_code=-20651)))

    with pytest.raises(VendorAPIError, match="Token expired") as exc_info:
        await kasa.get_device_state("stale", PLUG)
    assert exc_info.value.details["error_code"] == -20651


@pytest.mark.asyncio
async def test_http_failure():
    kasa = KasaClient(client=mock_client(lambda request: httpx.Response(502)))
    with pytest.raises(VendorAPIError) as exc_info:
        await kasa.get_device_list("tok")
    assert exc_info.value.status_code == 502
