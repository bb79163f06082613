"""Tests for the MQTT client and adapter."""

import asyncio
import json

import httpx
import pytest

from devicehub.adapters import MQTTAdapter, MQTTClient, MQTTConfig, MQTTMessage
from devicehub.errors import DeviceDisconnectedError, DeviceResponseError
from devicehub.models import Device

from conftest import make_device_create, mock_client

BRIDGE = "http://bridge.local"


class Recorder:
    """HTTP bridge fake that records published messages."""

    def __init__(self, fail_topics=()):
        self.published = []
        self.requests = []
        self.fail_topics = set(fail_topics)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(request)
        if body["topic"] in self.fail_topics:
            return httpx.Response(500)
        self.published.append(body)
        return httpx.Response(200)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def client(recorder: Recorder) -> MQTTClient:
    return MQTTClient(client=mock_client(recorder))


class TestQueueing:
    @pytest.mark.asyncio
    async def test_publish_while_disconnected_queues(self, client, recorder):
        await client.publish("a/set", "ON")
        await client.publish("b/set", "OFF", qos=1, retain=True)

        assert recorder.published == []
        assert [m.topic for m in client.queued_messages] == ["a/set", "b/set"]

    @pytest.mark.asyncio
    async def test_connect_flushes_in_publish_order(self, client, recorder):
        for i in range(3):
            await client.publish(f"t/{i}", str(i))

        await client.connect(MQTTConfig(broker=BRIDGE))

        assert [m["topic"] for m in recorder.published] == ["t/0", "t/1", "t/2"]
        assert client.queued_messages == []
        assert client.is_connected

    @pytest.mark.asyncio
    async def test_failed_message_stays_at_head(self):
        recorder = Recorder(fail_topics={"t/1"})
        client = MQTTClient(client=mock_client(recorder))
        for i in range(3):
            await client.publish(f"t/{i}", str(i))

        with pytest.raises(DeviceResponseError):
            await client.connect(MQTTConfig(broker=BRIDGE))

        assert [m["topic"] for m in recorder.published] == ["t/0"]
        assert [m.topic for m in client.queued_messages] == ["t/1", "t/2"]

    @pytest.mark.asyncio
    async def test_publish_during_flush_keeps_order(self):
        delivered = []

        async def slow_bridge(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.02)
            delivered.append(json.loads(request.content)["topic"])
            return httpx.Response(200)

        client = MQTTClient(client=mock_client(slow_bridge))
        for i in range(1, 4):
            await client.publish(f"t/{i}", str(i))

        connecting = asyncio.create_task(client.connect(MQTTConfig(broker=BRIDGE)))
        await asyncio.sleep(0.01)
        await client.publish("t/4", "4")
        await connecting

        assert delivered == ["t/1", "t/2", "t/3", "t/4"]
        assert client.queued_messages == []

    @pytest.mark.asyncio
    async def test_concurrent_connects_deliver_each_message_once(self, client, recorder):
        for i in range(3):
            await client.publish(f"t/{i}", str(i))

        config = MQTTConfig(broker=BRIDGE)
        await asyncio.gather(client.connect(config), client.connect(config))

        assert [m["topic"] for m in recorder.published] == ["t/0", "t/1", "t/2"]
        assert client.queued_messages == []

    @pytest.mark.asyncio
    async def test_deliver_without_broker_config_raises(self, client):
        with pytest.raises(DeviceDisconnectedError):
            await client._deliver(MQTTMessage(topic="t", payload="x"))

    @pytest.mark.asyncio
    async def test_non_http_broker_only_logs(self, client, recorder):
        await client.connect(MQTTConfig(broker="mqtt://broker.local:1883"))
        await client.publish("x/set", "ON")
        assert recorder.requests == []


class TestPublish:
    @pytest.mark.asyncio
    async def test_bridge_payload_and_basic_auth(self, client, recorder):
        await client.connect(MQTTConfig(broker=BRIDGE, username="user", password="pw"))
        await client.publish("lamp/set", "ON", qos=2, retain=True)

        request = recorder.requests[0]
        assert str(request.url) == f"{BRIDGE}/publish"
        assert request.headers["Authorization"].startswith("Basic ")
        assert recorder.published[0] == {
            "topic": "lamp/set",
            "payload": "ON",
            "qos": 2,
            "retain": True,
        }

    @pytest.mark.asyncio
    async def test_helpers(self, client, recorder):
        await client.connect(MQTTConfig(broker=BRIDGE))
        await client.turn_on("home/lamp")
        await client.turn_off("home/lamp")
        await client.set_brightness("home/lamp", 300)
        await client.set_brightness("home/lamp", -5)
        await client.set_rgb_color("home/lamp", 255, 128, 0)
        await client.set_temperature("home/thermostat", 21.5)

        assert [(m["topic"], m["payload"]) for m in recorder.published] == [
            ("home/lamp/set", "ON"),
            ("home/lamp/set", "OFF"),
            ("home/lamp/brightness/set", "255"),
            ("home/lamp/brightness/set", "0"),
            ("home/lamp/rgb/set", "255,128,0"),
            ("home/thermostat/temperature/set", "21.5"),
        ]

    @pytest.mark.asyncio
    async def test_home_assistant_discovery(self, client, recorder):
        await client.connect(MQTTConfig(broker=BRIDGE))
        await client.publish_home_assistant_discovery(
            device_id="lamp1",
            device_name="Lamp",
            device_type="light",
            state_topic="home/lamp/state",
            command_topic="home/lamp/set",
            additional_config={"brightness": True},
        )

        message = recorder.published[0]
        assert message["topic"] == "homeassistant/light/lamp1/config"
        assert message["retain"] is True
        payload = json.loads(message["payload"])
        assert payload["unique_id"] == "lamp1"
        assert payload["command_topic"] == "home/lamp/set"
        assert payload["brightness"] is True


class TestSubscriptions:
    @pytest.mark.asyncio
    async def test_subscribe_requires_connection(self, client):
        with pytest.raises(DeviceDisconnectedError):
            await client.subscribe("x", lambda topic, message: None)
        with pytest.raises(DeviceDisconnectedError):
            await client.unsubscribe("x")

    @pytest.mark.asyncio
    async def test_subscribe_unsubscribe_and_disconnect(self, client):
        await client.connect(MQTTConfig(broker=BRIDGE))
        await client.subscribe("a", lambda topic, message: None)
        await client.subscribe("b", lambda topic, message: None, qos=1)
        await client.unsubscribe("a")
        assert list(client.subscriptions) == ["b"]

        await client.disconnect()
        assert client.subscriptions == {}
        assert not client.is_connected

    @pytest.mark.asyncio
    async def test_subscribe_to_state_decodes_json(self, client):
        states = []
        await client.connect(MQTTConfig(broker=BRIDGE))
        await client.subscribe_to_state("home/lamp", states.append)

        subscription = client.subscriptions["home/lamp/state"]
        subscription.callback("home/lamp/state", b'{"on": true}')
        subscription.callback("home/lamp/state", b"not json")

        assert states == [{"on": True}]


class TestAdapter:
    def _device(self, **overrides) -> Device:
        data = make_device_create(protocol="mqtt", apiEndpoint=None, **overrides)
        return Device(id="lamp1", **data.model_dump(exclude={"id"}))

    @pytest.mark.asyncio
    async def test_send_uses_default_base_topic(self, client, recorder):
        await client.connect(MQTTConfig(broker=BRIDGE))
        adapter = MQTTAdapter(client)
        device = self._device()

        result = await adapter.send(device, device.find_command("toggle"), {"force": True})

        assert result == {"topic": "devices/lamp1/command/toggle", "queued": False}
        assert json.loads(recorder.published[0]["payload"]) == {"force": True}

    @pytest.mark.asyncio
    async def test_send_uses_device_topic_and_endpoint(self, client):
        adapter = MQTTAdapter(client)
        data = make_device_create(protocol="mqtt", apiEndpoint="home/lamp")
        device = Device(id="lamp1", **data.model_dump(exclude={"id"}))

        result = await adapter.send(device, device.find_command("set_brightness"), {"level": 1})

        assert result == {"topic": "home/lamp/brightness", "queued": True}

    @pytest.mark.asyncio
    async def test_check_status_reflects_connection(self, client):
        adapter = MQTTAdapter(client)
        assert await adapter.check_status(self._device()) == {"online": False}
        await client.connect(MQTTConfig(broker=BRIDGE))
        assert await adapter.check_status(self._device()) == {"online": True}
