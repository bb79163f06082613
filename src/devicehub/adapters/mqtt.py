"""MQTT client and adapter.

There is no MQTT wire protocol here. Messages are delivered through an
MQTT-HTTP bridge (``POST {broker}/publish``) when the broker URL is http(s);
for any other broker scheme a publish is only logged. Messages published
while disconnected are queued and flushed in order on ``connect()``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, Optional

import httpx

from ..constants import MQTT_DEFAULT_TOPIC_PREFIX, VENDOR_TIMEOUT_DEFAULT
from ..errors import DeviceDisconnectedError, DeviceResponseError, DeviceTimeoutError, NetworkError
from ..models import Device, DeviceCommand
from ..utils.time import now_ms
from .base import ProtocolAdapter

logger = logging.getLogger(__name__)

MessageCallback = Callable[[str, bytes], None]


@dataclass
class MQTTConfig:
    """Broker connection settings."""

    broker: str
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: str = field(default_factory=lambda: f"devicehub_{now_ms()}")
    keepalive: int = 60
    clean: bool = True


@dataclass
class MQTTMessage:
    topic: str
    payload: str
    qos: int = 0
    retain: bool = False


@dataclass
class MQTTSubscription:
    topic: str
    callback: MessageCallback
    qos: int = 0


class MQTTClient:
    """Queueing MQTT publisher with an HTTP bridge transport."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = VENDOR_TIMEOUT_DEFAULT):
        self.config: Optional[MQTTConfig] = None
        self.timeout = timeout
        self._connected = False
        self._queue: Deque[MQTTMessage] = deque()
        # Serializes queue drains and sends so delivery stays FIFO
        self._send_lock = asyncio.Lock()
        self._subscriptions: Dict[str, MQTTSubscription] = {}
        self._client = client

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def queued_messages(self) -> list[MQTTMessage]:
        """Snapshot of messages waiting for a connection, oldest first."""
        return list(self._queue)

    @property
    def subscriptions(self) -> Dict[str, MQTTSubscription]:
        return dict(self._subscriptions)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def connect(self, config: MQTTConfig) -> None:
        """Mark the client connected and flush queued messages.

        If a queued message fails to send it stays at the head of the queue
        and the error propagates; the client remains connected.
        """
        self.config = config
        logger.info("Connecting to MQTT broker %s as %s", config.broker, config.client_id)
        self._connected = True
        await self._flush_queue()

    async def disconnect(self) -> None:
        if not self._connected:
            logger.debug("MQTT client already disconnected")
            return
        self._subscriptions.clear()
        self._connected = False
        self.config = None
        logger.info("Disconnected from MQTT broker")

    async def _flush_queue(self) -> None:
        async with self._send_lock:
            if self._queue:
                logger.info("Flushing %d queued MQTT messages", len(self._queue))
            while self._queue and self._connected:
                await self._deliver(self._queue[0])
                self._queue.popleft()

    async def publish(
        self, topic: str, payload: str, qos: int = 0, retain: bool = False
    ) -> None:
        """Publish a message, or queue it while disconnected.

        While older messages are still queued or being drained the message
        joins the queue behind them.
        """
        message = MQTTMessage(topic=topic, payload=payload, qos=qos, retain=retain)
        if not self._connected:
            logger.debug("MQTT not connected, queuing message for %s", topic)
            self._queue.append(message)
            return
        if self._queue or self._send_lock.locked():
            self._queue.append(message)
            await self._flush_queue()
            return
        async with self._send_lock:
            await self._deliver(message)

    def _require_config(self) -> MQTTConfig:
        if self.config is None:
            raise DeviceDisconnectedError("MQTT client")
        return self.config

    async def _deliver(self, message: MQTTMessage) -> None:
        config = self._require_config()
        if not config.broker.startswith(("http://", "https://")):
            logger.info("Publish to %s (no transport for %s)", message.topic, config.broker)
            return
        await self._publish_via_http(message)

    async def _publish_via_http(self, message: MQTTMessage) -> None:
        config = self._require_config()
        url = f"{config.broker}/publish"
        auth = None
        if config.username and config.password:
            auth = httpx.BasicAuth(config.username, config.password)

        client = await self._get_client()
        try:
            response = await client.post(
                url,
                json={
                    "topic": message.topic,
                    "payload": message.payload,
                    "qos": message.qos,
                    "retain": message.retain,
                },
                auth=auth,
            )
        except httpx.TimeoutException as exc:
            raise DeviceTimeoutError(url, self.timeout, cause=exc) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(url, cause=exc) from exc

        if not response.is_success:
            raise DeviceResponseError(response.status_code, response.reason_phrase, url)
        logger.debug("Published to %s via HTTP bridge", message.topic)

    async def subscribe(self, topic: str, callback: MessageCallback, qos: int = 0) -> None:
        """Register a callback for ``topic``. Incoming delivery is not wired up."""
        if not self._connected:
            raise DeviceDisconnectedError("MQTT client")
        self._subscriptions[topic] = MQTTSubscription(topic=topic, callback=callback, qos=qos)
        logger.info("Subscribed to %s", topic)

    async def unsubscribe(self, topic: str) -> None:
        if not self._connected:
            raise DeviceDisconnectedError("MQTT client")
        self._subscriptions.pop(topic, None)
        logger.info("Unsubscribed from %s", topic)

    # ===== Helpers for common device topics =====

    async def turn_on(self, device_topic: str) -> None:
        await self.publish(f"{device_topic}/set", "ON")

    async def turn_off(self, device_topic: str) -> None:
        await self.publish(f"{device_topic}/set", "OFF")

    async def set_brightness(self, device_topic: str, brightness: int) -> None:
        """Set light brightness, clamped to 0-255."""
        clamped = max(0, min(255, brightness))
        await self.publish(f"{device_topic}/brightness/set", str(clamped))

    async def set_rgb_color(self, device_topic: str, r: int, g: int, b: int) -> None:
        await self.publish(f"{device_topic}/rgb/set", f"{r},{g},{b}")

    async def set_temperature(self, device_topic: str, temperature: float) -> None:
        await self.publish(f"{device_topic}/temperature/set", str(temperature))

    async def subscribe_to_state(
        self, device_topic: str, callback: Callable[[Any], None]
    ) -> None:
        """Subscribe to ``{device_topic}/state`` and hand decoded JSON to ``callback``."""

        def _on_state(topic: str, message: bytes) -> None:
            try:
                state = json.loads(message)
            except ValueError as exc:
                logger.error("Failed to parse state on %s: %s", topic, exc)
                return
            callback(state)

        await self.subscribe(f"{device_topic}/state", _on_state)

    async def publish_home_assistant_discovery(
        self,
        device_id: str,
        device_name: str,
        device_type: str,
        state_topic: str,
        command_topic: Optional[str] = None,
        availability_topic: Optional[str] = None,
        additional_config: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Publish a retained Home Assistant MQTT discovery config.

        Args:
            device_type: One of switch, light, sensor, binary_sensor, climate
        """
        topic = f"homeassistant/{device_type}/{device_id}/config"
        payload: Dict[str, Any] = {
            "name": device_name,
            "unique_id": device_id,
            "state_topic": state_topic,
            "command_topic": command_topic,
            "availability_topic": availability_topic,
        }
        payload.update(additional_config or {})
        await self.publish(topic, json.dumps(payload), retain=True)
        logger.info("Published Home Assistant discovery for %s", device_name)


class MQTTAdapter(ProtocolAdapter):
    """Routes device commands onto MQTT topics."""

    def __init__(self, client: MQTTClient):
        self.client = client

    @staticmethod
    def base_topic(device: Device) -> str:
        return device.apiEndpoint or f"{MQTT_DEFAULT_TOPIC_PREFIX}/{device.id}"

    async def check_status(self, device: Device) -> Dict[str, Any]:
        return {"online": self.client.is_connected}

    async def send(
        self, device: Device, command: DeviceCommand, parameters: Dict[str, Any]
    ) -> Any:
        topic = f"{self.base_topic(device)}{command.endpoint or f'/command/{command.id}'}"
        queued = not self.client.is_connected
        await self.client.publish(topic, json.dumps(parameters))
        return {"topic": topic, "queued": queued}

    async def close(self) -> None:
        await self.client.close()
