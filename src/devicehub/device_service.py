"""Device service: wires registry, adapters, executor and poller together.

The service is built explicitly (see ``build_service``) and handed to whoever
needs it; the FastAPI app keeps it on ``app.state.service``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Dict, List, Optional, Set

from .adapters import AdapterRegistry, MQTTClient, MQTTConfig, build_default_adapters
from .constants import DeviceType
from .executor import CommandExecutor
from .models import Device, DeviceCreate, DeviceUpdate, Execution
from .poller import StatusPoller
from .registry import DeviceRegistry
from .settings import Settings
from .storage import DeviceStorage, import_legacy_blob
from .vendors import HueClient

logger = logging.getLogger(__name__)


class DeviceService:
    """Facade over the device control components.

    Owns background tasks (post-add status checks and the optional poll
    loop); ``stop()`` cancels them and closes network clients.
    """

    def __init__(
        self,
        settings: Settings,
        registry: DeviceRegistry,
        adapters: AdapterRegistry,
        mqtt_client: Optional[MQTTClient] = None,
        hue: Optional[HueClient] = None,
    ):
        self.settings = settings
        self.registry = registry
        self.adapters = adapters
        self.mqtt_client = mqtt_client
        self.hue = hue or HueClient()
        self.executor = CommandExecutor(registry, adapters, settings.execution_history)
        self.poller = StatusPoller(registry, adapters)
        self._tasks: Set[asyncio.Task] = set()
        self._poll_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Background tasks
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        """Run ``coro`` in the background and log it if it fails."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background task %s failed", task.get_name(), exc_info=exc)

    @property
    def pending_tasks(self) -> Set[asyncio.Task]:
        return set(self._tasks)

    async def wait_for_background_tasks(self) -> None:
        """Wait for post-add status checks currently in flight."""
        tasks = [task for task in self._tasks if task is not self._poll_task]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Connect MQTT when configured and start periodic polling."""
        logger.info("Service start: %d devices registered", len(self.registry))
        if self.mqtt_client is not None and self.settings.mqtt_broker:
            await self.mqtt_client.connect(
                MQTTConfig(
                    broker=self.settings.mqtt_broker,
                    username=self.settings.mqtt_username,
                    password=self.settings.mqtt_password,
                )
            )
        if self.settings.poll_interval > 0:
            self._poll_task = self._spawn(
                self.poller.run_forever(self.settings.poll_interval), "status-poll"
            )

    async def stop(self) -> None:
        """Cancel background work and release network resources."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._poll_task = None

        if self.mqtt_client is not None:
            await self.mqtt_client.disconnect()
        await self.adapters.close()
        await self.hue.close()
        logger.info("Service stopped")

    # ------------------------------------------------------------------
    # Registry operations
    # ------------------------------------------------------------------

    async def add_device(self, definition: DeviceCreate) -> Device:
        """Register a device and schedule a status check for it."""
        device = self.registry.add(definition)
        if self.settings.check_on_add:
            self._spawn(self.poller.check_one(device.id), f"status-check-{device.id}")
        return device

    def get_device(self, device_id: str) -> Optional[Device]:
        return self.registry.get(device_id)

    def list_devices(self, device_type: Optional[DeviceType] = None) -> List[Device]:
        if device_type is not None:
            return self.registry.list_by_type(device_type)
        return self.registry.list()

    def list_online_devices(self) -> List[Device]:
        return self.registry.list_online()

    def update_device(
        self, device_id: str, patch: DeviceUpdate | Dict[str, Any]
    ) -> Optional[Device]:
        return self.registry.update(device_id, patch)

    def remove_device(self, device_id: str) -> bool:
        removed = self.registry.remove(device_id)
        if removed:
            self.executor.forget_device(device_id)
        return removed

    # ------------------------------------------------------------------
    # Commands and status
    # ------------------------------------------------------------------

    async def execute_command(
        self,
        device_id: str,
        command_id: str,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> Execution:
        return await self.executor.execute(device_id, command_id, parameters)

    def get_execution(self, execution_id: str) -> Optional[Execution]:
        return self.executor.get_execution(execution_id)

    def list_executions(self, device_id: Optional[str] = None) -> List[Execution]:
        return self.executor.list_executions(device_id)

    async def check_device_status(self, device_id: str) -> Optional[Device]:
        """Check one device now and return its refreshed record."""
        await self.poller.check_one(device_id)
        return self.registry.get(device_id)

    async def check_all_devices(self) -> List[Device]:
        await self.poller.check_all()
        return self.registry.list()


def build_service(settings: Optional[Settings] = None) -> DeviceService:
    """Create a DeviceService from settings (environment by default).

    A configured legacy device blob is imported into storage before the
    registry loads.
    """
    settings = settings or Settings.from_env()
    storage = DeviceStorage(settings.devices_dir)
    if settings.legacy_blob is not None:
        import_legacy_blob(settings.legacy_blob, storage)

    registry = DeviceRegistry(storage)
    mqtt_client = MQTTClient()
    adapters = build_default_adapters(
        status_timeout=settings.status_timeout,
        command_timeout=settings.command_timeout,
        mqtt_client=mqtt_client,
    )
    return DeviceService(settings, registry, adapters, mqtt_client=mqtt_client)


__all__ = ["DeviceService", "build_service"]
