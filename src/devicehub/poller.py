"""Device status polling."""

from __future__ import annotations

import asyncio
import logging

from .adapters import AdapterRegistry
from .registry import DeviceRegistry
from .utils.time import now_ms

logger = logging.getLogger(__name__)


class StatusPoller:
    """Probes devices through their adapters and writes status back to the registry."""

    def __init__(self, registry: DeviceRegistry, adapters: AdapterRegistry):
        self.registry = registry
        self.adapters = adapters

    async def check_one(self, device_id: str) -> None:
        """Check a single device. Never raises; any failure marks it offline."""
        device = self.registry.get(device_id)
        if device is None:
            return

        try:
            adapter = self.adapters.get(device.protocol)
            status = await adapter.check_status(device)
        except Exception as exc:
            logger.info("Device %s is offline: %s", device.name, exc)
            self._mark(device_id, online=False)
            return

        self._mark(device_id, online=bool(status.get("online")))

    def _mark(self, device_id: str, online: bool) -> None:
        changes = {"status": "online" if online else "offline"}
        if online:
            changes["lastSeen"] = now_ms()
        try:
            self.registry.update(device_id, changes)
        except Exception:
            logger.exception("Failed to record status for device %s", device_id)

    async def check_all(self) -> None:
        """Check every registered device concurrently."""
        devices = self.registry.list()
        if not devices:
            return
        await asyncio.gather(*(self.check_one(device.id) for device in devices))
        logger.debug(
            "Status check complete: %d of %d devices online",
            len(self.registry.list_online()),
            len(devices),
        )

    async def run_forever(self, interval: float) -> None:
        """Poll all devices every ``interval`` seconds until cancelled."""
        logger.info("Status polling every %.1f seconds", interval)
        try:
            while True:
                await self.check_all()
                await asyncio.sleep(interval)
        except asyncio.CancelledError:
            logger.info("Status polling cancelled")
            raise


__all__ = ["StatusPoller"]
