"""In-memory device registry backed by per-device JSON files."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .constants import DeviceType
from .errors import InputValidationError
from .models import Device, DeviceCreate, DeviceUpdate, new_id
from .storage import DeviceStorage

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Authoritative map of device id to Device.

    Every mutation is written to storage before it returns, so the in-memory
    map and the files on disk never disagree for longer than one call.
    """

    def __init__(self, storage: DeviceStorage):
        self._storage = storage
        self._devices: Dict[str, Device] = {}
        self._load()

    def _load(self) -> None:
        for device in self._storage.list_devices():
            self._devices[device.id] = device
        logger.info("Loaded %d devices from %s", len(self._devices), self._storage.storage_dir)

    def add(self, definition: DeviceCreate) -> Device:
        """Register a new device.

        Raises:
            InputValidationError: If an explicit id is already registered
        """
        device_id = definition.id or new_id()
        if device_id in self._devices:
            raise InputValidationError(
                f"Device id {device_id} already exists", details={"device_id": device_id}
            )

        fields = definition.model_dump(exclude={"id"})
        device = Device(id=device_id, status="offline", lastSeen=None, **fields)
        self._storage.upsert_device(device)
        self._devices[device.id] = device
        logger.info("Added device %s (%s, %s)", device.id, device.name, device.protocol.value)
        return device

    def get(self, device_id: str) -> Optional[Device]:
        return self._devices.get(device_id)

    def list(self) -> List[Device]:
        return list(self._devices.values())

    def list_by_type(self, device_type: DeviceType) -> List[Device]:
        return [device for device in self._devices.values() if device.type == device_type]

    def list_online(self) -> List[Device]:
        return [device for device in self._devices.values() if device.status == "online"]

    def update(self, device_id: str, patch: DeviceUpdate | Dict[str, Any]) -> Optional[Device]:
        """Shallow-merge ``patch`` into a device and persist it.

        Returns:
            The updated device, or None if the id is unknown

        Raises:
            InputValidationError: If the patch changes the id or yields an invalid device
        """
        current = self._devices.get(device_id)
        if current is None:
            return None

        if isinstance(patch, DeviceUpdate):
            changes = patch.model_dump(exclude_unset=True)
        else:
            changes = dict(patch)

        if "id" in changes and changes["id"] != device_id:
            raise InputValidationError(
                "Device id cannot be changed",
                details={"device_id": device_id, "requested": changes["id"]},
            )
        changes.pop("id", None)
        changes.pop("createdAt", None)

        merged = current.model_dump()
        merged.update(changes)
        try:
            device = Device.model_validate(merged)
        except ValidationError as exc:
            raise InputValidationError(
                f"Invalid update for device {device_id}: {exc}",
                details={"device_id": device_id},
            ) from exc

        self._storage.upsert_device(device)
        self._devices[device_id] = device
        logger.debug("Updated device %s: %s", device_id, sorted(changes))
        return device

    def remove(self, device_id: str) -> bool:
        """Delete a device. Returns False if it was not registered."""
        if self._devices.pop(device_id, None) is None:
            return False
        self._storage.delete_device(device_id)
        logger.info("Removed device %s", device_id)
        return True

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._devices


__all__ = ["DeviceRegistry"]
