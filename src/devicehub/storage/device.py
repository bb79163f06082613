"""Device persistence built on the record storage base."""

from __future__ import annotations

from ..models import Device
from .base import BaseRecordStorage


class DeviceStorage(BaseRecordStorage[Device]):
    """Store each Device as ``<devices_dir>/<id>.json``."""

    @property
    def record_type(self) -> str:
        return "device"

    def _validate_record(self, record: Device | dict) -> Device:
        if isinstance(record, Device):
            return record
        return Device.model_validate(record)

    def list_devices(self) -> list[Device]:
        return self.list_records()

    def get_device(self, device_id: str) -> Device | None:
        return self.get_record(device_id)

    def upsert_device(self, device: Device | dict) -> Device:
        return self.upsert_record(device)

    def delete_device(self, device_id: str) -> bool:
        return self.delete_record(device_id)


__all__ = ["DeviceStorage"]
