"""Device registry, command and status routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from ..constants import DeviceType
from ..device_service import DeviceService
from ..models import Device, DeviceCreate, DeviceUpdate, Execution
from .exceptions import device_not_found, execution_not_found, handle_device_errors

router = APIRouter(prefix="/api", tags=["devices"])


class ExecuteRequest(BaseModel):
    commandId: str
    parameters: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


def _service(request: Request) -> DeviceService:
    return request.app.state.service


@router.get("/devices")
async def list_devices(request: Request, type: Optional[DeviceType] = None) -> List[Device]:
    """List registered devices, optionally filtered by type."""
    return _service(request).list_devices(type)


@router.post("/devices", status_code=201)
@handle_device_errors
async def add_device(request: Request, payload: DeviceCreate) -> Device:
    return await _service(request).add_device(payload)


@router.post("/devices/status")
async def check_all_devices(request: Request) -> List[Device]:
    """Check every device now and return the refreshed records."""
    return await _service(request).check_all_devices()


@router.get("/devices/{device_id}")
async def get_device(request: Request, device_id: str) -> Device:
    device = _service(request).get_device(device_id)
    if device is None:
        raise device_not_found(device_id)
    return device


@router.put("/devices/{device_id}")
@handle_device_errors
async def update_device(request: Request, device_id: str, payload: DeviceUpdate) -> Device:
    device = _service(request).update_device(device_id, payload)
    if device is None:
        raise device_not_found(device_id)
    return device


@router.delete("/devices/{device_id}")
@handle_device_errors
async def remove_device(request: Request, device_id: str) -> Dict[str, str]:
    if not _service(request).remove_device(device_id):
        raise device_not_found(device_id)
    return {"detail": "deleted"}


@router.post("/devices/{device_id}/execute")
@handle_device_errors
async def execute_command(request: Request, device_id: str, payload: ExecuteRequest) -> Execution:
    """Run a command; adapter failures surface as 5xx after being recorded."""
    return await _service(request).execute_command(
        device_id, payload.commandId, payload.parameters
    )


@router.get("/devices/{device_id}/status")
async def check_device_status(request: Request, device_id: str) -> Device:
    device = await _service(request).check_device_status(device_id)
    if device is None:
        raise device_not_found(device_id)
    return device


@router.get("/executions")
async def list_executions(request: Request, deviceId: Optional[str] = None) -> List[Execution]:
    return _service(request).list_executions(deviceId)


@router.get("/executions/{execution_id}")
async def get_execution(request: Request, execution_id: str) -> Execution:
    execution = _service(request).get_execution(execution_id)
    if execution is None:
        raise execution_not_found(execution_id)
    return execution
