"""Command execution service for device commands."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from .adapters import AdapterRegistry
from .constants import EXECUTION_HISTORY_DEFAULT
from .errors import CommandNotFoundError, DeviceNotFoundError, InputValidationError
from .models import DeviceCommand, Execution
from .registry import DeviceRegistry
from .utils.time import now_ms

logger = logging.getLogger(__name__)


class CommandExecutor:
    """Executes commands on devices through their protocol adapters."""

    def __init__(
        self,
        registry: DeviceRegistry,
        adapters: AdapterRegistry,
        history_size: int = EXECUTION_HISTORY_DEFAULT,
    ):
        self.registry = registry
        self.adapters = adapters
        self.history_size = max(1, history_size)
        self._device_locks: Dict[str, asyncio.Lock] = {}
        self._executions: "OrderedDict[str, Execution]" = OrderedDict()

    def _get_device_lock(self, device_id: str) -> asyncio.Lock:
        """Get or create a lock for device operations."""
        if device_id not in self._device_locks:
            self._device_locks[device_id] = asyncio.Lock()
        return self._device_locks[device_id]

    def forget_device(self, device_id: str) -> None:
        """Drop the lock for a removed device."""
        lock = self._device_locks.get(device_id)
        if lock is not None and not lock.locked():
            del self._device_locks[device_id]

    @staticmethod
    def resolve_parameters(
        command: DeviceCommand, parameters: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Fill defaults for omitted parameters and check required ones.

        Unknown parameter names are passed through unchanged.

        Raises:
            InputValidationError: If a required parameter has no value and no default
        """
        resolved = dict(parameters or {})
        missing = []
        for param in command.parameters:
            if resolved.get(param.name) is not None:
                continue
            if param.default is not None:
                resolved[param.name] = param.default
            elif param.required:
                missing.append(param.name)
        if missing:
            raise InputValidationError(
                f"Missing required parameters for '{command.id}': {', '.join(missing)}",
                details={"command_id": command.id, "missing": missing},
            )
        return resolved

    def _record(self, execution: Execution) -> None:
        self._executions[execution.id] = execution
        while len(self._executions) > self.history_size:
            self._executions.popitem(last=False)

    async def execute(
        self,
        device_id: str,
        command_id: str,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> Execution:
        """Run one command and return its terminal Execution.

        Raises:
            DeviceNotFoundError: Unknown device (nothing recorded)
            CommandNotFoundError: Unknown command (nothing recorded)
            InputValidationError: Missing required parameter (nothing recorded)
            Exception: Whatever the adapter raised, after the execution is marked failed
        """
        device = self.registry.get(device_id)
        if device is None:
            raise DeviceNotFoundError(device_id)

        command = device.find_command(command_id)
        if command is None:
            raise CommandNotFoundError(command_id, device.name)

        resolved = self.resolve_parameters(command, parameters)
        adapter = self.adapters.get(device.protocol)

        execution = Execution(deviceId=device_id, commandId=command_id, parameters=resolved)
        self._record(execution)

        # Serialize commands per device; different devices run concurrently
        lock = self._get_device_lock(device_id)
        async with lock:
            execution.mark_executing()
            try:
                result = await adapter.send(device, command, resolved)
            except Exception as exc:
                execution.mark_failed(str(exc) or exc.__class__.__name__)
                logger.error(
                    "Command %s failed on %s: %s", command.name, device.name, execution.error
                )
                raise

            execution.mark_completed(result)
            logger.info("Command %s executed on %s", command.name, device.name)

        self.registry.update(device_id, {"lastSeen": now_ms()})
        return execution

    def get_execution(self, execution_id: str) -> Optional[Execution]:
        return self._executions.get(execution_id)

    def list_executions(self, device_id: Optional[str] = None) -> List[Execution]:
        """Return recorded executions, oldest first, optionally for one device."""
        executions = list(self._executions.values())
        if device_id is not None:
            executions = [e for e in executions if e.deviceId == device_id]
        return executions


__all__ = ["CommandExecutor"]
