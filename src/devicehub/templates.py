"""Ready-made device definitions for common device kinds."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .constants import DeviceType, Protocol
from .errors import InputValidationError
from .models import DeviceCommand, DeviceCreate


def _command(
    command_id: str,
    name: str,
    description: str,
    parameters: Optional[List[Dict[str, Any]]] = None,
    endpoint: Optional[str] = None,
    method: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "id": command_id,
        "name": name,
        "description": description,
        "parameters": parameters or [],
        "endpoint": endpoint,
        "method": method,
    }


def _number_param(name: str, default: float, description: str) -> Dict[str, Any]:
    return {
        "name": name,
        "type": "number",
        "required": True,
        "default": default,
        "description": description,
    }


_SMART_HOME_TEMPLATES: Dict[DeviceType, Dict[str, Any]] = {
    DeviceType.SMART_LIGHT: {
        "capabilities": ["on", "off", "brightness", "color"],
        "currentState": {"on": False, "brightness": 100, "color": "#FFFFFF"},
        "commands": [
            _command("turn_on", "Turn On", "Turn the light on"),
            _command("turn_off", "Turn Off", "Turn the light off"),
            _command(
                "set_brightness",
                "Set Brightness",
                "Set light brightness",
                [_number_param("brightness", 100, "Brightness level 0-100")],
            ),
            _command(
                "set_color",
                "Set Color",
                "Set light color",
                [
                    {
                        "name": "color",
                        "type": "string",
                        "required": True,
                        "default": "#FFFFFF",
                        "description": "Color in hex format",
                    }
                ],
            ),
        ],
    },
    DeviceType.SMART_PLUG: {
        "capabilities": ["on", "off", "power_monitoring"],
        "currentState": {"on": False, "power": 0},
        "commands": [
            _command("turn_on", "Turn On", "Turn the plug on"),
            _command("turn_off", "Turn Off", "Turn the plug off"),
            _command("get_power", "Get Power Usage", "Get current power usage"),
        ],
    },
    DeviceType.THERMOSTAT: {
        "capabilities": ["heat", "cool", "auto", "get_temperature"],
        "currentState": {"mode": "off", "temperature": 20, "target": 20},
        "commands": [
            _command(
                "set_temperature",
                "Set Temperature",
                "Set target temperature",
                [_number_param("temperature", 20, "Target temperature in Celsius")],
            ),
            _command(
                "set_mode",
                "Set Mode",
                "Set thermostat mode",
                [
                    {
                        "name": "mode",
                        "type": "string",
                        "required": True,
                        "default": "auto",
                        "description": "Mode: heat, cool, auto, off",
                    }
                ],
            ),
        ],
    },
}


def create_smart_home_device(
    name: str,
    kind: DeviceType | str,
    api_endpoint: Optional[str] = None,
    protocol: Protocol = Protocol.HTTP,
) -> DeviceCreate:
    """Build a DeviceCreate for a smart light, smart plug or thermostat.

    Raises:
        InputValidationError: For any other device kind
    """
    try:
        device_type = DeviceType(kind)
    except ValueError as exc:
        raise InputValidationError(f"Unknown device type '{kind}'") from exc

    template = _SMART_HOME_TEMPLATES.get(device_type)
    if template is None:
        raise InputValidationError(
            f"No smart home template for '{device_type.value}'",
            details={"supported": [t.value for t in _SMART_HOME_TEMPLATES]},
        )

    return DeviceCreate.model_validate(
        {
            "name": name,
            "type": device_type,
            "protocol": protocol,
            "apiEndpoint": api_endpoint,
            **template,
        }
    )


def printer_commands() -> List[DeviceCommand]:
    """Command set for OctoPrint-compatible 3D printers."""
    temperature_param = "Target temperature in Celsius"
    commands = [
        _command(
            "print_file",
            "Start Print",
            "Start printing a file",
            [
                {
                    "name": "filename",
                    "type": "string",
                    "required": True,
                    "description": "Name of the file to print",
                }
            ],
            "/api/job",
            "POST",
        ),
        _command("pause_print", "Pause Print", "Pause current print job", None, "/api/job", "POST"),
        _command("resume_print", "Resume Print", "Resume paused print job", None, "/api/job", "POST"),
        _command("cancel_print", "Cancel Print", "Cancel current print job", None, "/api/job", "DELETE"),
        _command(
            "preheat_bed",
            "Preheat Bed",
            "Preheat the print bed",
            [_number_param("temperature", 60, temperature_param)],
            "/api/printer/bed",
            "POST",
        ),
        _command(
            "preheat_nozzle",
            "Preheat Nozzle",
            "Preheat the nozzle",
            [_number_param("temperature", 200, temperature_param)],
            "/api/printer/tool",
            "POST",
        ),
        _command(
            "home_all", "Home All Axes", "Home all printer axes", None, "/api/printer/printhead", "POST"
        ),
        _command("get_status", "Get Status", "Get current printer status", None, "/api/printer", "GET"),
    ]
    return [DeviceCommand.model_validate(command) for command in commands]


__all__ = ["create_smart_home_device", "printer_commands"]
