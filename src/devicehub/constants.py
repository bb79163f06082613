"""Application constants including protocol, device kinds and timing definitions.

Centralized constants to ensure consistency across the registry, adapters and API layers.
"""

from __future__ import annotations

from enum import Enum


class DeviceType(str, Enum):
    """Kinds of controllable endpoints known to the registry."""

    PRINTER_3D = "3d_printer"
    SMART_LIGHT = "smart_light"
    SMART_PLUG = "smart_plug"
    CAMERA = "camera"
    SENSOR = "sensor"
    THERMOSTAT = "thermostat"
    ROBOT = "robot"
    ARDUINO = "arduino"
    ESP32 = "esp32"
    RASPBERRY_PI = "raspberry_pi"
    CUSTOM = "custom"


class Protocol(str, Enum):
    """Transport used to reach a device; selects the protocol adapter."""

    HTTP = "http"
    MQTT = "mqtt"
    WEBSOCKET = "websocket"
    SERIAL = "serial"
    BLUETOOTH = "bluetooth"
    WIFI = "wifi"


# ============================================================================
# Timeout Constants
# ============================================================================

# Health check timeout (seconds), applied per device
STATUS_TIMEOUT_DEFAULT = 5.0

# Command send timeout (seconds) for the generic HTTP adapter
COMMAND_TIMEOUT_DEFAULT = 10.0

# Vendor cloud / bridge request timeout (seconds)
VENDOR_TIMEOUT_DEFAULT = 10.0

# ============================================================================
# Runtime Defaults
# ============================================================================

# Number of execution records kept in memory
EXECUTION_HISTORY_DEFAULT = 500

# Periodic status polling interval (seconds); 0 disables the poll loop
POLL_INTERVAL_DEFAULT = 0.0

# Topic prefix for MQTT devices that do not declare their own base topic
MQTT_DEFAULT_TOPIC_PREFIX = "devices"
