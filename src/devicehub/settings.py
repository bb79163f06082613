"""Runtime settings collected from environment variables.

Settings are read once when the service is built and passed explicitly to the
components that need them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import (
    COMMAND_TIMEOUT_DEFAULT,
    EXECUTION_HISTORY_DEFAULT,
    POLL_INTERVAL_DEFAULT,
    STATUS_TIMEOUT_DEFAULT,
)
from .utils import get_config_dir, get_env_bool, get_env_float, get_env_int, get_env_str

# Environment variable names
STATUS_TIMEOUT_ENV = "DEVICEHUB_STATUS_TIMEOUT"
COMMAND_TIMEOUT_ENV = "DEVICEHUB_COMMAND_TIMEOUT"
POLL_INTERVAL_ENV = "DEVICEHUB_POLL_INTERVAL"
CHECK_ON_ADD_ENV = "DEVICEHUB_CHECK_ON_ADD"
EXECUTION_HISTORY_ENV = "DEVICEHUB_EXECUTION_HISTORY"
MQTT_BROKER_ENV = "DEVICEHUB_MQTT_BROKER"
MQTT_USERNAME_ENV = "DEVICEHUB_MQTT_USERNAME"
MQTT_PASSWORD_ENV = "DEVICEHUB_MQTT_PASSWORD"
LEGACY_BLOB_ENV = "DEVICEHUB_LEGACY_BLOB"


@dataclass
class Settings:
    """Configuration for a DeviceService instance."""

    config_dir: Path
    status_timeout: float = STATUS_TIMEOUT_DEFAULT
    command_timeout: float = COMMAND_TIMEOUT_DEFAULT
    poll_interval: float = POLL_INTERVAL_DEFAULT
    check_on_add: bool = True
    execution_history: int = EXECUTION_HISTORY_DEFAULT
    mqtt_broker: Optional[str] = None
    mqtt_username: Optional[str] = None
    mqtt_password: Optional[str] = None
    legacy_blob: Optional[Path] = None

    @property
    def devices_dir(self) -> Path:
        """Directory holding one JSON file per device."""
        return self.config_dir / "devices"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from DEVICEHUB_* environment variables."""
        legacy = get_env_str(LEGACY_BLOB_ENV)
        return cls(
            config_dir=get_config_dir(),
            status_timeout=get_env_float(STATUS_TIMEOUT_ENV, STATUS_TIMEOUT_DEFAULT),
            command_timeout=get_env_float(COMMAND_TIMEOUT_ENV, COMMAND_TIMEOUT_DEFAULT),
            poll_interval=get_env_float(POLL_INTERVAL_ENV, POLL_INTERVAL_DEFAULT),
            check_on_add=get_env_bool(CHECK_ON_ADD_ENV, True),
            execution_history=get_env_int(EXECUTION_HISTORY_ENV, EXECUTION_HISTORY_DEFAULT),
            mqtt_broker=get_env_str(MQTT_BROKER_ENV),
            mqtt_username=get_env_str(MQTT_USERNAME_ENV),
            mqtt_password=get_env_str(MQTT_PASSWORD_ENV),
            legacy_blob=Path(legacy) if legacy else None,
        )
