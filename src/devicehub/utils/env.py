"""Environment variable helpers.

Blank values are treated as unset everywhere; malformed numbers fall back to
the default with a warning instead of failing startup.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "DEVICEHUB_CONFIG_DIR"
DEFAULT_CONFIG_DIRNAME = ".devicehub"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

N = TypeVar("N", int, float)


def _read(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def get_config_dir() -> Path:
    """Return the devicehub data directory, creating it if needed.

    ``DEVICEHUB_CONFIG_DIR`` wins; otherwise ``~/.devicehub``.
    """
    override = _read(CONFIG_DIR_ENV)
    config_dir = Path(override) if override else Path.home() / DEFAULT_CONFIG_DIRNAME
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """Get a stripped string variable."""
    value = _read(name)
    return default if value is None else value


def get_env_bool(name: str, default: bool) -> bool:
    """Get a boolean variable.

    Accepts 1/0, true/false, yes/no and on/off in any case; any other integer
    is truthy when non-zero. Unrecognised text returns ``default``.
    """
    value = _read(name)
    if value is None:
        return default

    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    try:
        return int(value) != 0
    except ValueError:
        return default


def _get_env_number(name: str, default: N, cast: Callable[[str], N]) -> N:
    value = _read(name)
    if value is None:
        return default
    try:
        return cast(value)
    except ValueError:
        logger.warning(
            "Invalid %s value for %s: %r. Using default: %s", cast.__name__, name, value, default
        )
        return default


def get_env_float(name: str, default: float) -> float:
    return _get_env_number(name, default, float)


def get_env_int(name: str, default: int) -> int:
    return _get_env_number(name, default, int)
