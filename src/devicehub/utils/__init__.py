"""Utility package for general-purpose helpers.

Provides environment configuration and time utilities.
"""

from .env import get_config_dir, get_env_bool, get_env_float, get_env_int, get_env_str
from .time import now_iso, now_ms

__all__ = [
    # Environment utilities
    "get_config_dir",
    "get_env_bool",
    "get_env_float",
    "get_env_int",
    "get_env_str",
    # Time utilities
    "now_iso",
    "now_ms",
]
