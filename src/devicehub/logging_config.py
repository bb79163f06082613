"""Logging setup shared by devicehub and uvicorn.

One ``dictConfig`` drives both the application loggers and uvicorn's, so
every line carries a timestamp and the same layout::

    2024-05-01 12:00:00 INFO  [devicehub.registry] Added device ...

Environment:
    DEVICEHUB_LOG_LEVEL: root / application level (default INFO)
    DEVICEHUB_VERBOSE_LOGGING: also show uvicorn access lines below WARNING

Typical use::

    configure_logging()
    uvicorn.run(app, log_config=get_uvicorn_log_config())
"""

import logging
import logging.config
from typing import Any, Dict, List

from .utils.env import get_env_bool, get_env_str

LOG_LEVEL_ENV = "DEVICEHUB_LOG_LEVEL"
VERBOSE_LOGGING_ENV = "DEVICEHUB_VERBOSE_LOGGING"

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> str:
    """Configured log level name, upper-cased."""
    return (get_env_str(LOG_LEVEL_ENV) or "INFO").upper()


def _stream_handler(formatter: str, stream: str) -> Dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": formatter,
        "stream": f"ext://sys.{stream}",
    }


def _logger(level: str, handlers: List[str]) -> Dict[str, Any]:
    return {"handlers": handlers, "level": level, "propagate": False}


def get_logging_config() -> Dict[str, Any]:
    """Build the ``dictConfig`` mapping.

    Dashboards poll status endpoints often, so uvicorn access lines stay at
    WARNING unless verbose logging is on. httpx request lines are always
    kept at WARNING.
    """
    level = get_log_level()
    access_level = level if get_env_bool(VERBOSE_LOGGING_ENV, False) else "WARNING"
    formatter = {"format": LOG_FORMAT, "datefmt": DATE_FORMAT}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": dict(formatter), "access": dict(formatter)},
        "handlers": {
            "default": _stream_handler("default", "stderr"),
            "access": _stream_handler("access", "stdout"),
        },
        "loggers": {
            "devicehub": _logger(level, ["default"]),
            "uvicorn": _logger(level, ["default"]),
            "uvicorn.error": _logger(level, ["default"]),
            "uvicorn.access": _logger(access_level, ["access"]),
            "httpx": _logger("WARNING", ["default"]),
        },
        "root": {"level": level, "handlers": ["default"]},
    }


def configure_logging() -> None:
    """Apply the logging config. Call once at startup, before serving."""
    logging.config.dictConfig(get_logging_config())
    logging.getLogger(__name__).debug("Logging configured at level %s", get_log_level())


def get_uvicorn_log_config() -> Dict[str, Any]:
    """Config to hand to ``uvicorn.run(log_config=...)``."""
    return get_logging_config()
