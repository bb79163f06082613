"""Timestamp helpers.

Device records and executions carry epoch-millisecond timestamps so that the
JSON stays compatible with the existing mobile clients; storage envelopes use
ISO 8601 strings for readability.
"""

import time
from datetime import datetime


def now_ms() -> int:
    """Return the current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)


def now_iso() -> str:
    """Get current timestamp in the local timezone.

    Returns:
        ISO 8601 timestamp string with timezone offset
        (e.g., "2025-10-12T14:30:00-07:00")
    """
    return datetime.now().astimezone().replace(microsecond=0).isoformat()
