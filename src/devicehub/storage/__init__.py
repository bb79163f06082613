"""File-backed persistence for devices.

Each device lives in its own JSON file under the devices directory; writes
are atomic per file.
"""

from .base import BaseRecordStorage
from .device import DeviceStorage
from .migration import import_legacy_blob
from .utils import filter_record_json_files, safe_filename

__all__ = [
    "BaseRecordStorage",
    "DeviceStorage",
    "filter_record_json_files",
    "import_legacy_blob",
    "safe_filename",
]
