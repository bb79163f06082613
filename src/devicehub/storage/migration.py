"""Import devices from the legacy single-blob format.

Older installs kept every device in one JSON array. This module reads that
array, validates each entry as a Device and writes it into per-device files.
The blob is backed up next to itself before anything is written.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from pydantic import ValidationError

from .device import DeviceStorage

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".pre_migration.bak"


def import_legacy_blob(blob_path: Path, storage: DeviceStorage) -> int:
    """Import devices from ``blob_path`` into ``storage``.

    Devices already present in storage are left untouched. Entries that fail
    validation are logged and skipped.

    Args:
        blob_path: Path of the legacy JSON array file
        storage: Destination device storage

    Returns:
        Number of devices imported
    """
    if not blob_path.exists():
        logger.info(f"No legacy device blob at {blob_path}")
        return 0

    try:
        entries = json.loads(blob_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.error(f"Failed to read legacy device blob {blob_path}: {exc}")
        return 0

    if not isinstance(entries, list):
        logger.error(f"Legacy device blob {blob_path} is not a JSON array")
        return 0

    backup_path = blob_path.with_name(blob_path.name + BACKUP_SUFFIX)
    if not backup_path.exists():
        logger.info(f"Backing up {blob_path.name} to {backup_path.name}")
        shutil.copy2(blob_path, backup_path)

    imported = 0
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning(f"  Skipping entry {index}: not an object")
            continue

        device_id = entry.get("id")
        if device_id and storage.get_device(device_id) is not None:
            logger.info(f"  Device {device_id} already stored, skipping")
            continue

        try:
            storage.upsert_device(entry)
        except (ValidationError, ValueError) as exc:
            logger.warning(f"  Skipping entry {index} ({device_id}): {exc}")
            continue

        imported += 1
        logger.info(f"  Imported device {device_id}")

    logger.info(f"Legacy import complete: {imported} of {len(entries)} devices imported")
    return imported


__all__ = ["BACKUP_SUFFIX", "import_legacy_blob"]
