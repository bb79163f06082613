"""Common utilities for record storage operations."""

from __future__ import annotations

from pathlib import Path
from typing import List
from urllib.parse import quote


def filter_record_json_files(storage_dir: Path) -> List[Path]:
    """Get all JSON files in storage directory.

    Leftover ``.tmp`` files from interrupted writes are not matched.

    Args:
        storage_dir: Directory containing record JSON files

    Returns:
        Sorted list of Path objects for record files
    """
    if not storage_dir.exists():
        return []

    return sorted(storage_dir.glob("*.json"))


def safe_filename(record_id: str) -> str:
    """Map a record id onto a filesystem-safe file stem.

    Percent-encoding keeps the mapping one-to-one, so distinct ids such as
    ``lamp/1`` and ``lamp_1`` never share a file.
    """
    return quote(record_id, safe="")
