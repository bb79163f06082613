"""Generic base class for record storage with common file I/O operations.

This module provides a base class for managing records stored as individual
JSON files, one file per record id. Every write goes to a temporary file that
is then renamed over the target, so a crash mid-write never leaves a
truncated record behind.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..utils.time import now_iso as _now_iso
from .utils import filter_record_json_files, safe_filename

logger = logging.getLogger(__name__)


# Bounded by BaseModel to ensure model_dump() is available
TRecord = TypeVar("TRecord", bound=BaseModel)


class BaseRecordStorage(ABC, Generic[TRecord]):
    """Abstract base class for keyed record storage.

    Each file holds an envelope::

        {"record_type": ..., "record_id": ..., "last_updated": ..., "data": {...}}

    Subclasses implement ``record_type`` and ``_validate_record``.
    """

    def __init__(self, storage_dir: Path | str):
        """Initialize storage rooted at ``storage_dir``.

        Args:
            storage_dir: Directory containing individual record files
        """
        self._storage_dir = Path(storage_dir)
        self._storage_dir.mkdir(parents=True, exist_ok=True)

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    @property
    @abstractmethod
    def record_type(self) -> str:
        """Return the record type string (e.g., 'device')."""

    @abstractmethod
    def _validate_record(self, record: TRecord | dict) -> TRecord:
        """Validate or coerce an input into the record model.

        Raises:
            ValueError: If validation fails
        """

    def _record_file_path(self, record_id: str) -> Path:
        return self._storage_dir / f"{safe_filename(record_id)}.json"

    def _read_record_file(self, record_file: Path) -> TRecord | None:
        """Read a single record from its JSON file.

        Returns:
            Record model instance, or None for empty files and foreign record types

        Raises:
            ValueError: If the file cannot be parsed or validated
        """
        try:
            raw = record_file.read_text(encoding="utf-8").strip()
            if not raw:
                return None

            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("record file is not a JSON object")

            if data.get("record_type") != self.record_type:
                logger.warning(
                    f"Record file {record_file} has wrong type: "
                    f"expected {self.record_type}, got {data.get('record_type')}"
                )
                return None

            payload = data.get("data")
            if payload is None:
                return None

            return self._validate_record(payload)
        except (json.JSONDecodeError, ValueError) as exc:
            raise ValueError(f"Could not parse record file {record_file}: {exc}") from exc

    def _write_record_file(self, record_file: Path, record_id: str, record: TRecord) -> None:
        """Write a record to its JSON file atomically."""
        record_file.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, Any] = {
            "record_type": self.record_type,
            "record_id": record_id,
            "last_updated": _now_iso(),
            "data": record.model_dump(mode="json"),
        }

        tmp_file = record_file.with_suffix(".tmp")
        tmp_file.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_file.replace(record_file)

    def list_records(self) -> list[TRecord]:
        """Return all persisted records, skipping files that cannot be parsed."""
        records = []
        for record_file in filter_record_json_files(self._storage_dir):
            try:
                record = self._read_record_file(record_file)
            except (ValueError, OSError) as exc:
                logger.warning(f"Could not load record from {record_file}: {exc}")
                continue
            if record is not None:
                records.append(record)
        return records

    def get_record(self, record_id: str) -> TRecord | None:
        """Return a record by id or None if not found."""
        record_file = self._record_file_path(record_id)
        if not record_file.exists():
            return None
        return self._read_record_file(record_file)

    def upsert_record(self, record: TRecord | dict) -> TRecord:
        """Insert or update a record and persist it to its own file.

        Returns:
            Validated record model instance
        """
        model = self._validate_record(record)
        record_id = getattr(model, "id")
        self._write_record_file(self._record_file_path(record_id), record_id, model)
        return model

    def delete_record(self, record_id: str) -> bool:
        """Delete a record by id.

        Returns:
            True if the record was deleted, False if it didn't exist
        """
        record_file = self._record_file_path(record_id)
        if not record_file.exists():
            return False
        record_file.unlink()
        return True


__all__ = ["BaseRecordStorage"]
