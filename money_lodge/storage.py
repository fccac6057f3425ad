"""Persistence for the collection of month records.

All months live in one JSON document::

    {"version": 1, "months": {"2025-9": {...}, "2025-10": {...}}}

The repository only knows how to read and write that document as a
whole.  Reading never fails: a missing file is an empty collection, and a
corrupted or unrecognised one is reported with a :class:`RuntimeWarning`
and also treated as empty.  A bare ``{key: record}`` mapping without the
version envelope is the legacy format and is accepted as-is; the next
save rewrites it with the envelope.
"""

from __future__ import annotations

import json
import warnings
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .config import STORE_PATH, STORE_SCHEMA_VERSION
from .models import MonthRecord, parse_month_key

RecordLike = Union[MonthRecord, Mapping[str, Any]]


class StorageWarning(RuntimeWarning):
    """Stored month data could not be read and was ignored."""


class MonthlyDataRepository:
    """Reads and writes every month record as one JSON blob."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize the repository.

        Args:
            path: Optional custom file location.  Defaults to STORE_PATH
                from config.
        """
        self.path = Path(path) if path is not None else STORE_PATH

    def load(self) -> Dict[str, MonthRecord]:
        """Load all month records from disk.

        Returns:
            Dictionary mapping month keys (``"<year>-<month>"``) to records.
            Empty when the file is missing or unreadable.
        """
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            _warn(f"Could not read month data from {self.path}: {exc}")
            return {}

        months = self._unwrap(data)
        if months is None:
            return {}

        records: Dict[str, MonthRecord] = {}
        for key, value in months.items():
            try:
                parse_month_key(key)
            except ValueError:
                _warn(f"Skipping month with invalid key {key!r}")
                continue
            if not isinstance(value, dict):
                _warn(f"Skipping malformed month {key!r}")
                continue
            try:
                records[key] = MonthRecord.from_dict(value)
            except (TypeError, ValueError) as exc:
                _warn(f"Skipping malformed month {key!r}: {exc}")
        return records

    def save(self, records: Mapping[str, RecordLike]) -> None:
        """Write the full collection to disk, replacing what was there.

        The document is serialised before the file is opened, so a value
        that cannot be written leaves the previous contents in place.

        Args:
            records: Month key to record (or record-shaped dict).

        Raises:
            ValueError: If a key is not a valid month key
            TypeError: If a value cannot be written as JSON
            OSError: If the file cannot be written
        """
        months: Dict[str, Any] = {}
        for key, record in records.items():
            parse_month_key(key)
            if not isinstance(record, MonthRecord):
                record = MonthRecord.from_dict(record)
            months[key] = record.to_dict()

        payload = {'version': STORE_SCHEMA_VERSION, 'months': months}
        text = json.dumps(payload, indent=2, sort_keys=True, default=_json_default)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.path.open('w', encoding='utf-8') as handle:
                handle.write(text)
        except OSError as e:
            raise OSError(f"Failed to save month data to {self.path}: {e}") from e

    def _unwrap(self, data: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(data, dict):
            _warn(f"Ignoring month data in {self.path}: expected a JSON object")
            return None
        if 'version' not in data:
            return data
        version = data.get('version')
        if version != STORE_SCHEMA_VERSION:
            _warn(f"Ignoring month data in {self.path}: unsupported version {version!r}")
            return None
        months = data.get('months')
        if not isinstance(months, dict):
            _warn(f"Ignoring month data in {self.path}: 'months' is not an object")
            return None
        return months


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _warn(message: str) -> None:
    warnings.warn(message, StorageWarning, stacklevel=3)
