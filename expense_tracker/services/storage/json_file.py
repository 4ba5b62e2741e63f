"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on disk is used as the local backend:
1. Same string key-value shape as the browser's local storage
2. No database setup required
3. Human-readable, easy to back up or inspect

TRADEOFFS:
- Every write rewrites the whole file (fine for personal data volumes)
- No locking (single user, single process)

Writes go to a temporary file that replaces the original, so a crash
mid-write leaves the previous contents intact.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.exceptions import PersistenceError
from expense_tracker.services.storage.interface import KeyValueStoreInterface


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as one JSON object.

    Values are always strings; the file maps key -> string.
    """

    def __init__(
        self,
        path: Union[str, Path],
        max_bytes: Optional[int] = None,
        write_attempts: int = 3,
    ):
        super().__init__(max_bytes=max_bytes)
        self._path = Path(path)
        self._write_attempts = write_attempts

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        """Load the whole file. A missing file is an empty store."""
        try:
            if not self._path.exists():
                return {}
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read {self._path}: {e}")

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise PersistenceError(f"Storage file {self._path} is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise PersistenceError(f"Storage file {self._path} does not hold a JSON object")

        return {str(key): value if isinstance(value, str) else json.dumps(value)
                for key, value in data.items()}

    def _write_file(self, payload: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _write_all(self, items: dict[str, str]) -> None:
        """Write the whole store, retrying transient OS errors."""
        self._check_capacity(items)
        payload = json.dumps(items, ensure_ascii=False, indent=2)
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._write_attempts),
                wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    self._write_file(payload)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self._path}: {e}")

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)
