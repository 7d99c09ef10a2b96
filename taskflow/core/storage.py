"""
FILE: taskflow/core/storage.py
PURPOSE: Persistence backends holding the raw task collection in one named slot
EXPORTS:
  - StorageBackend (Protocol)
  - JsonFileBackend: slot stored as <data_dir>/<key>.json
  - MemoryBackend: in-process slot for tests and embedding
DEPENDENCIES:
  - json, os, tempfile, copy (stdlib)
  - pathlib (stdlib)
  - taskflow.core.exceptions (PersistenceError, StorageCorruptedError)
NOTES:
  - Backends move raw records (list of dicts); they know nothing about Task
  - read() returns None when the slot has never been written
  - Unparseable data is raised, never replaced with an empty collection
  - File writes go through a temp file + os.replace so a failed write leaves
    the previous collection in place
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol
import copy
import json
import logging
import os
import tempfile

from .constants import DEFAULT_STORAGE_KEY
from .exceptions import PersistenceError, StorageCorruptedError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class StorageBackend(Protocol):
    """Read/write access to the raw persisted collection."""

    def read(self) -> Optional[List[Record]]: ...

    def write(self, records: List[Record]) -> None: ...


class JsonFileBackend:
    """
    JSON file persistence slot.

    The whole collection is one JSON array, rewritten on every save.
    """

    def __init__(self, data_dir, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.data_dir = Path(data_dir).expanduser()
        self.key = key
        self.path = self.data_dir / f"{key}.json"

    def __repr__(self) -> str:
        return f"JsonFileBackend({str(self.path)!r})"

    def read(self) -> Optional[List[Record]]:
        """
        Load the persisted collection.

        Returns:
            List of raw records, or None if the slot has never been written

        Raises:
            PersistenceError: If the file cannot be read
            StorageCorruptedError: If the file is not a JSON array
        """
        if not self.path.exists():
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Could not read task storage: {e}", str(self.path)) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorruptedError(
                f"Task storage is not valid JSON: {e}", str(self.path)
            ) from e

        if not isinstance(data, list):
            raise StorageCorruptedError(
                f"Task storage must hold a list, found {type(data).__name__}", str(self.path)
            )
        return data

    def write(self, records: List[Record]) -> None:
        """
        Replace the persisted collection.

        Raises:
            PersistenceError: If serialization or the file write fails
        """
        try:
            payload = json.dumps(records, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Could not serialize tasks: {e}", str(self.path)) from e

        tmp_path = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.data_dir,
                prefix=f".{self.key}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(f"Could not write task storage: {e}", str(self.path)) from e

        logger.debug("Wrote %d task(s) to %s", len(records), self.path)


class MemoryBackend:
    """
    In-memory persistence slot.

    Records are deep-copied in and out so callers never share state with
    the stored collection. Set ``fail_writes`` to simulate a storage
    rejecting writes (e.g. quota exceeded).
    """

    def __init__(self, records: Optional[List[Record]] = None, fail_writes: bool = False) -> None:
        self._records = copy.deepcopy(records) if records is not None else None
        self.fail_writes = fail_writes
        self.write_count = 0

    def __repr__(self) -> str:
        return "MemoryBackend()"

    def read(self) -> Optional[List[Record]]:
        if self._records is None:
            return None
        return copy.deepcopy(self._records)

    def write(self, records: List[Record]) -> None:
        if self.fail_writes:
            raise PersistenceError("Storage quota exceeded", "memory")
        self._records = copy.deepcopy(records)
        self.write_count += 1
