"""
JSON File Storage Implementation

DESIGN DECISION: Each key is stored as its own pretty-printed JSON file
(``<data_dir>/<key>.json``) because:
1. Users can inspect and back up their data with any text editor
2. No database setup required
3. One key can be rewritten without touching the others

TRADEOFFS:
- Whole-list rewrites on every change (fine for personal volumes)
- No multi-writer safety (single local user)

Writes go to a temporary file first and are then moved into place, so a
crash mid-write leaves the previous content intact.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Union

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    StorageUnavailableError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

logger = structlog.get_logger(__name__)


class JsonFileStore(KeyValueStore):
    """Key-value store backed by one JSON file per key."""

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot create data directory {self._data_dir}: {e}"
            )

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> list[dict]:
        path = self._path(key)
        if not path.exists():
            return []

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {path}: {e}")

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"{path} is not valid JSON: {e}")

        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise CorruptDataError(f"{path} does not contain a list of records")

        return data

    def set(self, key: str, records: list[dict]) -> None:
        path = self._path(key)
        try:
            payload = json.dumps(records, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Records for {key!r} are not JSON-serializable: {e}")

        try:
            self._write_atomic(path, payload)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write {path}: {e}")

        logger.debug("store_written", key=key, records=len(records))

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._data_dir, prefix=f".{path.stem}-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def is_available(self) -> bool:
        return self._data_dir.is_dir() and os.access(self._data_dir, os.W_OK)
