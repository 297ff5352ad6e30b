"""
Key-value storage backends for profile and post records.

Records are JSON objects addressed by a string key. Business logic only
talks to ``KeyValueStore`` so the backing store can be swapped without
touching the services.
"""
import json
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from app.core.errors import StorageError

logger = logging.getLogger(__name__)

KEY_RE = re.compile(r"^[^/\\\x00.][^/\\\x00]*$")


class CorruptRecordError(Exception):
    """Stored bytes for a key exist but are not a JSON object."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"corrupt record {key!r}: {reason}")
        self.key = key
        self.reason = reason


def validate_key(key: str) -> str:
    if not isinstance(key, str) or not KEY_RE.match(key):
        raise ValueError(f"invalid storage key: {key!r}")
    return key


class KeyValueStore(ABC):
    """Interface that all record stores must implement."""

    @abstractmethod
    def get(self, key: str) -> Optional[dict]:
        """Return the record, None if absent; raise CorruptRecordError if unreadable."""

    @abstractmethod
    def put(self, key: str, value: dict) -> None:
        """Create or replace a record."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a record. Returns False if it did not exist."""

    @abstractmethod
    def list(self, prefix: str = "") -> List[str]:
        """Keys starting with ``prefix``, sorted."""


class JsonFileStore(KeyValueStore):
    """One ``<key>.json`` file per record inside ``directory``."""

    SUFFIX = ".json"

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{validate_key(key)}{self.SUFFIX}"

    def get(self, key: str) -> Optional[dict]:
        path = self._path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptRecordError(key, str(e)) from e
        except OSError as e:
            logger.exception(f"Failed to read {path}")
            raise StorageError("Failed to read record") from e

        try:
            value = json.loads(raw)
        except ValueError as e:
            raise CorruptRecordError(key, str(e)) from e
        if not isinstance(value, dict):
            raise CorruptRecordError(key, f"expected object, got {type(value).__name__}")
        return value

    def put(self, key: str, value: dict) -> None:
        path = self._path(key)
        payload = json.dumps(value, ensure_ascii=False)
        tmp_name = None
        try:
            # Write beside the target and rename so readers never see a partial file
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=self.SUFFIX)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            logger.exception(f"Failed to write {path}")
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError("Failed to save record") from e

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.exception(f"Failed to delete {path}")
            raise StorageError("Failed to delete record") from e
        return True

    def list(self, prefix: str = "") -> List[str]:
        try:
            names = os.listdir(self.directory)
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.exception(f"Failed to list {self.directory}")
            raise StorageError("Failed to list records") from e

        keys = []
        for name in names:
            if not name.endswith(self.SUFFIX) or name.startswith("."):
                continue
            key = name[: -len(self.SUFFIX)]
            if key.startswith(prefix):
                keys.append(key)
        return sorted(keys)


class MemoryStore(KeyValueStore):
    """Dict-backed store; values are copied through JSON like the file store."""

    def __init__(self):
        self._records: Dict[str, str] = {}

    def get(self, key: str) -> Optional[dict]:
        raw = self._records.get(validate_key(key))
        if raw is None:
            return None
        return json.loads(raw)

    def put(self, key: str, value: dict) -> None:
        self._records[validate_key(key)] = json.dumps(value)

    def delete(self, key: str) -> bool:
        return self._records.pop(validate_key(key), None) is not None

    def list(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._records if k.startswith(prefix))
