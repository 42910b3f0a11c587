"""
Key-Value Store - Plain JSON persistence for non-secret app data.

One flat JSON object per file. Writes go to a temp file which then
replaces the original, and the file is restricted to the owner.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)

# Secure file permissions (Unix only)
SECURE_FILE_MODE = 0o600  # Owner read/write only


def set_secure_permissions(filepath: Path) -> None:
    """
    Set restrictive file permissions on Unix systems.

    No-op on Windows (NTFS uses ACLs, not Unix permissions).
    """
    if os.name == 'posix':
        try:
            os.chmod(filepath, SECURE_FILE_MODE)
        except OSError:
            # Best effort - don't fail save operation if chmod fails
            pass


class KeyValueStoreError(Exception):
    """The key-value file could not be read or written."""


class JsonKeyValueStore:
    """String keys mapped to JSON values, persisted to a single file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load the store from disk. A corrupt file is treated as empty."""
        if not self.path.exists():
            return
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt key-value file {self.path.name}: {e}")
            return
        except OSError as e:
            raise KeyValueStoreError(f"Cannot read {self.path}") from e

        if isinstance(data, dict):
            self._data = data
        else:
            logger.warning(f"Ignoring key-value file {self.path.name}: expected an object")

    def _save(self, data: dict[str, Any]) -> None:
        """Write data to disk, then adopt it as the in-memory state."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_suffix('.tmp')
            with open(temp_path, 'w') as f:
                json.dump(data, f, indent=2)
            temp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            raise KeyValueStoreError(f"Cannot write {self.path}") from e
        set_secure_permissions(self.path)
        self._data = data

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = dict(self._data)
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        self.remove_many([key])

    def remove_many(self, keys: Iterable[str]) -> None:
        """Remove several keys in one write."""
        doomed = set(keys)
        data = {k: v for k, v in self._data.items() if k not in doomed}
        if len(data) != len(self._data):
            self._save(data)

    def remove_all(self) -> None:
        self._save({})

    def keys(self) -> list[str]:
        return list(self._data.keys())

    def __contains__(self, key: str) -> bool:
        return key in self._data
