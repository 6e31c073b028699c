"""Durable string key-value stores that hold database snapshots."""
import errno
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Union

from db.config import STORAGE_DIR, STORAGE_QUOTA_BYTES
from db.exceptions import StorageQuotaExceededError

logger = logging.getLogger(__name__)

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local store, mainly for tests and throwaway sessions."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(len(k) + len(v) for k, v in self._items.items() if k != key)
            if used + len(key) + len(value) > self.quota_bytes:
                raise StorageQuotaExceededError()
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileKeyValueStore:
    """One UTF-8 file per key inside a directory.

    Writes go to a temporary file that is renamed over the target, so a
    crash mid-write leaves the previous value intact.
    """

    def __init__(
        self,
        directory: Union[str, Path] = STORAGE_DIR,
        quota_bytes: Optional[int] = STORAGE_QUOTA_BYTES,
    ):
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / key

    def _used_bytes(self, exclude: str) -> int:
        total = 0
        for path in self.directory.iterdir():
            if path.is_file() and not path.name.startswith(".") and path.name != exclude:
                total += len(path.name) + path.stat().st_size
        return total

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        encoded = value.encode("utf-8")
        if self.quota_bytes is not None:
            if self._used_bytes(key) + len(key) + len(encoded) > self.quota_bytes:
                raise StorageQuotaExceededError()

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            os.replace(tmp_name, path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            if exc.errno in _QUOTA_ERRNOS:
                raise StorageQuotaExceededError() from exc
            logger.exception("Failed to write storage key %s", key)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
