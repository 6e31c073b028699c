"""Whole-database snapshots in a durable key-value store.

The SQLite image is base64-encoded and stored under DB_STORAGE_KEY with the
schema version alongside it under DB_VERSION_KEY.
"""
import base64
import binascii
import logging
import sqlite3
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from db.config import DB_STORAGE_KEY, DB_VERSION_KEY
from db.engine import SqliteEngine
from db.exceptions import SchemaVersionError, StorageQuotaExceededError
from db.schema import SCHEMA_VERSION, get_schema_version
from db.storage import KeyValueStore

logger = logging.getLogger(__name__)


class SnapshotStore:
    def __init__(
        self,
        store: KeyValueStore,
        data_key: str = DB_STORAGE_KEY,
        version_key: str = DB_VERSION_KEY,
    ):
        self.store = store
        self.data_key = data_key
        self.version_key = version_key

    def save(self, engine: SqliteEngine) -> None:
        """Write the current database image. The engine is never modified."""
        encoded = base64.b64encode(engine.export()).decode("ascii")
        previous_version = self.store.get_item(self.version_key)
        try:
            self.store.set_item(self.version_key, str(SCHEMA_VERSION))
            try:
                self.store.set_item(self.data_key, encoded)
            except Exception:
                # the old image is still stored; put its version back
                self._restore_version(previous_version)
                raise
        except StorageQuotaExceededError:
            logger.error("Snapshot of %d bytes exceeds the storage quota", len(encoded))
            raise
        except Exception:
            logger.exception("Failed to save database snapshot")
            raise
        logger.debug("Saved database snapshot (%d bytes)", len(encoded))

    def _restore_version(self, value: Optional[str]) -> None:
        if value is None:
            self.store.remove_item(self.version_key)
        else:
            self.store.set_item(self.version_key, value)

    def stored_version(self) -> Optional[int]:
        raw = self.store.get_item(self.version_key)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring malformed stored schema version %r", raw)
            return None

    def load(self) -> Optional[SqliteEngine]:
        """Open the stored snapshot, or None when there is nothing usable."""
        encoded = self.store.get_item(self.data_key)
        if not encoded:
            return None

        try:
            data = base64.b64decode(encoded, validate=True)
            engine = SqliteEngine(data)
        except (binascii.Error, ValueError, sqlite3.Error, SQLAlchemyError) as exc:
            logger.warning("Discarding unreadable database snapshot: %s", exc)
            return None

        version = self.stored_version()
        if version is not None and version < SCHEMA_VERSION:
            logger.warning(
                "Stored database schema v%d is older than v%d", version, SCHEMA_VERSION
            )
        return engine

    def clear(self) -> None:
        self.store.remove_item(self.data_key)
        self.store.remove_item(self.version_key)


def open_snapshot(data: bytes) -> SqliteEngine:
    """Open an external database image, rejecting one from a newer schema."""
    engine = SqliteEngine(data)
    version = get_schema_version(engine)
    if version > SCHEMA_VERSION:
        engine.close()
        raise SchemaVersionError(version, SCHEMA_VERSION)
    return engine
