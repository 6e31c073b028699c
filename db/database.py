"""The Database handle passed to every repository and migration."""
import logging
from typing import Any, Mapping, Optional

from sqlalchemy.engine import CursorResult

from db.engine import SqliteEngine, Statement
from db.snapshot import SnapshotStore, open_snapshot

logger = logging.getLogger(__name__)


class Database:
    """An open in-memory engine plus the snapshot store it persists to."""

    def __init__(self, engine: SqliteEngine, snapshots: SnapshotStore):
        self._engine = engine
        self.snapshots = snapshots

    @property
    def engine(self) -> SqliteEngine:
        return self._engine

    def execute(
        self, statement: Statement, params: Optional[Mapping[str, Any]] = None
    ) -> CursorResult:
        return self._engine.execute(statement, params)

    def save(self) -> None:
        """Snapshot the whole database to durable storage."""
        self.snapshots.save(self._engine)

    def export(self) -> bytes:
        return self._engine.export()

    def import_snapshot(self, data: bytes) -> None:
        """Replace the active database with `data` and persist it.

        Raises SchemaVersionError if the image was written by a newer schema;
        the current database is left untouched in that case.
        """
        replacement = open_snapshot(data)
        previous, self._engine = self._engine, replacement
        previous.close()
        logger.info("Imported database snapshot (%d bytes)", len(data))
        self.save()

    def close(self) -> None:
        self._engine.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
