"""In-memory SQLite engine wrapper.

Every CRM database lives entirely in memory on a single SQLAlchemy
connection. The whole database can be exported as the native SQLite image
(bytes) and a new engine can be built from such an image.
"""
import logging
import sqlite3
from typing import Any, Mapping, Optional, Union

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.expression import Executable

from db.config import ECHO_SQL
from db.exceptions import DatabaseInitError

logger = logging.getLogger(__name__)

Statement = Union[str, Executable]


class SqliteEngine:
    """One in-memory SQLite database on one connection."""

    def __init__(self, data: Optional[bytes] = None, echo: bool = ECHO_SQL):
        try:
            self._engine = create_engine(
                "sqlite://",
                echo=echo,
                poolclass=StaticPool,
                isolation_level="AUTOCOMMIT",
                connect_args={"check_same_thread": False},
            )
            self._conn = self._engine.connect()
        except SQLAlchemyError as exc:
            logger.exception("Failed to initialize SQLite engine")
            raise DatabaseInitError(f"Failed to initialize SQLite engine: {exc}") from exc

        if data is not None:
            try:
                self._driver_connection().deserialize(data)
                # deserialize() accepts any bytes; reading the catalog fails on a bad image
                self._conn.exec_driver_sql("SELECT count(*) FROM sqlite_master").scalar()
            except Exception:
                self.close()
                raise

    @property
    def connection(self) -> Connection:
        return self._conn

    def _driver_connection(self):
        return self._conn.connection.driver_connection

    def execute(
        self, statement: Statement, params: Optional[Mapping[str, Any]] = None
    ) -> CursorResult:
        """Execute a raw SQL string (named :params) or a SQLAlchemy statement."""
        if isinstance(statement, str):
            statement = text(statement)
        try:
            if params is None:
                return self._conn.execute(statement)
            return self._conn.execute(statement, dict(params))
        except SQLAlchemyError:
            logger.exception("Query failed: %s params=%s", statement, params)
            raise

    def begin(self) -> None:
        self._conn.exec_driver_sql("BEGIN")

    def commit(self) -> None:
        self._conn.exec_driver_sql("COMMIT")

    def rollback(self) -> None:
        self._conn.exec_driver_sql("ROLLBACK")

    def export(self) -> bytes:
        """Return the whole database as a SQLite file image (b"" while it has no pages)."""
        try:
            return bytes(self._driver_connection().serialize())
        except sqlite3.OperationalError:
            if self._conn.exec_driver_sql("PRAGMA page_count").scalar() == 0:
                return b""
            logger.exception("Failed to export database image")
            raise

    def close(self) -> None:
        self._conn.close()
        self._engine.dispose()
