"""Structural schema for the CRM database.

apply_schema() is idempotent: every table and index is created with
IF NOT EXISTS and the schema_version row is replaced by the current SCHEMA_VERSION.
"""
import logging
import time

from sqlalchemy import delete, func, insert, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateIndex, CreateTable

from db.engine import SqliteEngine
from db.models import ENTITY_TABLES, JUNCTION_TABLES, LOOKUP_TABLES, SchemaVersion

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_SCHEMA_TABLES = (SchemaVersion.__table__, *LOOKUP_TABLES, *ENTITY_TABLES, *JUNCTION_TABLES)


def apply_schema(engine: SqliteEngine) -> None:
    """Create every table and index, then record SCHEMA_VERSION."""
    try:
        for table in _SCHEMA_TABLES:
            engine.execute(CreateTable(table, if_not_exists=True))
        for table in _SCHEMA_TABLES:
            for index in sorted(table.indexes, key=lambda i: i.name):
                engine.execute(CreateIndex(index, if_not_exists=True))

        # schema_version holds a single row: the version this build last applied
        engine.execute(delete(SchemaVersion))
        engine.execute(
            insert(SchemaVersion).values(
                version=SCHEMA_VERSION, applied_at=int(time.time() * 1000)
            )
        )
    except SQLAlchemyError:
        logger.exception("Failed to apply schema v%d", SCHEMA_VERSION)
        raise
    logger.info("Schema v%d applied", SCHEMA_VERSION)


def get_schema_version(engine: SqliteEngine) -> int:
    """Highest recorded schema version, or 0 when the version table is missing."""
    if not inspect(engine.connection).has_table(SchemaVersion.__tablename__):
        return 0
    version = engine.execute(select(func.max(SchemaVersion.version))).scalar()
    return version or 0
