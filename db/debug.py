"""Diagnostics for inspecting a live CRM database."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from sqlalchemy import select, text

from db.config import DEFAULT_EXPORT_FILENAME
from db.database import Database
from db.models import ENTITY_TABLES, JUNCTION_TABLES, LOOKUP_TABLES, resolve_table
from db.queries import Row, count, execute_query
from db.schema import get_schema_version

logger = logging.getLogger(__name__)

_COUNTED_TABLES = (*ENTITY_TABLES, *LOOKUP_TABLES, *JUNCTION_TABLES)


@dataclass
class DatabaseStats:
    size_bytes: int
    schema_version: int
    table_counts: dict[str, int] = field(default_factory=dict)


def get_database_stats(db: Database) -> DatabaseStats:
    return DatabaseStats(
        size_bytes=len(db.export()),
        schema_version=get_schema_version(db.engine),
        table_counts={table.name: count(db, table) for table in _COUNTED_TABLES},
    )


def get_table_schemas(db: Database) -> dict[str, str]:
    """Table name -> CREATE TABLE statement, as stored by SQLite."""
    rows = db.execute(text(
        "SELECT name, sql FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    ))
    return {name: sql for name, sql in rows}


def get_indexes(db: Database) -> list[Row]:
    """Explicit indexes (autoindexes for primary keys are skipped)."""
    return execute_query(db, text(
        "SELECT name, tbl_name AS table_name, sql FROM sqlite_master "
        "WHERE type = 'index' AND sql IS NOT NULL ORDER BY tbl_name, name"
    ))


def validate_foreign_keys(db: Database) -> list[Row]:
    """Rows that reference a missing parent. An empty list means consistent."""
    violations = execute_query(db, text("PRAGMA foreign_key_check"))
    if violations:
        logger.warning("Found %d foreign key violation(s)", len(violations))
    return violations


def explain_query(
    db: Database, sql: str, params: Optional[Mapping[str, Any]] = None
) -> list[str]:
    """Return the detail lines of SQLite's query plan for `sql`."""
    rows = execute_query(db, text(f"EXPLAIN QUERY PLAN {sql}"), params)
    return [row["detail"] for row in rows]


def sample_table(db: Database, table_name: str, limit: int = 5) -> list[Row]:
    table = resolve_table(table_name)
    return execute_query(db, select(table).limit(limit))


def vacuum_database(db: Database) -> None:
    before = len(db.export())
    db.execute(text("VACUUM"))
    db.save()
    logger.info("VACUUM: %d -> %d bytes", before, len(db.export()))


def download_database(
    db: Database,
    directory: Union[str, Path] = ".",
    filename: str = DEFAULT_EXPORT_FILENAME,
) -> Path:
    """Write the database image to `directory/filename` and return the path."""
    path = Path(directory) / filename
    path.write_bytes(db.export())
    logger.info("Database written to %s", path)
    return path


def create_debug_report(db: Database) -> str:
    stats = get_database_stats(db)
    lines = [
        "CRM database report",
        f"Schema version: {stats.schema_version}",
        f"Size: {stats.size_bytes / 1024:.1f} KiB",
        "",
        "Row counts:",
    ]
    lines += [f"  {name}: {n}" for name, n in stats.table_counts.items()]

    lines += ["", "Indexes:"]
    lines += [f"  {ix['name']} ON {ix['table_name']}" for ix in get_indexes(db)]

    violations = validate_foreign_keys(db)
    lines += ["", f"Foreign key violations: {len(violations)}"]
    lines += [
        f"  {v['table']} rowid={v['rowid']} -> {v['parent']}" for v in violations
    ]
    return "\n".join(lines)
