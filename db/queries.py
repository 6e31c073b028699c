"""Query helpers shared by the repositories.

Table and column identifiers are only ever taken from the SQLAlchemy
metadata in db.models; strings supplied by callers are validated against it
and raise InvalidIdentifierError otherwise. Values are always bound
parameters.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from sqlalchemy import (
    Column,
    ColumnElement,
    Delete,
    Insert,
    Table,
    Update,
    delete,
    func,
    insert,
    select,
    update,
)

from db.config import DEFAULT_PAGE_SIZE
from db.database import Database
from db.engine import Statement
from db.exceptions import InvalidIdentifierError
from db.models import resolve_table

logger = logging.getLogger(__name__)

Row = dict[str, Any]
TableRef = Union[Table, str]
StatementWithParams = Union[Statement, tuple[Statement, Mapping[str, Any]]]


def _table(table: TableRef) -> Table:
    return resolve_table(table) if isinstance(table, str) else table


def column(table: TableRef, name: str) -> Column:
    """Return `table`'s column called `name`, or raise InvalidIdentifierError."""
    table = _table(table)
    try:
        return table.c[name]
    except KeyError:
        raise InvalidIdentifierError(f"Unknown column {name!r} on {table.name}") from None


def order_clause(table: TableRef, order_by: Optional[str]) -> list[ColumnElement]:
    """Parse "col [ASC|DESC], ..." into validated ORDER BY expressions."""
    if not order_by:
        return []
    clauses = []
    for part in order_by.split(","):
        tokens = part.split()
        if not tokens or len(tokens) > 2:
            raise InvalidIdentifierError(f"Invalid ORDER BY term: {part.strip()!r}")
        col = column(table, tokens[0])
        direction = tokens[1].upper() if len(tokens) == 2 else "ASC"
        if direction == "ASC":
            clauses.append(col.asc())
        elif direction == "DESC":
            clauses.append(col.desc())
        else:
            raise InvalidIdentifierError(f"Invalid sort direction: {tokens[1]!r}")
    return clauses


# ---------------------------------------------------------------------------
# Raw execution
# ---------------------------------------------------------------------------


def execute_query(
    db: Database, statement: Statement, params: Optional[Mapping[str, Any]] = None
) -> list[Row]:
    """Run a SELECT and return every row as a dict."""
    result = db.execute(statement, params)
    return [dict(row) for row in result.mappings()]


def execute_insert(
    db: Database, statement: Statement, params: Optional[Mapping[str, Any]] = None
) -> Optional[int]:
    """Run an INSERT and return the last inserted rowid."""
    return db.execute(statement, params).lastrowid


def execute_update(
    db: Database, statement: Statement, params: Optional[Mapping[str, Any]] = None
) -> int:
    """Run an UPDATE and return the number of affected rows."""
    return db.execute(statement, params).rowcount


def execute_delete(
    db: Database, statement: Statement, params: Optional[Mapping[str, Any]] = None
) -> int:
    """Run a DELETE and return the number of affected rows."""
    return db.execute(statement, params).rowcount


def execute_transaction(db: Database, statements: Iterable[StatementWithParams]) -> None:
    """Run `statements` inside BEGIN/COMMIT, rolling back on the first error.

    Each item is a statement or a (statement, params) pair. The database is
    snapshotted once after a successful commit.
    """
    engine = db.engine
    engine.begin()
    try:
        for item in statements:
            if isinstance(item, tuple):
                db.execute(*item)
            else:
                db.execute(item)
    except Exception:
        engine.rollback()
        logger.warning("Transaction rolled back")
        raise
    engine.commit()
    db.save()


# ---------------------------------------------------------------------------
# Table helpers
# ---------------------------------------------------------------------------


def get_all(db: Database, table: TableRef, order_by: Optional[str] = None) -> list[Row]:
    table = _table(table)
    stmt = select(table).order_by(*order_clause(table, order_by))
    return execute_query(db, stmt)


def get_by_id(db: Database, table: TableRef, id: Any) -> Optional[Row]:
    table = _table(table)
    row = db.execute(select(table).where(table.c.id == id)).mappings().first()
    return dict(row) if row is not None else None


def exists(db: Database, table: TableRef, id: Any) -> bool:
    table = _table(table)
    return db.execute(select(table.c.id).where(table.c.id == id).limit(1)).first() is not None


def count(db: Database, table: TableRef, *criteria: ColumnElement) -> int:
    table = _table(table)
    stmt = select(func.count()).select_from(table)
    if criteria:
        stmt = stmt.where(*criteria)
    return db.execute(stmt).scalar_one()


def _validated(table: Table, data: Mapping[str, Any]) -> dict[str, Any]:
    for name in data:
        column(table, name)
    return dict(data)


def build_insert_query(table: TableRef, data: Mapping[str, Any]) -> Insert:
    table = _table(table)
    return insert(table).values(_validated(table, data))


def build_update_query(table: TableRef, id: Any, data: Mapping[str, Any]) -> Update:
    table = _table(table)
    values = _validated(table, data)
    if not values:
        raise ValueError(f"No columns to update on {table.name}")
    return update(table).where(table.c.id == id).values(values)


def build_delete_query(table: TableRef, id: Any) -> Delete:
    table = _table(table)
    return delete(table).where(table.c.id == id)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


@dataclass
class Page:
    data: list[Any]
    total: int
    page: int
    page_size: int
    total_pages: int


def get_paginated(
    db: Database,
    table: TableRef,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    order_by: Optional[str] = None,
    criteria: Sequence[ColumnElement] = (),
) -> Page:
    """Return one page of rows plus the totals needed to render a pager."""
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be >= 1")
    table = _table(table)
    total = count(db, table, *criteria)
    stmt = (
        select(table)
        .order_by(*order_clause(table, order_by))
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    if criteria:
        stmt = stmt.where(*criteria)
    return Page(
        data=execute_query(db, stmt),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )
