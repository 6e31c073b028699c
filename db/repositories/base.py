"""Generic repository over one entity table."""
import logging
from typing import Any, Generic, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import ColumnElement, Table, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from db.config import DEFAULT_PAGE_SIZE
from db.database import Database
from db.exceptions import PersistenceError
from db.mappers import EntityMapper, now_ms
from db.models import Relation
from db.queries import (
    Page,
    build_delete_query,
    build_insert_query,
    build_update_query,
    column,
    count,
    execute_delete,
    execute_query,
    execute_update,
    exists,
    get_by_id,
    get_paginated,
    order_clause,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class Repository(Generic[T]):
    """CRUD for one entity table; every write is followed by a snapshot."""

    def __init__(self, db: Database, table: Table, mapper: EntityMapper[T]):
        self.db = db
        self.table = table
        self.mapper = mapper

    def _find(
        self,
        *criteria: ColumnElement,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[T]:
        stmt = select(self.table).order_by(*order_clause(self.table, order_by))
        if criteria:
            stmt = stmt.where(*criteria)
        if limit is not None:
            stmt = stmt.limit(limit)
        return [self.mapper.from_row(row) for row in execute_query(self.db, stmt)]

    def _first(self, *criteria: ColumnElement) -> Optional[T]:
        found = self._find(*criteria, limit=1)
        return found[0] if found else None

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, entity: T) -> T:
        row = self.mapper.to_row(entity)
        self.db.execute(build_insert_query(self.table, row))
        self.db.save()
        created = self.get_by_id(row["id"])
        if created is None:
            raise PersistenceError(f"{self.table.name} row {row['id']} missing after insert")
        logger.debug("Created %s %s", self.table.name, row["id"])
        return created

    def get_by_id(self, id: str) -> Optional[T]:
        row = get_by_id(self.db, self.table, id)
        return self.mapper.from_row(row) if row is not None else None

    def get_all(self, order_by: Optional[str] = None) -> list[T]:
        return self._find(order_by=order_by)

    def update(self, id: str, changes: Union[Mapping[str, Any], BaseModel]) -> Optional[T]:
        """Merge `changes` into the stored entity. Returns None if `id` does not exist."""
        existing = self.get_by_id(id)
        if existing is None:
            return None
        if isinstance(changes, BaseModel):
            changes = changes.model_dump(exclude_unset=True)

        merged = type(existing).model_validate(
            {**existing.model_dump(), **changes, "id": existing.id}
        )
        row = self.mapper.to_row(merged)
        del row["id"]
        del row["created_at"]
        row["updated_at"] = now_ms()

        execute_update(self.db, build_update_query(self.table, id, row))
        self.db.save()
        return self.get_by_id(id)

    def delete(self, id: str) -> bool:
        deleted = execute_delete(self.db, build_delete_query(self.table, id)) > 0
        if deleted:
            self.db.save()
        return deleted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by(self, field: str, value: Any, order_by: Optional[str] = None) -> list[T]:
        return self._find(column(self.table, field) == value, order_by=order_by)

    def count(self, *criteria: ColumnElement) -> int:
        return count(self.db, self.table, *criteria)

    def exists(self, id: str) -> bool:
        return exists(self.db, self.table, id)

    def get_page(
        self,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        order_by: Optional[str] = None,
    ) -> Page:
        result = get_paginated(self.db, self.table, page, page_size, order_by)
        result.data = [self.mapper.from_row(row) for row in result.data]
        return result

    # ------------------------------------------------------------------
    # Junction tables
    # ------------------------------------------------------------------

    def _link(self, relation: Relation, owner_id: str, other_id: Any) -> None:
        stmt = sqlite_insert(relation.table).values(
            {relation.owner_column: owner_id, relation.other_column: other_id}
        )
        self.db.execute(stmt.on_conflict_do_nothing())
        self.db.save()

    def _unlink(self, relation: Relation, owner_id: str, other_id: Any) -> bool:
        table = relation.table
        stmt = table.delete().where(
            table.c[relation.owner_column] == owner_id,
            table.c[relation.other_column] == other_id,
        )
        removed = execute_delete(self.db, stmt) > 0
        if removed:
            self.db.save()
        return removed

    def _linked_ids(self, relation: Relation, owner_id: str) -> list[Any]:
        table = relation.table
        other = table.c[relation.other_column]
        stmt = select(other).where(table.c[relation.owner_column] == owner_id).order_by(other)
        return list(self.db.execute(stmt).scalars())
