"""Conversion between domain models and table rows.

Row conventions:
  - datetimes are INTEGER milliseconds since the Unix epoch (UTC)
  - structured fields (social links, badge) are JSON text
  - empty strings and empty collections in nullable columns are stored as
    NULL, so they read back as None
  - relationship id lists are never part of the row

A JSON field that cannot be parsed back is logged and read as None; it
never raises.
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter
from sqlalchemy import Table

from db import models
from schemas import Badge, Company, Contact, Deal, Note, Task
from schemas.entity import to_utc_ms, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
Row = dict[str, Any]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def to_epoch_ms(value: Optional[datetime]) -> Optional[int]:
    if value is None:
        return None
    return (to_utc_ms(value) - EPOCH) // _ONE_MS


def from_epoch_ms(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return EPOCH + timedelta(milliseconds=value)


def now_ms() -> int:
    return to_epoch_ms(utcnow())


def _dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if not value:
        return None
    return json.dumps(value)


def _load_json(raw: Optional[str], adapter: TypeAdapter, entity: str, field: str) -> Any:
    if raw is None:
        return None
    try:
        return adapter.validate_python(json.loads(raw))
    except ValueError as exc:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        logger.warning("Dropping unreadable %s.%s: %s", entity, field, exc)
        return None


# ---------------------------------------------------------------------------
# Generic row builders
# ---------------------------------------------------------------------------


def _to_row(
    entity: BaseModel,
    table: Table,
    timestamps: frozenset[str],
    json_fields: Mapping[str, TypeAdapter],
) -> Row:
    row: Row = {}
    for col in table.columns:
        value = getattr(entity, col.name)
        if col.name in timestamps:
            value = to_epoch_ms(value)
        elif col.name in json_fields:
            value = _dump_json(value)
        elif isinstance(value, str) and col.nullable:
            value = value or None
        row[col.name] = value
    return row


def _from_row(
    model: type[T],
    row: Mapping[str, Any],
    timestamps: frozenset[str],
    json_fields: Mapping[str, TypeAdapter],
) -> T:
    data = dict(row)
    for name in timestamps:
        data[name] = from_epoch_ms(data.get(name))
    for name, adapter in json_fields.items():
        data[name] = _load_json(data.get(name), adapter, model.__name__, name)
    return model.model_validate(data)


@dataclass(frozen=True)
class EntityMapper(Generic[T]):
    """The to_row/from_row pair a Repository is built with."""

    to_row: Callable[[T], Row]
    from_row: Callable[[Mapping[str, Any]], T]


_BASE_TIMESTAMPS = frozenset({"created_at", "updated_at"})
_TASK_TIMESTAMPS = _BASE_TIMESTAMPS | {"due_at", "completed_at"}


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------

_CONTACT_TABLE = models.Contact.__table__
_CONTACT_JSON = {"social_links": TypeAdapter(dict[str, str])}


def contact_to_row(contact: Contact) -> Row:
    return _to_row(contact, _CONTACT_TABLE, _BASE_TIMESTAMPS, _CONTACT_JSON)


def contact_from_row(row: Mapping[str, Any]) -> Contact:
    return _from_row(Contact, row, _BASE_TIMESTAMPS, _CONTACT_JSON)


# ---------------------------------------------------------------------------
# Company
# ---------------------------------------------------------------------------

_COMPANY_TABLE = models.Company.__table__
_COMPANY_TIMESTAMPS = _BASE_TIMESTAMPS | {"founded_at", "last_interaction_at"}
_COMPANY_JSON = {"badge": TypeAdapter(Badge)}


def company_to_row(company: Company) -> Row:
    return _to_row(company, _COMPANY_TABLE, _COMPANY_TIMESTAMPS, _COMPANY_JSON)


def company_from_row(row: Mapping[str, Any]) -> Company:
    return _from_row(Company, row, _COMPANY_TIMESTAMPS, _COMPANY_JSON)


# ---------------------------------------------------------------------------
# Deal / Task / Note
# ---------------------------------------------------------------------------

_DEAL_TABLE = models.Deal.__table__
_DEAL_TIMESTAMPS = _TASK_TIMESTAMPS | {"payment_date"}


def deal_to_row(deal: Deal) -> Row:
    return _to_row(deal, _DEAL_TABLE, _DEAL_TIMESTAMPS, {})


def deal_from_row(row: Mapping[str, Any]) -> Deal:
    return _from_row(Deal, row, _DEAL_TIMESTAMPS, {})


def task_to_row(task: Task) -> Row:
    return _to_row(task, models.Task.__table__, _TASK_TIMESTAMPS, {})


def task_from_row(row: Mapping[str, Any]) -> Task:
    return _from_row(Task, row, _TASK_TIMESTAMPS, {})


def note_to_row(note: Note) -> Row:
    return _to_row(note, models.Note.__table__, _TASK_TIMESTAMPS, {})


def note_from_row(row: Mapping[str, Any]) -> Note:
    return _from_row(Note, row, _TASK_TIMESTAMPS, {})


CONTACT_MAPPER = EntityMapper(contact_to_row, contact_from_row)
COMPANY_MAPPER = EntityMapper(company_to_row, company_from_row)
DEAL_MAPPER = EntityMapper(deal_to_row, deal_from_row)
TASK_MAPPER = EntityMapper(task_to_row, task_from_row)
NOTE_MAPPER = EntityMapper(note_to_row, note_from_row)
