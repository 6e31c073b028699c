"""SQLAlchemy 2.0 table definitions for the local CRM store.

Covers:
  - lookups: categories, connection_strengths, employee_ranges, estimated_arrs
  - entities: companies, contacts, deals, tasks, notes
  - junctions: one table per many-to-many relation, composite primary keys
  - bookkeeping: schema_version, migrations

Timestamps are INTEGER epoch milliseconds and structured fields (social
links, badge) are JSON text; the conversion lives in db.mappers.
Foreign keys are declared for documentation and for PRAGMA
foreign_key_check, but SQLite enforcement is left off.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, Table, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from db.exceptions import InvalidIdentifierError


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


# ===========================================================================
# Bookkeeping
# ===========================================================================


class SchemaVersion(Base):
    """schema_version — one row per applied structural schema version."""

    __tablename__ = "schema_version"

    version: Mapped[int] = mapped_column(Integer, primary_key=True)
    applied_at: Mapped[int] = mapped_column(Integer, nullable=False)


class AppliedMigration(Base):
    """migrations — ledger of data migrations that have run."""

    __tablename__ = "migrations"

    version: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    applied_at: Mapped[int] = mapped_column(Integer, nullable=False)


# ===========================================================================
# Lookups
# ===========================================================================


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bullet: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ConnectionStrength(Base):
    __tablename__ = "connection_strengths"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class EmployeeRange(Base):
    __tablename__ = "employee_ranges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, nullable=False)


class EstimatedArr(Base):
    __tablename__ = "estimated_arrs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, nullable=False)


# ===========================================================================
# Entities
# ===========================================================================


class Company(Base):
    """companies — organisations the CRM tracks."""

    __tablename__ = "companies"
    __table_args__ = (
        Index("idx_companies_name", "name"),
        Index("idx_companies_domain", "domain"),
        Index("idx_companies_created_at", "created_at"),
        Index("idx_companies_country", "country"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    domain: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    zip: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    angel_list: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    linkedin: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    connection_strength_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("connection_strengths.id"), nullable=True
    )
    x: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    instagram: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    facebook: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    telegram: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    founded_at: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    estimated_arr_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("estimated_arrs.id"), nullable=True
    )
    employee_range_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("employee_ranges.id"), nullable=True
    )
    last_interaction_at: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    last_contacted: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    team_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    badge: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)


class Contact(Base):
    """contacts — people, optionally attached to one primary company."""

    __tablename__ = "contacts"
    __table_args__ = (
        Index("idx_contacts_email", "email"),
        Index("idx_contacts_company_id", "company_id"),
        Index("idx_contacts_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    initials: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    position: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    company_id: Mapped[Optional[str]] = mapped_column(
        Text, ForeignKey("companies.id"), nullable=True
    )
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    zip: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    social_links: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)


class Deal(Base):
    """deals — sales opportunities with payment metadata."""

    __tablename__ = "deals"
    __table_args__ = (
        Index("idx_deals_status", "status"),
        Index("idx_deals_priority", "priority"),
        Index("idx_deals_due_at", "due_at"),
        Index("idx_deals_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_name: Mapped[str] = mapped_column(Text, nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_at: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    completed_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    comments: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    currency: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    payment_date: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    payment_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    contract_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    discount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)


class Task(Base):
    """tasks — to-dos with a creator and a due date."""

    __tablename__ = "tasks"
    __table_args__ = (
        Index("idx_tasks_status", "status"),
        Index("idx_tasks_due_at", "due_at"),
        Index("idx_tasks_created_by", "created_by"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_at: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    completed_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)


class Note(Base):
    """notes — free-text notes with a status and a due date."""

    __tablename__ = "notes"
    __table_args__ = (
        Index("idx_notes_status", "status"),
        Index("idx_notes_created_by", "created_by"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_at: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    completed_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)


# ===========================================================================
# Junctions
# ===========================================================================


class CompanyContact(Base):
    __tablename__ = "company_contacts"

    company_id: Mapped[str] = mapped_column(Text, ForeignKey("companies.id"), primary_key=True)
    contact_id: Mapped[str] = mapped_column(Text, ForeignKey("contacts.id"), primary_key=True)


class CompanyCategory(Base):
    __tablename__ = "company_categories"

    company_id: Mapped[str] = mapped_column(Text, ForeignKey("companies.id"), primary_key=True)
    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id"), primary_key=True)


class DealCompany(Base):
    __tablename__ = "deal_companies"

    deal_id: Mapped[str] = mapped_column(Text, ForeignKey("deals.id"), primary_key=True)
    company_id: Mapped[str] = mapped_column(Text, ForeignKey("companies.id"), primary_key=True)


class DealContact(Base):
    __tablename__ = "deal_contacts"

    deal_id: Mapped[str] = mapped_column(Text, ForeignKey("deals.id"), primary_key=True)
    contact_id: Mapped[str] = mapped_column(Text, ForeignKey("contacts.id"), primary_key=True)


class DealRelatedDeal(Base):
    __tablename__ = "deal_related_deals"

    deal_id: Mapped[str] = mapped_column(Text, ForeignKey("deals.id"), primary_key=True)
    related_deal_id: Mapped[str] = mapped_column(Text, ForeignKey("deals.id"), primary_key=True)


class TaskCompany(Base):
    __tablename__ = "task_companies"

    task_id: Mapped[str] = mapped_column(Text, ForeignKey("tasks.id"), primary_key=True)
    company_id: Mapped[str] = mapped_column(Text, ForeignKey("companies.id"), primary_key=True)


class TaskContact(Base):
    __tablename__ = "task_contacts"

    task_id: Mapped[str] = mapped_column(Text, ForeignKey("tasks.id"), primary_key=True)
    contact_id: Mapped[str] = mapped_column(Text, ForeignKey("contacts.id"), primary_key=True)


class TaskDeal(Base):
    __tablename__ = "task_deals"

    task_id: Mapped[str] = mapped_column(Text, ForeignKey("tasks.id"), primary_key=True)
    deal_id: Mapped[str] = mapped_column(Text, ForeignKey("deals.id"), primary_key=True)


class TaskAssignedContact(Base):
    __tablename__ = "task_assigned_contacts"

    task_id: Mapped[str] = mapped_column(Text, ForeignKey("tasks.id"), primary_key=True)
    contact_id: Mapped[str] = mapped_column(Text, ForeignKey("contacts.id"), primary_key=True)


class NoteCompany(Base):
    __tablename__ = "note_companies"

    note_id: Mapped[str] = mapped_column(Text, ForeignKey("notes.id"), primary_key=True)
    company_id: Mapped[str] = mapped_column(Text, ForeignKey("companies.id"), primary_key=True)


class NoteAssignedContact(Base):
    __tablename__ = "note_assigned_contacts"

    note_id: Mapped[str] = mapped_column(Text, ForeignKey("notes.id"), primary_key=True)
    contact_id: Mapped[str] = mapped_column(Text, ForeignKey("contacts.id"), primary_key=True)


class NoteDeal(Base):
    __tablename__ = "note_deals"

    note_id: Mapped[str] = mapped_column(Text, ForeignKey("notes.id"), primary_key=True)
    deal_id: Mapped[str] = mapped_column(Text, ForeignKey("deals.id"), primary_key=True)


# ---------------------------------------------------------------------------
# Table groups, in DDL order
# ---------------------------------------------------------------------------

LOOKUP_TABLES: tuple[Table, ...] = (
    Category.__table__,
    ConnectionStrength.__table__,
    EmployeeRange.__table__,
    EstimatedArr.__table__,
)

ENTITY_TABLES: tuple[Table, ...] = (
    Company.__table__,
    Contact.__table__,
    Deal.__table__,
    Task.__table__,
    Note.__table__,
)

JUNCTION_TABLES: tuple[Table, ...] = (
    CompanyContact.__table__,
    CompanyCategory.__table__,
    DealCompany.__table__,
    DealContact.__table__,
    DealRelatedDeal.__table__,
    TaskCompany.__table__,
    TaskContact.__table__,
    TaskDeal.__table__,
    TaskAssignedContact.__table__,
    NoteCompany.__table__,
    NoteAssignedContact.__table__,
    NoteDeal.__table__,
)


# ---------------------------------------------------------------------------
# Many-to-many relations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Relation:
    """A junction table seen from one side: owner_column -> other_column."""

    table: Table
    owner_column: str
    other_column: str


COMPANY_CONTACTS = Relation(CompanyContact.__table__, "company_id", "contact_id")
COMPANY_CATEGORIES = Relation(CompanyCategory.__table__, "company_id", "category_id")
DEAL_COMPANIES = Relation(DealCompany.__table__, "deal_id", "company_id")
DEAL_CONTACTS = Relation(DealContact.__table__, "deal_id", "contact_id")
DEAL_RELATED_DEALS = Relation(DealRelatedDeal.__table__, "deal_id", "related_deal_id")
TASK_COMPANIES = Relation(TaskCompany.__table__, "task_id", "company_id")
TASK_CONTACTS = Relation(TaskContact.__table__, "task_id", "contact_id")
TASK_DEALS = Relation(TaskDeal.__table__, "task_id", "deal_id")
TASK_ASSIGNED_CONTACTS = Relation(TaskAssignedContact.__table__, "task_id", "contact_id")
NOTE_COMPANIES = Relation(NoteCompany.__table__, "note_id", "company_id")
NOTE_ASSIGNED_CONTACTS = Relation(NoteAssignedContact.__table__, "note_id", "contact_id")
NOTE_DEALS = Relation(NoteDeal.__table__, "note_id", "deal_id")


def resolve_table(name: str) -> Table:
    """Return the Table called `name`, or raise InvalidIdentifierError."""
    try:
        return Base.metadata.tables[name]
    except KeyError:
        raise InvalidIdentifierError(f"Unknown table: {name!r}") from None
