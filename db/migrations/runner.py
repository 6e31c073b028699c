"""Ordered data-migration runner with a ledger table.

Each migration runs at most once per database. After every successful
migration the ledger row is written and the whole database is snapshotted,
so a later failure leaves earlier migrations applied and persisted.
"""
import importlib
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.schema import CreateTable

from db.database import Database
from db.exceptions import MigrationError
from db.mappers import from_epoch_ms, now_ms
from db.models import AppliedMigration

logger = logging.getLogger(__name__)

_LEDGER = AppliedMigration.__table__

# Modules under db.migrations.versions, in declared order.
MIGRATION_MODULES = (
    "001_seed_lookup_tables",
    "002_seed_contacts",
    "003_seed_companies",
    "004_seed_deals",
)


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    up: Callable[[Database], None]
    down: Optional[Callable[[Database], None]] = None


@dataclass
class MigrationStatus:
    version: int
    name: str
    applied: bool
    applied_at: Optional[datetime] = None


def load_migration(module_name: str) -> Migration:
    module = importlib.import_module(f"db.migrations.versions.{module_name}")
    return Migration(
        version=module.version,
        name=module.name,
        up=module.upgrade,
        down=getattr(module, "downgrade", None),
    )


def all_migrations() -> list[Migration]:
    """Every shipped migration, in declared order."""
    return [load_migration(name) for name in MIGRATION_MODULES]


def ensure_migrations_table(db: Database) -> None:
    db.execute(CreateTable(_LEDGER, if_not_exists=True))


def _ledger_rows(db: Database) -> dict[int, int]:
    ensure_migrations_table(db)
    result = db.execute(select(_LEDGER.c.version, _LEDGER.c.applied_at))
    return {version: applied_at for version, applied_at in result}


def get_applied_migrations(db: Database) -> list[int]:
    """Versions recorded in the ledger, ascending."""
    return sorted(_ledger_rows(db))


def record_migration(db: Database, migration: Migration) -> None:
    db.execute(
        _LEDGER.insert().values(
            version=migration.version, name=migration.name, applied_at=now_ms()
        )
    )


def run_migrations(db: Database, migrations: Sequence[Migration]) -> list[int]:
    """Apply every pending migration in ascending version order.

    Returns the versions applied by this call. Raises MigrationError on the
    first failure; migrations applied before it stay applied.
    """
    applied = set(get_applied_migrations(db))
    pending = sorted(
        (m for m in migrations if m.version not in applied), key=lambda m: m.version
    )
    if not pending:
        logger.debug("No pending migrations")
        return []

    done = []
    for migration in pending:
        logger.info("Applying migration %d (%s)", migration.version, migration.name)
        try:
            migration.up(db)
        except Exception as exc:
            logger.exception("Migration %d (%s) failed", migration.version, migration.name)
            raise MigrationError(migration.version, migration.name, str(exc)) from exc
        record_migration(db, migration)
        db.save()
        done.append(migration.version)

    logger.info("Applied %d migration(s)", len(done))
    return done


def rollback_migration(db: Database, migration: Migration) -> None:
    """Undo one migration and remove it from the ledger."""
    if migration.down is None:
        raise MigrationError(migration.version, migration.name, "no down migration defined")

    ensure_migrations_table(db)
    logger.info("Rolling back migration %d (%s)", migration.version, migration.name)
    try:
        migration.down(db)
    except Exception as exc:
        logger.exception("Rollback of migration %d (%s) failed", migration.version, migration.name)
        raise MigrationError(migration.version, migration.name, str(exc)) from exc
    db.execute(delete(_LEDGER).where(_LEDGER.c.version == migration.version))
    db.save()


def get_migration_status(db: Database, migrations: Sequence[Migration]) -> list[MigrationStatus]:
    ledger = _ledger_rows(db)
    return [
        MigrationStatus(
            version=m.version,
            name=m.name,
            applied=m.version in ledger,
            applied_at=from_epoch_ms(ledger.get(m.version)),
        )
        for m in sorted(migrations, key=lambda m: m.version)
    ]
