"""Opening, resetting and scoping CRM databases.

Provides:
- open_database(): load the stored snapshot or create a fresh database,
  then run pending migrations
- reset_database(): drop the stored snapshot and start over
- get_db(): context manager for use in application code
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from db.database import Database
from db.engine import SqliteEngine
from db.migrations import Migration, all_migrations, run_migrations
from db.schema import SCHEMA_VERSION, apply_schema, get_schema_version
from db.snapshot import SnapshotStore
from db.storage import FileKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)


def open_database(
    store: Optional[KeyValueStore] = None,
    *,
    force_new: bool = False,
    run_migrations_on_init: bool = True,
    migrations: Optional[Sequence[Migration]] = None,
) -> Database:
    """Return a ready Database backed by `store` (a FileKeyValueStore by default)."""
    if store is None:
        store = FileKeyValueStore()
    snapshots = SnapshotStore(store)

    engine = None if force_new else snapshots.load()
    if engine is None:
        logger.info("Creating new database")
        engine = SqliteEngine()
        apply_schema(engine)
        db = Database(engine, snapshots)
        db.save()
    else:
        db = Database(engine, snapshots)
        current = get_schema_version(engine)
        if current < SCHEMA_VERSION:
            logger.warning("Upgrading stored schema v%d to v%d", current, SCHEMA_VERSION)
            apply_schema(engine)
            db.save()

    if run_migrations_on_init:
        run_migrations(db, all_migrations() if migrations is None else migrations)
    return db


def reset_database(db: Database, **kwargs) -> Database:
    """Delete the stored snapshot, close `db` and open a brand new database."""
    store = db.snapshots.store
    db.snapshots.clear()
    db.close()
    logger.info("Database reset")
    return open_database(store, force_new=True, **kwargs)


@contextmanager
def get_db(store: Optional[KeyValueStore] = None, **kwargs) -> Iterator[Database]:
    """Context manager that yields an open Database and closes it afterwards.

    Usage:
        with get_db() as db:
            contacts = ContactRepository(db).get_all()
    """
    db = open_database(store, **kwargs)
    try:
        yield db
    except Exception:
        logger.exception("Database session ended with an exception")
        raise
    finally:
        db.close()
