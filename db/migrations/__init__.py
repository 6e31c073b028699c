"""Data migrations: seed data and later data fixes, tracked in the migrations table."""
from db.migrations.runner import (
    Migration,
    MigrationStatus,
    all_migrations,
    get_applied_migrations,
    get_migration_status,
    rollback_migration,
    run_migrations,
)

__all__ = [
    "Migration",
    "MigrationStatus",
    "all_migrations",
    "get_applied_migrations",
    "get_migration_status",
    "rollback_migration",
    "run_migrations",
]
