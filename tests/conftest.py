"""Shared fixtures: every test gets its own in-memory store and database."""
import pytest

from db.connection import open_database
from db.storage import MemoryKeyValueStore


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def db(store):
    """Schema applied, no migrations run."""
    database = open_database(store, run_migrations_on_init=False)
    yield database
    database.close()


@pytest.fixture
def seeded_db(store):
    """Schema applied and every shipped migration run."""
    database = open_database(store)
    yield database
    database.close()
