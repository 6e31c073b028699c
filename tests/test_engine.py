"""Unit tests for the in-memory SQLite engine wrapper."""
import sqlite3

import pytest
from sqlalchemy.exc import DatabaseError, OperationalError

from db.engine import SqliteEngine


@pytest.fixture
def engine():
    eng = SqliteEngine()
    yield eng
    eng.close()


class TestSqliteEngine:
    def test_executes_raw_sql_with_named_params(self, engine):
        engine.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, label TEXT)")
        engine.execute("INSERT INTO t (id, label) VALUES (:id, :label)", {"id": 1, "label": "one"})
        rows = engine.execute("SELECT label FROM t WHERE id = :id", {"id": 1}).all()
        assert rows == [("one",)]

    def test_bad_sql_is_logged_and_reraised(self, engine, caplog):
        with pytest.raises(OperationalError):
            engine.execute("SELECT * FROM no_such_table")
        assert "Query failed" in caplog.text

    def test_export_is_a_sqlite_image(self, engine):
        engine.execute("CREATE TABLE t (id INTEGER PRIMARY KEY)")
        data = engine.export()
        assert isinstance(data, bytes)
        assert data.startswith(b"SQLite format 3\x00")

    def test_round_trip_through_bytes(self, engine):
        engine.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, label TEXT)")
        engine.execute("INSERT INTO t (label) VALUES ('a'), ('b')")

        copy = SqliteEngine(engine.export())
        try:
            assert copy.execute("SELECT count(*) FROM t").scalar() == 2
            # the copy is independent of the original
            copy.execute("DELETE FROM t")
            assert engine.execute("SELECT count(*) FROM t").scalar() == 2
        finally:
            copy.close()

    def test_rejects_bytes_that_are_not_a_database(self):
        with pytest.raises((DatabaseError, sqlite3.DatabaseError)):
            SqliteEngine(b"definitely not a database " * 200)

    def test_explicit_transaction_rollback(self, engine):
        engine.execute("CREATE TABLE t (id INTEGER PRIMARY KEY)")
        engine.begin()
        engine.execute("INSERT INTO t (id) VALUES (1)")
        engine.rollback()
        assert engine.execute("SELECT count(*) FROM t").scalar() == 0

    def test_export_of_empty_database(self, engine):
        assert engine.export() == b""
