"""Database package for the local CRM store."""
from db.connection import get_db, open_database, reset_database
from db.database import Database

__all__ = ["Database", "get_db", "open_database", "reset_database"]
