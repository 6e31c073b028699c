"""Compiled-in settings for the local CRM store.

The snapshot keys, pagination default and export filename are fixed. The
storage directory, quota and SQL echo flag can be overridden through the
environment (or a .env file).
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DB_STORAGE_KEY = "agentic_crm_database"
DB_VERSION_KEY = "agentic_crm_db_version"

DEFAULT_PAGE_SIZE = 50
DEFAULT_EXPORT_FILENAME = "agentic-crm-db.sqlite"
DEFAULT_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024


def _int_env(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(
            f"{name} must be an integer number of bytes. Got: '{raw}'."
        ) from None
    if value <= 0:
        raise RuntimeError(f"{name} must be positive. Got: {value}.")
    return value


def _bool_env(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


# Directory used by FileKeyValueStore when no explicit path is given.
STORAGE_DIR = os.environ.get("CRM_STORAGE_DIR") or os.path.join(
    os.path.expanduser("~"), ".agentic_crm"
)
STORAGE_QUOTA_BYTES = _int_env("CRM_STORAGE_QUOTA_BYTES") or DEFAULT_STORAGE_QUOTA_BYTES
ECHO_SQL = _bool_env("CRM_ECHO_SQL")
