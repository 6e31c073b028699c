"""Exception types raised by the CRM store."""
from typing import Optional


class CrmStoreError(Exception):
    """Base class for every error raised by this package."""


class DatabaseInitError(CrmStoreError):
    """The embedded SQL engine could not be created."""


class StorageQuotaExceededError(CrmStoreError):
    """The durable key-value store refused a write because it is full."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "Storage quota exceeded. Please clear old data or export the database."
        )


class SchemaVersionError(CrmStoreError):
    """An imported snapshot was written by a newer schema than this build supports."""

    def __init__(self, found: int, supported: int):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Imported database schema (v{found}) is newer than "
            f"supported version (v{supported})"
        )


class MigrationError(CrmStoreError):
    """A migration failed to apply or roll back."""

    def __init__(self, version: int, name: str, message: str):
        self.version = version
        self.name = name
        super().__init__(f"Migration {version} ({name}) failed: {message}")


class PersistenceError(CrmStoreError):
    """A write succeeded but the row could not be read back."""


class InvalidIdentifierError(CrmStoreError, ValueError):
    """A table or column name is not part of the known schema."""
