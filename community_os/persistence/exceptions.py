"""Persistence layer exceptions.

Every error raised by the profile store derives from PersistenceError, so
callers that only care whether the store failed can catch a single class.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the engine cannot be created or the database is unreachable.

    Examples:
    - Empty or malformed database URL
    - Database file not writable
    - Session requested before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an operation requires a profile that does not exist.

    Lookups that may legitimately miss (get_by_id) return None instead.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised on constraint violations such as a duplicate profile email."""

    pass
