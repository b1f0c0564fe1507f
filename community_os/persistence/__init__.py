"""Persistence layer: profile store and similarity retrieval.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Data access
    - ProfileRepository: reads, writes and aggregates over profiles
    - SQLVectorStore: embedding existence probe and similarity retrieval

Example usage:
    >>> from community_os.persistence import init_database, get_session, ProfileRepository
    >>> init_database("sqlite:///./data/community_os.db")
    >>> with get_session() as session:
    ...     profile = ProfileRepository(session).get_by_id(7)
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import ProfileRepository
from .vector_store import (
    NO_SIMILARITY,
    RetrievedProfile,
    SQLVectorStore,
    batch_cosine_similarity,
    cosine_similarity,
)

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Data access
    "ProfileRepository",
    "SQLVectorStore",
    "RetrievedProfile",
    "batch_cosine_similarity",
    "cosine_similarity",
    "NO_SIMILARITY",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
