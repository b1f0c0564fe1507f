"""ORM schema for the profile store.

Column names follow the stored-row layout understood by
community_os.domain.mapping (including the generic custom_* columns), so
conversion to and from the domain model goes through that mapping.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, Column, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from community_os.domain.mapping import profile_from_record, profile_to_record
from community_os.domain.models import Profile
from community_os.logging import get_logger

logger = get_logger(__name__, component="database")

Base = declarative_base()

_COLUMNS = (
    "id", "name", "email", "telegram", "linkedin", "bio", "skills", "has_startup",
    "startup_name", "startup_stage", "startup_description", "looking_for", "can_help",
    "needs_help", "ai_usage", "custom_1", "custom_5", "custom_6", "custom_array_1",
    "custom_array_2", "embedding",
)


class ProfileModel(Base):
    """ORM model for the profiles table."""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=True, unique=True)
    telegram = Column(String(255), nullable=True)
    linkedin = Column(String(512), nullable=True)
    bio = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    has_startup = Column(Boolean, nullable=False, default=False)
    startup_name = Column(String(255), nullable=True)
    startup_stage = Column(String(100), nullable=True)
    startup_description = Column(Text, nullable=True)
    looking_for = Column(JSON, nullable=False, default=list)
    can_help = Column(Text, nullable=True)
    needs_help = Column(Text, nullable=True)
    ai_usage = Column(Text, nullable=True)

    # Enhanced bio
    custom_1 = Column(Text, nullable=True)
    # Traffic-light status tag
    custom_5 = Column(String(20), nullable=True)
    # Availability text
    custom_6 = Column(Text, nullable=True)
    # Parsed skills
    custom_array_1 = Column(JSON, nullable=False, default=list)
    # Interests
    custom_array_2 = Column(JSON, nullable=False, default=list)

    embedding = Column(JSON(none_as_null=True), nullable=True)

    # ISO 8601 string, UTC
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_profiles_name", "name"),
        Index("idx_profiles_created_at", "created_at"),
    )

    def to_record(self) -> Dict[str, Any]:
        record = {column: getattr(self, column) for column in _COLUMNS}
        record["created_at"] = _parse_datetime(self.created_at)
        return record

    def to_domain(self) -> Profile:
        return profile_from_record(self.to_record())

    def apply(self, profile: Profile) -> None:
        """Copy every stored field from a domain profile onto this row."""
        record = profile_to_record(profile)
        for column in _COLUMNS:
            setattr(self, column, record[column])
        # Blank emails are stored as NULL so the unique index only covers real addresses
        self.email = profile.email or None
        if profile.created_at is not None or self.created_at is None:
            self.created_at = _format_datetime(profile.created_at or datetime.now(timezone.utc))

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileModel":
        model = cls()
        model.apply(profile)
        return model


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    if not dt_str:
        return None

    dt_str = dt_str.rstrip("Z")
    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S")

    return dt.replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create missing tables and indexes. Safe to call repeatedly."""
    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(
            f"Database schema ready. Tables: {', '.join(tables)}",
            extra={"event": "database.schema.ready"},
        )
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
