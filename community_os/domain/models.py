"""Core domain models for participant profiles.

This module defines:
- StatusTag: the traffic-light availability indicator
- Profile: the canonical in-memory participant record used by search and matching

List and text fields are never None once a Profile exists; the validators
coerce missing values to empty collections so scoring code stays null-free.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class StatusTag(str, Enum):
    """Traffic-light availability status."""

    AVAILABLE = "green"
    SELECTIVE = "yellow"
    UNAVAILABLE = "red"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    StatusTag.AVAILABLE: "Available",
    StatusTag.SELECTIVE: "Maybe",
    StatusTag.UNAVAILABLE: "Deep Work",
    StatusTag.UNKNOWN: "Unknown",
}

RECOGNIZED_STATUSES = (StatusTag.AVAILABLE, StatusTag.SELECTIVE, StatusTag.UNAVAILABLE)


def normalize_status(raw: Optional[str]) -> StatusTag:
    """Map a raw status string to a StatusTag.

    Trims and lowercases the input; anything that is not one of the three
    recognized values (including None) is UNKNOWN rather than an error.
    """
    if not isinstance(raw, str):
        return StatusTag.UNKNOWN

    value = raw.strip().lower()
    for tag in RECOGNIZED_STATUSES:
        if tag.value == value:
            return tag
    return StatusTag.UNKNOWN


class Profile(BaseModel):
    """A participant's structured record.

    ``skills`` are the skills the participant entered; ``parsed_skills`` are
    extracted from their bio or social profiles by enrichment. ``status`` keeps
    the raw stored tag; use ``status_tag`` for the normalized value.
    """

    id: int = Field(..., description="Unique participant identifier")
    name: str = Field("", description="Display name")
    email: str = ""
    telegram: str = ""
    linkedin: str = ""
    bio: str = Field("", description="Free-text biography")
    skills: List[str] = Field(default_factory=list, description="Primary skills")
    parsed_skills: List[str] = Field(default_factory=list, description="Supplementary skills")
    interests: List[str] = Field(default_factory=list)
    can_help: str = Field("", description="What the participant can help others with")
    needs_help: str = Field("", description="What the participant needs help with")
    has_startup: bool = False
    startup_name: str = ""
    startup_stage: str = ""
    startup_description: str = ""
    looking_for: List[str] = Field(default_factory=list)
    ai_usage: str = ""
    enhanced_bio: str = Field("", description="Enriched biography, preferred for search")
    status: str = Field("", description="Raw traffic-light tag as stored")
    availability_text: str = ""
    embedding: Optional[List[float]] = Field(None, description="Semantic embedding vector")
    created_at: Optional[datetime] = None

    @field_validator(
        "name", "email", "telegram", "linkedin", "bio", "can_help", "needs_help",
        "startup_name", "startup_stage", "startup_description", "ai_usage",
        "enhanced_bio", "status", "availability_text",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v):
        """Treat missing text as empty."""
        return "" if v is None else v

    @field_validator("skills", "parsed_skills", "interests", "looking_for", mode="before")
    @classmethod
    def coerce_list(cls, v):
        """Treat missing lists as empty and drop blank entries."""
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [item for item in v if isinstance(item, str) and item.strip()]
        return v

    @field_validator("has_startup", mode="before")
    @classmethod
    def coerce_flag(cls, v):
        return False if v is None else v

    @field_validator("embedding", mode="before")
    @classmethod
    def empty_embedding_is_none(cls, v):
        """An empty vector carries no information; store it as absent."""
        if v is not None and len(v) == 0:
            return None
        return v

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @property
    def status_tag(self) -> StatusTag:
        return normalize_status(self.status)

    @property
    def is_unavailable(self) -> bool:
        return self.status_tag is StatusTag.UNAVAILABLE

    @property
    def all_skills(self) -> List[str]:
        """Primary then supplementary skills, exact duplicates removed, order kept."""
        return list(dict.fromkeys(self.skills + self.parsed_skills))

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)

    model_config = {"json_schema_extra": {"example": {
        "id": 7,
        "name": "Ada Example",
        "bio": "Backend engineer building developer tools.",
        "skills": ["Rust", "Go"],
        "parsed_skills": ["Distributed Systems"],
        "interests": ["hiking", "chess"],
        "can_help": "code review and Rust onboarding",
        "needs_help": "fundraising strategy",
        "has_startup": True,
        "startup_name": "Acme",
        "startup_stage": "pre-seed",
        "looking_for": ["cofounder"],
        "status": "green",
    }}}
