"""Domain models shared across search, matching and persistence."""

from .mapping import (
    build_searchable_text,
    profile_from_record,
    profile_to_payload,
    profile_to_record,
)
from .models import RECOGNIZED_STATUSES, Profile, StatusTag, normalize_status

__all__ = [
    "Profile",
    "StatusTag",
    "RECOGNIZED_STATUSES",
    "normalize_status",
    "profile_from_record",
    "profile_to_record",
    "profile_to_payload",
    "build_searchable_text",
]
