"""Conversion between stored participant rows and the Profile model.

Stored rows use snake_case names plus a set of generic columns whose meaning
is fixed by convention:

    custom_1        enhanced bio
    custom_5        traffic-light status
    custom_6        availability text
    custom_array_1  parsed skills
    custom_array_2  interests

These are the only functions that know about that layout.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from .models import Profile

# Profile attribute -> stored column, for every field whose name differs
_COLUMN_ALIASES = {
    "enhanced_bio": "custom_1",
    "status": "custom_5",
    "availability_text": "custom_6",
    "parsed_skills": "custom_array_1",
    "interests": "custom_array_2",
}

_DIRECT_COLUMNS = (
    "id", "name", "email", "telegram", "linkedin", "bio", "skills", "has_startup",
    "startup_name", "startup_stage", "startup_description", "looking_for",
    "can_help", "needs_help", "ai_usage",
)


def profile_from_record(record: Dict[str, Any]) -> Profile:
    """Build a Profile from a stored row.

    Unknown keys (e.g. a ``similarity`` column added by a vector query) are
    ignored. Embeddings serialized as text (``"[0.1, 0.2]"``) are parsed.

    Raises:
        pydantic.ValidationError: If the row lacks an id or has malformed values
    """
    data: Dict[str, Any] = {column: record.get(column) for column in _DIRECT_COLUMNS}

    for attribute, column in _COLUMN_ALIASES.items():
        data[attribute] = record.get(column)

    data["embedding"] = _parse_embedding(record.get("embedding"))
    data["created_at"] = _parse_timestamp(record.get("created_at"))

    return Profile.model_validate(data)


def profile_to_record(profile: Profile) -> Dict[str, Any]:
    """Render a Profile as a stored row (inverse of profile_from_record)."""
    record: Dict[str, Any] = {column: getattr(profile, column) for column in _DIRECT_COLUMNS}

    for attribute, column in _COLUMN_ALIASES.items():
        record[column] = getattr(profile, attribute)

    record["skills"] = list(profile.skills)
    record["looking_for"] = list(profile.looking_for)
    record["custom_array_1"] = list(profile.parsed_skills)
    record["custom_array_2"] = list(profile.interests)
    record["embedding"] = list(profile.embedding) if profile.embedding is not None else None
    record["created_at"] = profile.created_at.isoformat() if profile.created_at else None

    return record


def profile_to_payload(profile: Profile) -> Dict[str, Any]:
    """Caller-facing camelCase rendering of a profile, without the embedding."""
    return {
        "id": profile.id,
        "name": profile.name,
        "email": profile.email,
        "telegram": profile.telegram,
        "linkedin": profile.linkedin,
        "bio": profile.bio,
        "skills": list(profile.skills),
        "parsedSkills": list(profile.parsed_skills),
        "interests": list(profile.interests),
        "canHelp": profile.can_help,
        "needsHelp": profile.needs_help,
        "hasStartup": profile.has_startup,
        "startupName": profile.startup_name,
        "startupStage": profile.startup_stage,
        "startupDescription": profile.startup_description,
        "lookingFor": list(profile.looking_for),
        "aiUsage": profile.ai_usage,
        "enhancedBio": profile.enhanced_bio,
        "status": profile.status_tag.value,
        "availabilityText": profile.availability_text,
    }


def build_searchable_text(profile: Profile) -> str:
    """Combine the profile fields that describe a person into embedding input.

    Paragraphs are separated by a blank line; empty fields are skipped, so a
    profile with nothing filled in yields an empty string.
    """
    parts: List[str] = []

    if profile.bio:
        parts.append(profile.bio)
    if profile.skills:
        parts.append(f"Skills: {', '.join(profile.skills)}")
    if profile.can_help:
        parts.append(f"Can help with: {profile.can_help}")
    if profile.needs_help:
        parts.append(f"Needs help with: {profile.needs_help}")
    if profile.ai_usage:
        parts.append(f"AI usage: {profile.ai_usage}")
    if profile.looking_for:
        parts.append(f"Looking for: {', '.join(profile.looking_for)}")
    if profile.startup_description:
        parts.append(f"Startup: {profile.startup_description}")
    if profile.enhanced_bio:
        parts.append(profile.enhanced_bio)
    if profile.parsed_skills:
        parts.append(f"Additional skills: {', '.join(profile.parsed_skills)}")
    if profile.interests:
        parts.append(f"Interests: {', '.join(profile.interests)}")

    return "\n\n".join(part for part in parts if part.strip())


def _parse_embedding(value: Any) -> Optional[List[float]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        value = json.loads(value)
    return [float(x) for x in value]


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
