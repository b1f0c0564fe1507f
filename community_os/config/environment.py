"""Environment variable loading and validation."""

import os
from typing import Dict, List, Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/community_os.db"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        embedding_model: Optional[str] = None,
        llm_model: Optional[str] = None,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.openai_api_key = openai_api_key
        self.embedding_model = embedding_model
        self.llm_model = llm_model
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level

    @property
    def has_openai_key(self) -> bool:
        return bool(self.openai_api_key)


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Optional environment variables:
    - OPENAI_API_KEY: API key for embeddings and explanations (required for search)
    - OPENAI_EMBEDDING_MODEL: Override the configured embedding model
    - OPENAI_LLM_MODEL: Override the configured chat model
    - DATABASE_URL: SQLAlchemy URL (default: sqlite:///./data/community_os.db)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If any variable is set to an invalid value
    """
    section_errors: Dict[str, List[str]] = {}

    openai_api_key = _read("OPENAI_API_KEY")
    embedding_model = _read("OPENAI_EMBEDDING_MODEL")
    llm_model = _read("OPENAI_LLM_MODEL")
    database_url = _read("DATABASE_URL")
    log_level = _read("LOG_LEVEL")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        section_errors["LOG_LEVEL"] = [
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        ]

    if database_url and "://" not in database_url:
        section_errors["DATABASE_URL"] = [
            f"Invalid DATABASE_URL: '{database_url}'. Expected a SQLAlchemy URL such as "
            f"{DEFAULT_DATABASE_URL}"
        ]

    if section_errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            section_errors=section_errors,
            source="environment",
            suggestions=[
                "Copy .env.example to .env and fill in your values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        openai_api_key=openai_api_key,
        embedding_model=embedding_model,
        llm_model=llm_model,
        database_url=database_url,
        log_level=log_level.upper() if log_level else None,
    )


def _read(name: str) -> Optional[str]:
    """Return a stripped environment value, treating blanks as unset."""
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None
