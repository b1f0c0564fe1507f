"""Configuration schema models using Pydantic."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SearchSettings(BaseModel):
    """Tuning knobs for the agentic search pipeline."""

    default_limit: int = Field(10, ge=1, description="Results returned when the caller gives no limit")
    max_limit: int = Field(20, ge=1, le=20, description="Hard cap on returned results, at most 20")
    match_threshold: float = Field(
        0.3, ge=0.0, le=1.0, description="Default similarity threshold for retrieval"
    )
    max_query_length: int = Field(500, ge=1, description="Longest accepted query (characters)")
    candidate_multiplier: int = Field(
        5, ge=1, description="Retrieve limit * multiplier candidates for re-ranking headroom"
    )
    threshold_margin: float = Field(
        0.1, ge=0.0, le=1.0, description="How far retrieval lowers the match threshold"
    )
    min_threshold: float = Field(
        0.1, ge=0.0, le=1.0, description="Floor for the lowered retrieval threshold"
    )

    @model_validator(mode="after")
    def validate_limits(self):
        """Default limit must fit under the cap."""
        if self.default_limit > self.max_limit:
            raise ValueError(
                f"default_limit ({self.default_limit}) cannot exceed max_limit ({self.max_limit})"
            )
        return self


class MatchingSettings(BaseModel):
    """Defaults for coffee roulette matching."""

    max_results: int = Field(3, ge=1, le=50, description="Matches returned per spin")
    exclude_unavailable: bool = Field(
        True, description="Skip participants whose status is 'red' (deep work)"
    )


class OpenAISettings(BaseModel):
    """Embedding and chat model settings."""

    base_url: str = Field("https://api.openai.com/v1", min_length=1)
    embedding_model: str = Field("text-embedding-3-small", min_length=1)
    embedding_dimensions: int = Field(1536, ge=1)
    llm_model: str = Field("gpt-4o-mini", min_length=1)
    explanation_temperature: float = Field(0.3, ge=0.0, le=2.0)
    intro_temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(200, ge=1, le=4096)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL so endpoint paths can be appended directly."""
        stripped = v.strip().rstrip("/")
        if not stripped.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got: {v}")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for provider API calls (seconds)"
    )
    user_agent: str = Field(
        "CommunityOS/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for the community directory."""

    search: SearchSettings = Field(default_factory=SearchSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
