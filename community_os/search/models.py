"""Data models for the agentic search pipeline.

Results are plain dataclasses built fresh per query; to_dict() renders the
camelCase shapes returned to callers. SearchOptions is the validated request.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from community_os.config.models import SearchSettings
from community_os.domain.mapping import profile_to_payload
from community_os.domain.models import Profile

NO_RESULTS_EXPLANATION = (
    "No participants matched your query. Try different keywords or broaden your search."
)


class SearchErrorCode(str, Enum):
    EMBEDDING_FAILED = "EMBEDDING_FAILED"
    SEARCH_FAILED = "SEARCH_FAILED"
    # Reserved; explanation failures degrade to a fallback text instead
    LLM_FAILED = "LLM_FAILED"
    INVALID_QUERY = "INVALID_QUERY"
    NO_EMBEDDINGS_AVAILABLE = "NO_EMBEDDINGS_AVAILABLE"


class SearchOptions(BaseModel):
    """Per-request search options.

    ``limit`` is not capped here; the orchestrator clamps it to the configured
    maximum so oversized requests are served rather than rejected.
    """

    limit: int = Field(10, ge=1, description="Number of results requested")
    exclude_unavailable: bool = Field(False, description="Drop participants with status 'red'")
    match_threshold: float = Field(0.3, ge=0.0, le=1.0, description="Similarity threshold")
    include_debug: bool = Field(False, description="Attach timings, models and raw scores")

    @classmethod
    def from_settings(cls, settings: SearchSettings, **overrides: Any) -> "SearchOptions":
        """Options seeded from configuration, with explicit overrides applied."""
        values = {
            "limit": settings.default_limit,
            "match_threshold": settings.match_threshold,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass
class MatchedFields:
    """Which profile fields matched the query.

    Only fields that matched carry a value; unmatched list fields stay empty,
    flags stay False and bio stays None.
    """

    skills: List[str] = field(default_factory=list)
    interests: List[str] = field(default_factory=list)
    can_help: bool = False
    needs_help: bool = False
    bio: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.skills:
            data["skills"] = list(self.skills)
        if self.interests:
            data["interests"] = list(self.interests)
        if self.can_help:
            data["canHelp"] = True
        if self.needs_help:
            data["needsHelp"] = True
        if self.bio is not None:
            data["bio"] = self.bio
        return data


@dataclass
class SearchMatch:
    profile: Profile
    relevance_score: float
    matched_fields: MatchedFields
    similarity_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "profile": profile_to_payload(self.profile),
            "relevanceScore": self.relevance_score,
            "matchedFields": self.matched_fields.to_dict(),
        }
        if self.similarity_score is not None:
            data["similarityScore"] = self.similarity_score
        return data


@dataclass
class SearchMetadata:
    total_matches: int
    returned_count: int
    search_time_ms: int
    query: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalMatches": self.total_matches,
            "returnedCount": self.returned_count,
            "searchTimeMs": self.search_time_ms,
            "query": self.query,
        }


@dataclass
class SearchDebugInfo:
    """Per-stage diagnostics, only populated when include_debug is set."""

    embedding_model: Optional[str] = None
    similarity_scores: List[float] = field(default_factory=list)
    rerank_scores: List[float] = field(default_factory=list)
    llm_model: Optional[str] = None
    llm_tokens_used: Optional[int] = None
    embedding_time_ms: Optional[int] = None
    vector_search_time_ms: Optional[int] = None
    llm_time_ms: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "embeddingModel": self.embedding_model,
            "similarityScores": list(self.similarity_scores),
            "rerankScores": list(self.rerank_scores),
            "llmModel": self.llm_model,
            "llmTokensUsed": self.llm_tokens_used,
            "embeddingGenerationTimeMs": self.embedding_time_ms,
            "vectorSearchTimeMs": self.vector_search_time_ms,
            "llmGenerationTimeMs": self.llm_time_ms,
        }


@dataclass
class SearchResponse:
    explanation: str
    matches: List[SearchMatch]
    metadata: SearchMetadata
    debug: Optional[SearchDebugInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "explanation": self.explanation,
            "matches": [match.to_dict() for match in self.matches],
            "metadata": self.metadata.to_dict(),
        }
        if self.debug is not None:
            data["debug"] = self.debug.to_dict()
        return data


@dataclass
class SearchError:
    """A failed search: stable machine-readable code plus a readable message."""

    message: str
    code: SearchErrorCode
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"errorMessage": self.message, "code": SearchErrorCode(self.code).value}
        if self.details is not None:
            data["details"] = self.details
        return data


SearchResult = Union[SearchResponse, SearchError]


def is_search_error(result: SearchResult) -> bool:
    return isinstance(result, SearchError)
