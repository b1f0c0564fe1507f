"""Profile factories and in-memory collaborators for search tests.

The fakes expose the same methods AgenticSearch calls on the real providers
and vector store, and record their calls so tests can assert on them.
"""

from typing import List, Optional, Sequence, Tuple

from community_os.domain.models import Profile
from community_os.providers.models import EmbeddingResult, ExplanationResult
from community_os.search.models import MatchedFields, SearchMatch


def make_profile(profile_id: int = 1, name: Optional[str] = None, **overrides) -> Profile:
    """Create a test Profile with empty defaults."""
    return Profile(id=profile_id, name=name or f"Participant {profile_id}", **overrides)


def make_match(profile: Profile, relevance_score: float = 0.5) -> SearchMatch:
    return SearchMatch(
        profile=profile,
        relevance_score=relevance_score,
        matched_fields=MatchedFields(),
        similarity_score=relevance_score,
    )


class FakeEmbeddingProvider:
    def __init__(self, vector: Optional[List[float]] = None, error: Optional[Exception] = None):
        self.vector = vector or [1.0, 0.0, 0.0]
        self.error = error
        self.calls: List[str] = []

    def embed(self, text: str) -> EmbeddingResult:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return EmbeddingResult(vector=list(self.vector), model="fake-embedding", time_ms=3)


class FakeVectorStore:
    def __init__(
        self,
        rows: Sequence[Tuple[Profile, float]] = (),
        has_embeddings: bool = True,
        error: Optional[Exception] = None,
    ):
        self.rows = list(rows)
        self._has_embeddings = has_embeddings
        self.error = error
        self.retrieve_calls: List[dict] = []

    def has_embeddings(self) -> bool:
        return self._has_embeddings

    def retrieve(self, vector, limit, threshold):
        self.retrieve_calls.append({"vector": vector, "limit": limit, "threshold": threshold})
        if self.error is not None:
            raise self.error
        return [(p, s) for p, s in self.rows if s >= threshold][:limit]


class FakeExplainer:
    def __init__(self, text: str = "They match.", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[Tuple[str, list]] = []

    def explain(self, query: str, matches) -> ExplanationResult:
        self.calls.append((query, list(matches)))
        if self.error is not None:
            raise self.error
        return ExplanationResult(
            explanation=self.text, model="fake-llm", tokens_used=42, time_ms=7
        )
