"""End-to-end agentic search.

Pipeline: validate -> probe embeddings -> embed query -> vector retrieve ->
status filter -> re-rank -> limit -> explain -> assemble.

Every collaborator failure is turned into a SearchError value; an explanation
failure degrades to a templated sentence instead of failing the search.
"""

import time
from typing import Any, List, Optional, Sequence, Tuple

from community_os.config.models import SearchSettings
from community_os.domain.models import Profile
from community_os.logging import get_logger
from community_os.logging.context import log_context, new_request_id

from .models import (
    NO_RESULTS_EXPLANATION,
    SearchDebugInfo,
    SearchError,
    SearchErrorCode,
    SearchMetadata,
    SearchOptions,
    SearchResponse,
    SearchResult,
)
from .rerank import rerank_profiles

logger = get_logger(__name__, component="search")


def fallback_explanation(count: int) -> str:
    return f"Found {count} participant{'s' if count != 1 else ''} matching your query."


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class AgenticSearch:
    """Natural-language search over participant profiles.

    Collaborators are injected so the pipeline can run against any embedding
    provider, vector store and explainer exposing the same methods:

    - embedding_provider.embed(text) -> object with ``vector``, ``model``, ``time_ms``
    - vector_store.has_embeddings() -> bool
    - vector_store.retrieve(vector, limit, threshold) -> [(Profile, similarity)]
    - explainer.explain(query, matches) -> object with ``explanation``, ``model``,
      ``tokens_used``, ``time_ms``
    """

    def __init__(
        self,
        embedding_provider: Any,
        vector_store: Any,
        explainer: Any,
        settings: Optional[SearchSettings] = None,
    ):
        self.embedding_provider = embedding_provider
        self.vector_store = vector_store
        self.explainer = explainer
        self.settings = settings or SearchSettings()

    def default_options(self, **overrides: Any) -> SearchOptions:
        return SearchOptions.from_settings(self.settings, **overrides)

    def search(self, query: str, options: Optional[SearchOptions] = None) -> SearchResult:
        """Run a search. Never raises; failures come back as SearchError.

        Args:
            query: Natural-language query, 1..max_query_length characters after trimming
            options: Request options; defaults come from SearchSettings

        Returns:
            SearchResponse on success (including zero matches), SearchError otherwise
        """
        start = time.perf_counter()
        opts = options or self.default_options()

        invalid = self._validate(query)
        if invalid is not None:
            logger.info(
                "Search rejected",
                extra={"event": "search.request.rejected", "reason": invalid.details},
            )
            return invalid

        limit = min(opts.limit, self.settings.max_limit)

        with log_context(request_id=new_request_id(), query_length=len(query.strip())):
            logger.info(
                "Search started",
                extra={
                    "event": "search.request.started",
                    "limit": limit,
                    "exclude_unavailable": opts.exclude_unavailable,
                    "match_threshold": opts.match_threshold,
                },
            )
            try:
                result = self._run(query, opts, limit, start)
            except Exception as e:
                logger.error(
                    f"Unexpected search failure: {e}",
                    exc_info=True,
                    extra={"event": "search.request.failed", "error_type": type(e).__name__},
                )
                return SearchError(
                    "An unexpected error occurred during search",
                    SearchErrorCode.SEARCH_FAILED,
                    details=str(e) or type(e).__name__,
                )

            if isinstance(result, SearchResponse):
                logger.info(
                    "Search completed",
                    extra={
                        "event": "search.request.completed",
                        "total_matches": result.metadata.total_matches,
                        "returned_count": result.metadata.returned_count,
                        "duration_ms": result.metadata.search_time_ms,
                    },
                )
            return result

    def _validate(self, query: Any) -> Optional[SearchError]:
        if not isinstance(query, str) or not query.strip():
            return SearchError(
                "Query cannot be empty",
                SearchErrorCode.INVALID_QUERY,
                details="Please provide a search query",
            )
        if len(query.strip()) > self.settings.max_query_length:
            return SearchError(
                "Query is too long",
                SearchErrorCode.INVALID_QUERY,
                details=f"Queries are limited to {self.settings.max_query_length} characters",
            )
        return None

    def _run(self, query: str, opts: SearchOptions, limit: int, start: float) -> SearchResult:
        debug = SearchDebugInfo() if opts.include_debug else None

        if not self.vector_store.has_embeddings():
            logger.warning(
                "No profile embeddings available",
                extra={"event": "search.embeddings.unavailable"},
            )
            return SearchError(
                "No embeddings available. Please run the embedding enrichment first.",
                SearchErrorCode.NO_EMBEDDINGS_AVAILABLE,
                details="Run: python -m community_os.main enrich",
            )

        try:
            embedding = self.embedding_provider.embed(query)
        except Exception as e:
            logger.error(
                f"Query embedding failed: {e}",
                extra={"event": "search.embedding.failed", "error_type": type(e).__name__},
            )
            return SearchError(
                "Failed to generate query embedding",
                SearchErrorCode.EMBEDDING_FAILED,
                details=str(e) or type(e).__name__,
            )

        if debug is not None:
            debug.embedding_model = embedding.model
            debug.embedding_time_ms = embedding.time_ms

        try:
            retrieval_start = time.perf_counter()
            candidates = self._retrieve(embedding.vector, opts, limit)
            retrieval_ms = _elapsed_ms(retrieval_start)
        except Exception as e:
            logger.error(
                f"Similarity search failed: {e}",
                extra={"event": "search.retrieval.failed", "error_type": type(e).__name__},
            )
            return SearchError(
                "Failed to perform similarity search",
                SearchErrorCode.SEARCH_FAILED,
                details=str(e) or type(e).__name__,
            )

        logger.debug(
            "Candidates retrieved",
            extra={
                "event": "search.retrieval.completed",
                "candidates": len(candidates),
                "duration_ms": retrieval_ms,
            },
        )
        if debug is not None:
            debug.vector_search_time_ms = retrieval_ms
            debug.similarity_scores = [similarity for _, similarity in candidates]

        if opts.exclude_unavailable:
            candidates = [(p, s) for p, s in candidates if not p.is_unavailable]

        if not candidates:
            logger.info("No candidates matched", extra={"event": "search.results.empty"})
            return SearchResponse(
                explanation=NO_RESULTS_EXPLANATION,
                matches=[],
                metadata=SearchMetadata(
                    total_matches=0,
                    returned_count=0,
                    search_time_ms=_elapsed_ms(start),
                    query=query.strip(),
                ),
                debug=debug,
            )

        ranked = rerank_profiles(candidates, query)
        if debug is not None:
            debug.rerank_scores = [match.relevance_score for match in ranked]

        final = ranked[:limit]

        try:
            explanation = self.explainer.explain(query, final)
            explanation_text = explanation.explanation
            if debug is not None:
                debug.llm_model = explanation.model
                debug.llm_tokens_used = explanation.tokens_used
                debug.llm_time_ms = explanation.time_ms
        except Exception as e:
            logger.warning(
                f"Explanation generation failed, using fallback: {e}",
                extra={"event": "search.explanation.fallback", "error_type": type(e).__name__},
            )
            explanation_text = fallback_explanation(len(final))

        return SearchResponse(
            explanation=explanation_text,
            matches=final,
            metadata=SearchMetadata(
                total_matches=len(candidates),
                returned_count=len(final),
                search_time_ms=_elapsed_ms(start),
                query=query.strip(),
            ),
            debug=debug,
        )

    def _retrieve(
        self, vector: Sequence[float], opts: SearchOptions, limit: int
    ) -> List[Tuple[Profile, float]]:
        """Over-fetch at a relaxed threshold so re-ranking has headroom."""
        threshold = max(
            self.settings.min_threshold,
            opts.match_threshold - self.settings.threshold_margin,
        )
        rows = self.vector_store.retrieve(
            vector,
            limit=limit * self.settings.candidate_multiplier,
            threshold=threshold,
        )
        return [(profile, similarity) for profile, similarity in rows]
