"""Agentic search: keyword extraction, re-ranking and the search pipeline."""

from .keywords import STOP_WORDS, extract_keywords
from .models import (
    NO_RESULTS_EXPLANATION,
    MatchedFields,
    SearchDebugInfo,
    SearchError,
    SearchErrorCode,
    SearchMatch,
    SearchMetadata,
    SearchOptions,
    SearchResponse,
    SearchResult,
    is_search_error,
)
from .orchestrator import AgenticSearch, fallback_explanation
from .rerank import calculate_keyword_boost, combine_scores, rerank_profiles

__all__ = [
    "AgenticSearch",
    "extract_keywords",
    "STOP_WORDS",
    "calculate_keyword_boost",
    "combine_scores",
    "rerank_profiles",
    "fallback_explanation",
    "NO_RESULTS_EXPLANATION",
    "SearchOptions",
    "SearchResponse",
    "SearchError",
    "SearchErrorCode",
    "SearchResult",
    "SearchMatch",
    "SearchMetadata",
    "SearchDebugInfo",
    "MatchedFields",
    "is_search_error",
]
