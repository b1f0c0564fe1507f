"""Coffee roulette: pairwise matching of participants."""

from .engine import PairwiseMatcher, RouletteSession, find_matches, score_pair
from .models import MatchingOptions, MatchResult, ScoreBreakdown
from .utils import FALLBACK_EXPLANATION, build_match_payload, generate_explanation

__all__ = [
    "PairwiseMatcher",
    "RouletteSession",
    "find_matches",
    "score_pair",
    "MatchResult",
    "MatchingOptions",
    "ScoreBreakdown",
    "generate_explanation",
    "build_match_payload",
    "FALLBACK_EXPLANATION",
]
