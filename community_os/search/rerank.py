"""Keyword re-ranking of vector search candidates.

Embedding similarity is good at topical closeness but weak at exact skill
hits ("computer vision"), so each candidate earns a bounded keyword boost
from its structured fields and the two signals are blended.
"""

from typing import Iterable, List, Set, Tuple

from community_os.domain.models import Profile

from .keywords import contains_any, extract_keywords
from .models import MatchedFields, SearchMatch

EXACT_PHRASE_SKILL_WEIGHT = 0.4
KEYWORD_SKILL_WEIGHT = 0.2
SKILL_RATIO_FACTOR = 0.5
INTEREST_CAP = 0.15
INTEREST_RATIO_FACTOR = 0.2
CAN_HELP_BOOST = 0.1
NEEDS_HELP_BOOST = 0.1
BIO_BOOST = 0.05
ENHANCED_BIO_BOOST = 0.05
STARTUP_BOOST = 0.1
STARTUP_NAME_BOOST = 0.05
MAX_BOOST = 0.5

BIO_SNIPPET_LENGTH = 100
STARTUP_KEYWORDS = frozenset({"startup", "founder", "funding", "fundraising"})

# Above this boost a keyword hit is trusted as much as the embedding
STRONG_BOOST_THRESHOLD = 0.3
STRONG_KEYWORD_WEIGHT = 0.5
DEFAULT_KEYWORD_WEIGHT = 0.3


def calculate_keyword_boost(
    profile: Profile,
    keywords: Set[str],
    similarity: float = 0.0,
    query: str = "",
) -> Tuple[float, MatchedFields]:
    """Score how well a profile's structured fields match the query.

    Args:
        profile: Candidate profile
        keywords: Output of extract_keywords(query)
        similarity: Raw vector similarity; not used in the boost itself
        query: Untokenized query, used for the exact-phrase skill check

    Returns:
        (boost in [0, 0.5], matched fields)
    """
    matched = MatchedFields()
    boost = 0.0

    all_skills = profile.all_skills
    phrase = query.strip().lower()

    # A skill containing the whole query outranks scattered keyword hits
    phrase_matches = [s for s in all_skills if phrase in s.lower()] if phrase else []
    if phrase_matches:
        matched.skills = phrase_matches
        base = EXACT_PHRASE_SKILL_WEIGHT
    else:
        matched.skills = [s for s in all_skills if contains_any(s, keywords)]
        base = KEYWORD_SKILL_WEIGHT

    if matched.skills:
        ratio = len(matched.skills) / max(len(all_skills), 1)
        boost += min(base, ratio * SKILL_RATIO_FACTOR)

    matched.interests = [i for i in profile.interests if contains_any(i, keywords)]
    if matched.interests:
        ratio = len(matched.interests) / len(profile.interests)
        boost += min(INTEREST_CAP, ratio * INTEREST_RATIO_FACTOR)

    if contains_any(profile.can_help, keywords):
        matched.can_help = True
        boost += CAN_HELP_BOOST

    if contains_any(profile.needs_help, keywords):
        matched.needs_help = True
        boost += NEEDS_HELP_BOOST

    if contains_any(profile.bio, keywords):
        matched.bio = profile.bio[:BIO_SNIPPET_LENGTH]
        boost += BIO_BOOST

    if contains_any(profile.enhanced_bio, keywords):
        if matched.bio is None:
            matched.bio = profile.enhanced_bio[:BIO_SNIPPET_LENGTH]
        boost += ENHANCED_BIO_BOOST

    if keywords & STARTUP_KEYWORDS:
        if profile.has_startup:
            boost += STARTUP_BOOST
        if profile.startup_name:
            boost += STARTUP_NAME_BOOST

    return min(boost, MAX_BOOST), matched


def combine_scores(similarity: float, boost: float) -> float:
    """Blend similarity and boost, shifting weight to keywords on strong hits."""
    keyword_weight = (
        STRONG_KEYWORD_WEIGHT if boost > STRONG_BOOST_THRESHOLD else DEFAULT_KEYWORD_WEIGHT
    )
    similarity_weight = 1 - keyword_weight
    return min(1.0, similarity * similarity_weight + boost * keyword_weight)


def rerank_profiles(
    candidates: Iterable[Tuple[Profile, float]],
    query: str,
) -> List[SearchMatch]:
    """Re-score (profile, similarity) pairs and sort them.

    Every candidate is returned. Order is relevance descending, ties broken
    by profile id ascending so the result does not depend on input order.
    """
    keywords = extract_keywords(query)

    ranked = []
    for profile, similarity in candidates:
        boost, matched = calculate_keyword_boost(profile, keywords, similarity, query)
        ranked.append(
            SearchMatch(
                profile=profile,
                relevance_score=combine_scores(similarity, boost),
                matched_fields=matched,
                similarity_score=similarity,
            )
        )

    ranked.sort(key=lambda match: (-match.relevance_score, match.profile.id))
    return ranked
