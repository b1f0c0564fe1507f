"""Pairwise compatibility scoring for coffee roulette.

Score components and their ceilings:

    skills          0.4   Jaccard overlap of primary + parsed skills
    interests       0.3   shared interests over the longer interest list
    complementary   0.2   one side can help with what the other needs (both ways)
    non_obvious     0.1   same startup stage / startup status / looking-for overlap

Scoring is deterministic. "Roulette" refers to spinning again with the
previous suggestions excluded, see RouletteSession.
"""

from typing import Iterable, List, Optional, Sequence, Set, Tuple

from community_os.config.models import MatchingSettings
from community_os.domain.models import Profile
from community_os.logging import get_logger
from community_os.logging.context import log_context, new_request_id

from .models import MatchingOptions, MatchResult, ScoreBreakdown
from .utils import generate_explanation

logger = get_logger(__name__, component="matching")

SKILL_WEIGHT = 0.4
INTEREST_WEIGHT = 0.3
COMPLEMENTARY_STEP = 0.1
COMPLEMENTARY_CAP = 0.2
# Fraction of the shorter token list that must overlap
COMPLEMENTARY_MIN_OVERLAP = 0.3
SAME_STAGE_BONUS = 0.05
SAME_STARTUP_STATUS_BONUS = 0.02
SHARED_LOOKING_FOR_BONUS = 0.03
NON_OBVIOUS_CAP = 0.1
MIN_MATCH_SCORE = 0.1


def _dedupe(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def skill_overlap(source: Profile, candidate: Profile) -> Tuple[float, List[str]]:
    """Jaccard similarity of combined skill sets, weighted to 0.4."""
    skills_a = source.all_skills
    skills_b = candidate.all_skills

    set_b = set(skills_b)
    shared = [skill for skill in skills_a if skill in set_b]
    total = len(set(skills_a) | set_b)

    score = (len(shared) / total) * SKILL_WEIGHT if total else 0.0
    return score, shared


def interest_overlap(source: Profile, candidate: Profile) -> Tuple[float, List[str]]:
    interests_a = _dedupe(source.interests)
    interests_b = _dedupe(candidate.interests)

    set_b = set(interests_b)
    shared = [interest for interest in interests_a if interest in set_b]
    longest = max(len(interests_a), len(interests_b))

    score = (len(shared) / longest) * INTEREST_WEIGHT if longest else 0.0
    return score, shared


def _helps_with(can_help: str, needs_help: str) -> bool:
    """Whitespace-token overlap between an offer and a need.

    No stop-word filtering is applied, so common words count as overlap.
    """
    if not can_help or not needs_help:
        return False

    offered = can_help.lower().split()
    needed = needs_help.lower().split()
    needed_set = set(needed)

    overlap = sum(1 for token in offered if token in needed_set)
    return overlap > 0 and overlap >= min(len(offered), len(needed)) * COMPLEMENTARY_MIN_OVERLAP


def complementary_score(source: Profile, candidate: Profile) -> float:
    score = 0.0
    if _helps_with(source.can_help, candidate.needs_help):
        score += COMPLEMENTARY_STEP
    if _helps_with(candidate.can_help, source.needs_help):
        score += COMPLEMENTARY_STEP
    return min(score, COMPLEMENTARY_CAP)


def non_obvious_score(source: Profile, candidate: Profile) -> float:
    score = 0.0
    if source.startup_stage and source.startup_stage == candidate.startup_stage:
        score += SAME_STAGE_BONUS
    if source.has_startup == candidate.has_startup:
        score += SAME_STARTUP_STATUS_BONUS
    if set(source.looking_for) & set(candidate.looking_for):
        score += SHARED_LOOKING_FOR_BONUS
    return min(score, NON_OBVIOUS_CAP)


def score_pair(source: Profile, candidate: Profile) -> ScoreBreakdown:
    skills, shared_skills = skill_overlap(source, candidate)
    interests, shared_interests = interest_overlap(source, candidate)
    return ScoreBreakdown(
        skills=skills,
        interests=interests,
        complementary=complementary_score(source, candidate),
        non_obvious=non_obvious_score(source, candidate),
        shared_skills=shared_skills,
        shared_interests=shared_interests,
    )


class PairwiseMatcher:
    """Ranks a candidate pool by compatibility with one source profile."""

    def __init__(self, settings: Optional[MatchingSettings] = None):
        self.settings = settings or MatchingSettings()

    def default_options(self, **overrides) -> MatchingOptions:
        return MatchingOptions.from_settings(self.settings, **overrides)

    def find_matches(
        self,
        source: Profile,
        pool: Sequence[Profile],
        options: Optional[MatchingOptions] = None,
    ) -> List[MatchResult]:
        """Return the best matches for ``source``, highest score first.

        Skips the source itself, excluded ids and (when exclude_unavailable is
        set) candidates whose status is red. Only candidates scoring above 0.1
        are returned, at most max_results of them; equal scores are ordered by
        profile id.
        """
        opts = options or self.default_options()
        excluded = set(opts.exclude_ids)

        matches: List[MatchResult] = []
        skipped = 0
        for candidate in pool:
            if candidate.id == source.id or candidate.id in excluded:
                skipped += 1
                continue
            if opts.exclude_unavailable and candidate.is_unavailable:
                skipped += 1
                continue

            breakdown = score_pair(source, candidate)
            if breakdown.total <= MIN_MATCH_SCORE:
                continue

            matches.append(
                MatchResult(
                    profile=candidate,
                    score=breakdown.total,
                    shared_skills=breakdown.shared_skills,
                    shared_interests=breakdown.shared_interests,
                    explanation=generate_explanation(
                        candidate, breakdown.shared_skills, breakdown.shared_interests
                    ),
                )
            )

        matches.sort(key=lambda match: (-match.score, match.profile.id))
        results = matches[: opts.max_results]

        logger.info(
            "Matching completed",
            extra={
                "event": "matching.completed",
                "profile_id": source.id,
                "pool_size": len(pool),
                "skipped": skipped,
                "qualified": len(matches),
                "returned": len(results),
            },
        )
        return results


def find_matches(
    source: Profile,
    pool: Sequence[Profile],
    options: Optional[MatchingOptions] = None,
) -> List[MatchResult]:
    """Convenience wrapper using default matching settings."""
    return PairwiseMatcher().find_matches(source, pool, options)


class RouletteSession:
    """Repeated spins for one participant that never repeat a suggestion.

    Example:
        >>> session = RouletteSession(PairwiseMatcher(), me)
        >>> first = session.spin(everyone)
        >>> second = session.spin(everyone)  # excludes everyone in ``first``
    """

    def __init__(self, matcher: PairwiseMatcher, source_profile: Profile):
        self.matcher = matcher
        self.source_profile = source_profile
        self.seen_ids: Set[int] = set()
        self.spins = 0
        self.request_id = new_request_id()

    def spin(
        self,
        pool: Sequence[Profile],
        options: Optional[MatchingOptions] = None,
    ) -> List[MatchResult]:
        opts = options or self.matcher.default_options()
        opts = MatchingOptions(
            exclude_ids=set(opts.exclude_ids) | self.seen_ids,
            exclude_unavailable=opts.exclude_unavailable,
            max_results=opts.max_results,
        )

        self.spins += 1
        with log_context(
            request_id=self.request_id,
            profile_id=self.source_profile.id,
            spin=self.spins,
        ):
            results = self.matcher.find_matches(self.source_profile, pool, opts)

            if not results:
                logger.info(
                    "Roulette exhausted",
                    extra={"event": "matching.roulette.exhausted", "excluded": len(self.seen_ids)},
                )

        self.seen_ids.update(match.profile.id for match in results)
        return results

    def reset(self) -> None:
        self.seen_ids.clear()
        self.spins = 0
