"""Explanation text and response payloads for roulette matches."""

from typing import Any, Dict, List, Sequence

from community_os.domain.mapping import profile_to_payload
from community_os.domain.models import Profile

from .models import MatchResult

FALLBACK_EXPLANATION = "Potential interesting connection based on profiles"


def generate_explanation(
    candidate: Profile,
    shared_skills: Sequence[str],
    shared_interests: Sequence[str],
) -> str:
    """Build a short deterministic reason for suggesting ``candidate``.

    Examples:
        ["Rust"]                 -> "Both know Rust."
        ["Rust", "Go"]           -> "Share skills: Rust, Go."
        ["Rust", "Go", "C", "D"] -> "Share 4 skills including Rust, Go."
    """
    reasons: List[str] = []

    if len(shared_skills) == 1:
        reasons.append(f"Both know {shared_skills[0]}")
    elif 1 < len(shared_skills) <= 3:
        reasons.append(f"Share skills: {', '.join(shared_skills)}")
    elif len(shared_skills) > 3:
        reasons.append(
            f"Share {len(shared_skills)} skills including {', '.join(shared_skills[:2])}"
        )

    if len(shared_interests) == 1:
        reasons.append(f"Both interested in {shared_interests[0]}")
    elif len(shared_interests) > 1:
        reasons.append(f"Share interests: {', '.join(shared_interests[:3])}")

    if candidate.can_help or candidate.needs_help:
        reasons.append("Complementary skills and needs")

    if not reasons:
        return FALLBACK_EXPLANATION

    return ". ".join(reasons) + "."


def build_match_payload(match: MatchResult) -> Dict[str, Any]:
    """Caller-facing camelCase shape of one match."""
    return {
        "profile": profile_to_payload(match.profile),
        "score": match.score,
        "sharedSkills": list(match.shared_skills),
        "sharedInterests": list(match.shared_interests),
        "explanation": match.explanation,
    }
