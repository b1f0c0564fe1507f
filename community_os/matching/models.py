"""Data models for coffee roulette matching."""

from dataclasses import dataclass, field
from typing import List, Set

from community_os.config.models import MatchingSettings
from community_os.domain.models import Profile


@dataclass
class MatchResult:
    """One suggested connection.

    Attributes:
        profile: The candidate being suggested
        score: Sum of the four weighted components, in [0, 1]
        shared_skills: Skills both participants list, in the source's order
        shared_interests: Interests both participants list, in the source's order
        explanation: Template-generated reason for the suggestion
    """

    profile: Profile
    score: float
    shared_skills: List[str] = field(default_factory=list)
    shared_interests: List[str] = field(default_factory=list)
    explanation: str = ""


@dataclass
class MatchingOptions:
    exclude_ids: Set[int] = field(default_factory=set)
    exclude_unavailable: bool = True
    max_results: int = 3

    @classmethod
    def from_settings(cls, settings: MatchingSettings, **overrides) -> "MatchingOptions":
        options = cls(
            exclude_unavailable=settings.exclude_unavailable,
            max_results=settings.max_results,
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(options, key, value)
        options.exclude_ids = set(options.exclude_ids)
        return options


@dataclass
class ScoreBreakdown:
    """Per-component contributions for one pair, kept for logging and tests."""

    skills: float = 0.0
    interests: float = 0.0
    complementary: float = 0.0
    non_obvious: float = 0.0
    shared_skills: List[str] = field(default_factory=list)
    shared_interests: List[str] = field(default_factory=list)

    @property
    def total(self) -> float:
        return self.skills + self.interests + self.complementary + self.non_obvious
