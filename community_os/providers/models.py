"""Result objects returned by providers."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class EmbeddingResult:
    vector: List[float]
    model: str
    time_ms: int


@dataclass
class ExplanationResult:
    """Natural-language summary of a result set."""

    explanation: str
    model: str
    tokens_used: Optional[int]
    time_ms: int


@dataclass
class IntroResult:
    message: str
    model: str
    tokens_used: Optional[int]
