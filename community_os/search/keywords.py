"""Query tokenization for keyword re-ranking."""

import re
from typing import FrozenSet, Set

STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
        "with", "by", "who", "here", "people", "show", "me", "find", "are", "can",
        "has", "have", "need", "needs", "help", "helps", "working", "looking",
        "interested",
    }
)

# Tokens of this length or shorter are dropped
MIN_TOKEN_LENGTH = 2

_SPLIT_PATTERN = re.compile(r"\W+")


def extract_keywords(query: str) -> Set[str]:
    """Lowercase ``query``, split on non-word characters and drop noise.

    Short tokens and stop words are removed. No stemming is applied.

    Example:
        >>> sorted(extract_keywords("Who here knows Rust and likes hiking?"))
        ['hiking', 'knows', 'likes', 'rust']
    """
    if not query:
        return set()

    return {
        token
        for token in _SPLIT_PATTERN.split(query.lower())
        if len(token) > MIN_TOKEN_LENGTH and token not in STOP_WORDS
    }


def contains_any(text: str, keywords: Set[str]) -> bool:
    """Case-insensitive substring test for any keyword."""
    if not text or not keywords:
        return False
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)
