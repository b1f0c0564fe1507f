"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are legal but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    search = config_dict.get("search", {})
    if isinstance(search, dict):
        threshold = search.get("match_threshold")
        if isinstance(threshold, (int, float)) and threshold < 0.15:
            warning_messages.append(
                f"Very low search.match_threshold ({threshold}) will return weakly related profiles"
            )

        multiplier = search.get("candidate_multiplier")
        if isinstance(multiplier, int) and multiplier > 20:
            warning_messages.append(
                f"Large search.candidate_multiplier ({multiplier}) may slow down re-ranking"
            )

    matching = config_dict.get("matching", {})
    if isinstance(matching, dict) and matching.get("exclude_unavailable") is False:
        warning_messages.append(
            "matching.exclude_unavailable is false; roulette may suggest people in deep work mode"
        )

    openai = config_dict.get("openai", {})
    if isinstance(openai, dict):
        dimensions = openai.get("embedding_dimensions")
        if isinstance(dimensions, int) and dimensions != 1536:
            warning_messages.append(
                f"openai.embedding_dimensions is {dimensions}; stored embeddings of a different "
                "size will never match"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
