"""Structured logging helpers shared by the search and matching services."""

import logging
from typing import Optional


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges a fixed component field into per-call extras."""

    def process(self, msg, kwargs):
        """Merge adapter extra with call extra (call wins on conflicts)."""
        extra = kwargs.get("extra", {})
        kwargs["extra"] = {**self.extra, **extra}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Get a logger, optionally tagging every record with a component name.

    Args:
        name: Logger name (typically __name__)
        component: Optional component identifier such as "search" or "matching"

    Returns:
        Logger or ComponentLoggerAdapter instance

    Example:
        >>> logger = get_logger(__name__, component="search")
        >>> logger.info("Search started", extra={"event": "search.request.started"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
