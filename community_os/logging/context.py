"""Request-scoped logging context.

Fields pushed here (request_id, profile_id, ...) are attached to every log
record emitted while the scope is active. Backed by contextvars so concurrent
requests served from different threads or tasks never see each other's fields.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator
from uuid import uuid4

_log_context: ContextVar[Dict[str, Any]] = ContextVar("community_os_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(_log_context.get())


def push_log_context(**fields: Any) -> Token:
    """Layer new fields over the current context.

    Returns:
        Token to hand back to pop_log_context() to restore the previous state
    """
    return _log_context.set({**_log_context.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by push_log_context()."""
    _log_context.reset(token)


def clear_log_context() -> None:
    """Drop every field. Mostly useful in tests."""
    _log_context.set({})


def new_request_id() -> str:
    """Short random identifier used to correlate the records of one request."""
    return uuid4().hex[:12]


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Scope fields to a with-block, restoring the outer context on exit.

    Example:
        >>> with log_context(request_id=new_request_id(), profile_id=42):
        ...     logger.info("Spinning roulette")
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
