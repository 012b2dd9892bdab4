"""Scoped metadata for structured logging.

Fields pushed here (``run_id``, ``candidate_id``, ...) are stamped onto every
log record emitted inside the scope by ``ContextualFilter``. Storage is a
``ContextVar``, so scopes are isolated per thread and per task.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("autosearch_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(LogContextVar.get())


def push_log_context(**fields: Any) -> Token:
    """Merge fields into the current context.

    Args:
        **fields: Fields to add (existing keys are overridden)

    Returns:
        Token for ``pop_log_context``

    Example:
        >>> token = push_log_context(run_id="3f2a", candidate_id="cand-001")
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before the matching push."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field (used by tests)."""
    LogContextVar.set({})


class log_context:
    """Context manager that scopes logging fields to a block.

    Example:
        >>> with log_context(run_id="3f2a", candidate_id="cand-001"):
        ...     logger.info("Matching started")  # carries run_id and candidate_id
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
