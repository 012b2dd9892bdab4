"""Text helpers shared by scoring, re-ranking and result formatting."""

import re
from typing import Iterable, List


def normalize_term(term: str) -> str:
    """Normalize a skill or title for case-insensitive comparison.

    Lowercases, trims and collapses inner whitespace.

    Example:
        >>> normalize_term("  Machine   Learning ")
        'machine learning'
    """
    return re.sub(r"\s+", " ", term.strip().lower())


def normalize_terms(terms: Iterable[str]) -> List[str]:
    """Normalize a sequence of terms, dropping empty ones (order preserved)."""
    normalized = []
    for term in terms or []:
        if term is None:
            continue
        value = normalize_term(str(term))
        if value:
            normalized.append(value)
    return normalized


def truncate_text(text: str, max_length: int = 500, suffix: str = "...") -> str:
    """Truncate text to maximum length, adding suffix if truncated.

    Tries to break at word boundaries for cleaner truncation. The result is
    never longer than ``max_length``.

    Args:
        text: Text to truncate
        max_length: Maximum length (including suffix)
        suffix: Suffix to add if truncated (default: ...)

    Returns:
        Truncated text with suffix if needed

    Example:
        >>> truncate_text("This is a very long text that needs truncating", max_length=30)
        'This is a very long text...'
    """
    if not text or len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)

    if truncate_at <= 0:
        return suffix[:max_length]

    truncated = text[:truncate_at]

    # Only use the last space if it's not too far back
    last_space = truncated.rfind(" ")
    if last_space > truncate_at * 0.8:
        truncated = truncated[:last_space]

    return truncated.rstrip() + suffix
