"""Utility functions for time handling and text normalization."""

from .text import normalize_term, normalize_terms, truncate_text
from .timestamps import (
    age_in_days,
    ensure_utc,
    format_timestamp,
    utc_now,
)

__all__ = [
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "age_in_days",
    # Text
    "normalize_term",
    "normalize_terms",
    "truncate_text",
]
