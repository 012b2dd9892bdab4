"""Auto Search: rank job postings for a candidate."""

__version__ = "0.1.0"
