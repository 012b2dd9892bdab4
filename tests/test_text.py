"""Unit tests for text helpers."""

import pytest

from autosearch.utils.text import normalize_term, normalize_terms, truncate_text


class TestNormalizeTerm:
    """Tests for normalize_term function."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Python", "python"),
            ("  Machine   Learning ", "machine learning"),
            ("SQL\tServer", "sql server"),
            ("", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_term(raw) == expected


class TestNormalizeTerms:
    """Tests for normalize_terms function."""

    def test_drops_empty_and_none(self):
        assert normalize_terms(["Python", "  ", None, "SQL "]) == ["python", "sql"]

    def test_keeps_order_and_duplicates(self):
        assert normalize_terms(["SQL", "python", "sql"]) == ["sql", "python", "sql"]

    def test_none_input(self):
        assert normalize_terms(None) == []


class TestTruncateText:
    """Tests for truncate_text function."""

    def test_short_text_unchanged(self):
        assert truncate_text("Strong SQL match", max_length=50) == "Strong SQL match"

    def test_breaks_at_word_boundary(self):
        result = truncate_text("This is a very long text that needs truncating", max_length=30)
        assert result == "This is a very long text..."

    def test_never_exceeds_max_length(self):
        text = "x" * 200
        result = truncate_text(text, max_length=40)
        assert len(result) == 40
        assert result.endswith("...")

    def test_tiny_max_length(self):
        assert truncate_text("abcdef", max_length=2) == ".."

    def test_empty_text(self):
        assert truncate_text("", max_length=5) == ""
