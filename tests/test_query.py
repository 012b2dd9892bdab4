"""Unit tests for query text composition."""

from autosearch.domain.models import LocationPreference
from autosearch.matching.query import compose_query_text
from tests.helpers import make_preferences, make_profile


class TestComposeQueryText:
    """Tests for compose_query_text."""

    def test_profile_only(self):
        profile = make_profile(experience_level="senior")
        text = compose_query_text(profile, make_preferences())
        assert text.splitlines() == [
            "Current role: Data Engineer",
            "Skills: Python, SQL",
            "Experience level: senior",
            "Located in: Cape Town",
        ]

    def test_preferences_take_priority(self):
        profile = make_profile(experience_level="intermediate")
        preferences = make_preferences(
            job_titles=["Analytics Engineer", "Data Engineer"],
            seniority_target="senior",
            location=LocationPreference(city="Johannesburg"),
            employment_types=["permanent"],
            work_arrangements=["hybrid", "remote"],
        )
        text = compose_query_text(profile, preferences)
        assert text.splitlines() == [
            "Looking for: Analytics Engineer, Data Engineer",
            "Skills: Python, SQL",
            "Seniority level: senior",
            "Preferred location: Johannesburg",
            "Employment type: permanent",
            "Work arrangement: hybrid, remote",
        ]

    def test_location_without_city_falls_back_to_profile(self):
        preferences = make_preferences(
            location=LocationPreference(latitude=-33.9, longitude=18.4, radius_km=30)
        )
        text = compose_query_text(make_profile(), preferences)
        assert "Located in: Cape Town" in text

    def test_empty_fields_are_skipped(self):
        profile = make_profile(job_title=None, skills=[], city=None)
        assert compose_query_text(profile, make_preferences()) == ""

    def test_deterministic(self):
        profile = make_profile()
        preferences = make_preferences(job_titles=["Data Engineer"])
        assert compose_query_text(profile, preferences) == compose_query_text(
            profile, preferences
        )
