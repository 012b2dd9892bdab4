"""Unit tests for domain models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from autosearch.domain.models import (
    CandidateProfile,
    JobDetails,
    JobPosting,
    LocationPreference,
    SalaryPreference,
    SearchPreferences,
)


class TestCandidateProfile:
    """Tests for CandidateProfile model."""

    def test_valid_profile(self):
        profile = CandidateProfile(
            id=" cand-001 ",
            job_title="  Data Engineer ",
            skills=[" Python", "", "SQL ", None],
            city="  ",
        )

        assert profile.id == "cand-001"
        assert profile.job_title == "Data Engineer"
        assert profile.skills == ["Python", "SQL"]
        assert profile.city is None

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            CandidateProfile(id="   ")

    def test_negative_salary_rejected(self):
        with pytest.raises(ValidationError):
            CandidateProfile(id="cand-001", salary_expectation_min=-1)

    def test_schema_example_is_valid(self):
        example = CandidateProfile.model_config["json_schema_extra"]["example"]
        assert CandidateProfile(**example).skills == ["Python", "SQL", "Airflow"]


class TestSearchPreferences:
    """Tests for SearchPreferences and its nested models."""

    def test_defaults(self):
        prefs = SearchPreferences(candidate_id="cand-001")

        assert prefs.job_titles == []
        assert prefs.location is None
        assert prefs.salary is None
        assert prefs.top_k == 20

    def test_lists_are_cleaned(self):
        prefs = SearchPreferences(
            candidate_id="cand-001",
            job_titles=[" Data Engineer ", ""],
            employment_types=["permanent", " "],
            work_arrangements=None,
        )
        assert prefs.job_titles == ["Data Engineer"]
        assert prefs.employment_types == ["permanent"]
        assert prefs.work_arrangements == []

    @pytest.mark.parametrize("top_k", [0, 501])
    def test_top_k_bounds(self, top_k):
        with pytest.raises(ValidationError):
            SearchPreferences(candidate_id="cand-001", top_k=top_k)

    def test_location_coordinates(self):
        assert LocationPreference(latitude=-33.9, longitude=18.4).has_coordinates is True
        assert LocationPreference(latitude=-33.9).has_coordinates is False

    @pytest.mark.parametrize(
        "values",
        [{"latitude": 91}, {"longitude": -181}, {"radius_km": 0}],
    )
    def test_location_ranges(self, values):
        with pytest.raises(ValidationError):
            LocationPreference(**values)

    def test_salary_defaults_to_soft(self):
        assert SalaryPreference(min=40000).enforce is False

    def test_schema_example_is_valid(self):
        example = SearchPreferences.model_config["json_schema_extra"]["example"]
        prefs = SearchPreferences(**example)
        assert prefs.salary.enforce is True
        assert prefs.location.radius_km == 40


class TestJobPosting:
    """Tests for JobPosting and JobDetails models."""

    def _job(self, **overrides):
        values = {
            "id": "job-001",
            "title": "Data Engineer",
            "created_at": datetime(2025, 11, 1, 8, 0, tzinfo=timezone.utc),
        }
        values.update(overrides)
        return JobPosting(**values)

    def test_minimal_job(self):
        job = self._job(company="  ", employment_type=" permanent ")

        assert job.company is None
        assert job.employment_type == "permanent"
        assert job.details == JobDetails()

    def test_naive_created_at_becomes_utc(self):
        job = self._job(created_at=datetime(2025, 11, 1, 8, 0))
        assert job.created_at.tzinfo == timezone.utc

    def test_created_at_is_converted_to_utc(self):
        sast = timezone(timedelta(hours=2))
        job = self._job(created_at=datetime(2025, 11, 1, 10, 0, tzinfo=sast))
        assert job.created_at == datetime(2025, 11, 1, 8, 0, tzinfo=timezone.utc)

    def test_iso_string_created_at(self):
        job = self._job(created_at="2025-11-01T08:00:00Z")
        assert job.created_at == datetime(2025, 11, 1, 8, 0, tzinfo=timezone.utc)

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            self._job(title=" ")

    def test_job_is_immutable(self):
        job = self._job()
        with pytest.raises(ValidationError):
            job.title = "Something else"

    def test_details_skills(self):
        details = JobDetails(required_skills=["Python", " "], nice_to_have_skills=["dbt"])
        assert details.all_skills == ["Python", "dbt"]
        assert details.has_coordinates is False

    def test_details_salary_non_negative(self):
        with pytest.raises(ValidationError):
            JobDetails(salary_min=-5)

    def test_schema_example_is_valid(self):
        example = JobPosting.model_config["json_schema_extra"]["example"]
        job = JobPosting(**example)
        assert job.details.has_coordinates is True
        assert job.details.required_skills == ["Python", "SQL", "AWS"]
