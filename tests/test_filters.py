"""Unit tests for hard filters."""

import logging

from autosearch.domain.models import LocationPreference, SalaryPreference
from autosearch.matching.filters import (
    apply_hard_filters,
    candidate_salary_bounds,
    exclusion_reason,
    job_distance_km,
)
from tests.helpers import make_job, make_preferences, make_profile

CAPE_TOWN = {"latitude": -33.9249, "longitude": 18.4241}
STELLENBOSCH = {"latitude": -33.9321, "longitude": 18.8602}  # ~40 km from Cape Town
JOHANNESBURG = {"latitude": -26.2041, "longitude": 28.0473}


class TestEmploymentTypeFilter:
    """Tests for the employment type allow-list."""

    def test_no_allow_list_keeps_everything(self):
        job = make_job(employment_type=None)
        assert exclusion_reason(job, make_profile(), make_preferences()) is None

    def test_allowed_type_is_kept_case_insensitively(self):
        job = make_job(employment_type="Permanent")
        prefs = make_preferences(employment_types=["permanent", "contract"])
        assert exclusion_reason(job, make_profile(), prefs) is None

    def test_disallowed_type_is_excluded(self):
        job = make_job(employment_type="internship")
        prefs = make_preferences(employment_types=["permanent"])
        assert exclusion_reason(job, make_profile(), prefs).startswith(
            "employment_type_not_allowed"
        )

    def test_missing_type_is_excluded(self):
        job = make_job(employment_type=None)
        prefs = make_preferences(employment_types=["permanent"])
        assert exclusion_reason(job, make_profile(), prefs) == "employment_type_missing"


class TestRadiusFilter:
    """Tests for the enforced radius."""

    def _location(self, **overrides):
        data = {**CAPE_TOWN, "radius_km": 25, "enforce_radius": True}
        data.update(overrides)
        return LocationPreference(**data)

    def test_far_job_is_excluded_when_enforced(self):
        job = make_job(details=JOHANNESBURG)
        prefs = make_preferences(location=self._location())
        assert exclusion_reason(job, make_profile(), prefs).startswith("outside_radius")

    def test_far_job_is_kept_when_not_enforced(self):
        job = make_job(details=JOHANNESBURG)
        prefs = make_preferences(location=self._location(enforce_radius=False))
        assert exclusion_reason(job, make_profile(), prefs) is None

    def test_job_inside_radius_is_kept(self):
        job = make_job(details=STELLENBOSCH)
        prefs = make_preferences(location=self._location(radius_km=60))
        assert exclusion_reason(job, make_profile(), prefs) is None

    def test_default_radius_applies_without_radius(self):
        job = make_job(details=STELLENBOSCH)
        prefs = make_preferences(location=self._location(radius_km=None))

        assert exclusion_reason(job, make_profile(), prefs, default_radius_km=50) is None
        assert exclusion_reason(job, make_profile(), prefs, default_radius_km=10) is not None

    def test_job_without_coordinates_is_kept(self):
        job = make_job(details={})
        prefs = make_preferences(location=self._location())
        assert exclusion_reason(job, make_profile(), prefs) is None

    def test_distance_requires_both_coordinates(self):
        prefs = make_preferences(location=LocationPreference(city="Cape Town"))
        assert job_distance_km(prefs, make_job(details=JOHANNESBURG)) is None


class TestSalaryFilter:
    """Tests for the enforced salary band."""

    def test_zero_overlap_is_excluded_when_enforced(self):
        job = make_job(details={"salary_min": 20000, "salary_max": 25000})
        prefs = make_preferences(salary=SalaryPreference(min=40000, max=50000, enforce=True))
        assert exclusion_reason(job, make_profile(), prefs).startswith("salary_misaligned")

    def test_zero_overlap_is_kept_when_not_enforced(self):
        job = make_job(details={"salary_min": 20000, "salary_max": 25000})
        prefs = make_preferences(salary=SalaryPreference(min=40000, max=50000))
        assert exclusion_reason(job, make_profile(), prefs) is None

    def test_overlap_is_kept_when_enforced(self):
        job = make_job(details={"salary_min": 35000, "salary_max": 45000})
        prefs = make_preferences(salary=SalaryPreference(min=40000, max=50000, enforce=True))
        assert exclusion_reason(job, make_profile(), prefs) is None

    def test_job_without_salary_is_kept_when_enforced(self):
        job = make_job(details={})
        prefs = make_preferences(salary=SalaryPreference(min=40000, max=50000, enforce=True))
        assert exclusion_reason(job, make_profile(), prefs) is None

    def test_profile_expectation_fills_missing_bounds(self):
        profile = make_profile(salary_expectation_min=40000, salary_expectation_max=50000)
        prefs = make_preferences(salary=SalaryPreference(enforce=True))
        assert candidate_salary_bounds(profile, prefs) == (40000, 50000)

        job = make_job(details={"salary_min": 20000, "salary_max": 25000})
        assert exclusion_reason(job, profile, prefs) is not None

    def test_preference_band_is_not_mixed_with_profile(self):
        profile = make_profile(salary_expectation_min=35000)
        prefs = make_preferences(salary=SalaryPreference(max=30000, enforce=True))
        assert candidate_salary_bounds(profile, prefs) == (None, 30000)

        job = make_job(details={"salary_min": 20000, "salary_max": 25000})
        assert exclusion_reason(job, profile, prefs) is None


class TestApplyHardFilters:
    """Tests for filtering a retrieved list."""

    def test_preserves_order_of_survivors(self):
        jobs = [
            make_job("job-1"),
            make_job("job-2", employment_type="contract"),
            make_job("job-3"),
        ]
        prefs = make_preferences(employment_types=["permanent"])
        kept = apply_hard_filters(jobs, make_profile(), prefs)
        assert [job.id for job in kept] == ["job-1", "job-3"]

    def test_logs_excluded_jobs(self, caplog):
        jobs = [make_job("job-9", employment_type="contract")]
        prefs = make_preferences(employment_types=["permanent"])

        with caplog.at_level(logging.DEBUG, logger="autosearch.matching.filters"):
            apply_hard_filters(jobs, make_profile(), prefs)

        records = [r for r in caplog.records if getattr(r, "event", None) == "filter.job.excluded"]
        assert len(records) == 1
        assert records[0].job_id == "job-9"
