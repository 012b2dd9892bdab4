"""Hard filters applied to retrieved jobs before heuristic scoring.

A hard filter removes a job outright instead of lowering its score:
- Employment type allow-list (when preferences list any types)
- Radius (only when the location preference enforces it)
- Salary band (only when the salary preference enforces it)
"""

import logging
from typing import List, Optional, Sequence, Tuple

from autosearch.domain.models import CandidateProfile, JobPosting, SearchPreferences
from autosearch.utils.text import normalize_term, normalize_terms

from .scoring import haversine_km, salary_alignment

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 50.0

# Enforced salary bands exclude jobs whose alignment falls below this
MIN_ENFORCED_SALARY_ALIGNMENT = 0.5


def candidate_salary_bounds(
    profile: CandidateProfile, preferences: SearchPreferences
) -> Tuple[Optional[float], Optional[float]]:
    """Candidate salary band, taken as a unit.

    The preference band is used when it sets either bound; otherwise the
    profile's expectation pair. Bounds are never mixed across the two sources.
    """
    salary = preferences.salary
    if salary is not None and (salary.min is not None or salary.max is not None):
        return salary.min, salary.max
    return profile.salary_expectation_min, profile.salary_expectation_max


def job_distance_km(preferences: SearchPreferences, job: JobPosting) -> Optional[float]:
    """Distance between the preferred location and the job, if both have coordinates."""
    location = preferences.location
    if location is None or not location.has_coordinates or not job.details.has_coordinates:
        return None
    return haversine_km(
        location.latitude, location.longitude, job.details.latitude, job.details.longitude
    )


def exclusion_reason(
    job: JobPosting,
    profile: CandidateProfile,
    preferences: SearchPreferences,
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> Optional[str]:
    """Return why a job violates a hard constraint, or None if it passes.

    Args:
        job: Retrieved job
        profile: Candidate profile (salary fallback)
        preferences: Candidate search preferences
        default_radius_km: Radius used when an enforced preference sets none

    Returns:
        Short reason string, or None when the job is kept
    """
    allowed_types = set(normalize_terms(preferences.employment_types))
    if allowed_types:
        if not job.employment_type:
            return "employment_type_missing"
        if normalize_term(job.employment_type) not in allowed_types:
            return f"employment_type_not_allowed: {job.employment_type}"

    location = preferences.location
    if location is not None and location.enforce_radius:
        distance = job_distance_km(preferences, job)
        radius = location.radius_km if location.radius_km is not None else default_radius_km
        if distance is not None and distance > radius:
            return f"outside_radius: {distance:.1f}km > {radius:g}km"

    salary = preferences.salary
    if salary is not None and salary.enforce:
        cand_min, cand_max = candidate_salary_bounds(profile, preferences)
        alignment = salary_alignment(
            job.details.salary_min, job.details.salary_max, cand_min, cand_max
        )
        if alignment < MIN_ENFORCED_SALARY_ALIGNMENT:
            return f"salary_misaligned: {alignment:.2f}"

    return None


def apply_hard_filters(
    jobs: Sequence[JobPosting],
    profile: CandidateProfile,
    preferences: SearchPreferences,
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> List[JobPosting]:
    """Drop jobs violating hard constraints, preserving input order."""
    kept = []
    for job in jobs:
        reason = exclusion_reason(job, profile, preferences, default_radius_km)
        if reason is None:
            kept.append(job)
            continue
        logger.debug(
            f"Job excluded by hard filter: {job.id}",
            extra={
                "event": "filter.job.excluded",
                "job_id": job.id,
                "reason": reason,
            },
        )
    return kept
