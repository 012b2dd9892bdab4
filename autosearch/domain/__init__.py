"""Domain models for the Auto Search matching core."""

from .models import (
    CandidateProfile,
    JobDetails,
    JobPosting,
    LocationPreference,
    SalaryPreference,
    SearchPreferences,
)

__all__ = [
    "CandidateProfile",
    "SearchPreferences",
    "LocationPreference",
    "SalaryPreference",
    "JobPosting",
    "JobDetails",
]
