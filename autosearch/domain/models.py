"""Core domain models for candidates, search preferences and jobs.

This module defines the data structures read by the matching core:
- CandidateProfile: the candidate's own profile (owned by the profile store)
- SearchPreferences: per-candidate overrides used to steer matching
- JobPosting / JobDetails: a job and its typed semi-structured details

All models are read-only from the matching core's point of view.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _clean_string_list(values: Optional[List[str]]) -> List[str]:
    """Strip entries and drop empty ones, preserving order."""
    if not values:
        return []
    cleaned = []
    for value in values:
        if value is None:
            continue
        stripped = str(value).strip()
        if stripped:
            cleaned.append(stripped)
    return cleaned


def _strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    stripped = v.strip()
    return stripped if stripped else None


class CandidateProfile(BaseModel):
    """A candidate's profile as stored by the profile store."""

    id: str = Field(..., description="Candidate profile identity")
    user_id: Optional[str] = Field(None, description="Owning user identity")
    full_name: Optional[str] = Field(None, description="Candidate display name")
    job_title: Optional[str] = Field(None, description="Current or most recent job title")
    skills: List[str] = Field(default_factory=list, description="Candidate skills")
    experience_level: Optional[str] = Field(
        None, description="Experience level (entry, intermediate, senior, ...)"
    )
    city: Optional[str] = Field(None, description="City of residence")
    province: Optional[str] = Field(None, description="Province or region")
    country: Optional[str] = Field(None, description="Country")
    salary_expectation_min: Optional[float] = Field(
        None, ge=0, description="Minimum expected salary"
    )
    salary_expectation_max: Optional[float] = Field(
        None, ge=0, description="Maximum expected salary"
    )

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        """Strip whitespace from the identity."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("full_name", "job_title", "experience_level", "city", "province", "country")
    @classmethod
    def strip_optional_fields(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from optional text fields."""
        return _strip_optional(v)

    @field_validator("skills", mode="before")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> List[str]:
        """Strip skills and drop empty entries."""
        return _clean_string_list(v)

    model_config = {"json_schema_extra": {"example": {
        "id": "cand-001",
        "user_id": "user-001",
        "full_name": "Thandi Mokoena",
        "job_title": "Data Engineer",
        "skills": ["Python", "SQL", "Airflow"],
        "experience_level": "intermediate",
        "city": "Cape Town",
        "province": "Western Cape",
        "country": "South Africa",
        "salary_expectation_min": 45000,
        "salary_expectation_max": 55000,
    }}}


class LocationPreference(BaseModel):
    """Preferred location and optional radius constraint."""

    city: Optional[str] = Field(None, description="Preferred city")
    province: Optional[str] = Field(None, description="Preferred province")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude in degrees")
    longitude: Optional[float] = Field(
        None, ge=-180, le=180, description="Longitude in degrees"
    )
    radius_km: Optional[float] = Field(None, gt=0, description="Search radius in kilometers")
    enforce_radius: bool = Field(
        False, description="Exclude jobs outside the radius instead of down-ranking them"
    )

    @field_validator("city", "province")
    @classmethod
    def strip_fields(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from optional text fields."""
        return _strip_optional(v)

    @property
    def has_coordinates(self) -> bool:
        """Whether both latitude and longitude are known."""
        return self.latitude is not None and self.longitude is not None


class SalaryPreference(BaseModel):
    """Expected salary band and whether it is a hard constraint."""

    min: Optional[float] = Field(None, ge=0, description="Minimum expected salary")
    max: Optional[float] = Field(None, ge=0, description="Maximum expected salary")
    enforce: bool = Field(
        False, description="Exclude jobs whose salary does not align with the band"
    )


class SearchPreferences(BaseModel):
    """A candidate's search preferences.

    Every field is optional; unset fields fall back to the candidate profile
    where a profile counterpart exists (titles, seniority, location, salary).
    """

    candidate_id: str = Field(..., description="Candidate profile identity")
    job_titles: List[str] = Field(default_factory=list, description="Desired job titles")
    location: Optional[LocationPreference] = Field(None, description="Location preference")
    employment_types: List[str] = Field(
        default_factory=list, description="Allowed employment types (permanent, contract, ...)"
    )
    work_arrangements: List[str] = Field(
        default_factory=list, description="Preferred work arrangements (onsite, hybrid, remote)"
    )
    seniority_target: Optional[str] = Field(None, description="Target seniority level")
    salary: Optional[SalaryPreference] = Field(None, description="Salary band preference")
    top_k: int = Field(20, ge=1, le=500, description="Maximum number of results")

    @field_validator("candidate_id")
    @classmethod
    def strip_candidate_id(cls, v: str) -> str:
        """Strip whitespace from the candidate identity."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("job_titles", "employment_types", "work_arrangements", mode="before")
    @classmethod
    def clean_lists(cls, v: Optional[List[str]]) -> List[str]:
        """Strip list entries and drop empty ones."""
        return _clean_string_list(v)

    @field_validator("seniority_target")
    @classmethod
    def strip_seniority(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from the seniority target."""
        return _strip_optional(v)

    model_config = {"json_schema_extra": {"example": {
        "candidate_id": "cand-001",
        "job_titles": ["Data Engineer", "Analytics Engineer"],
        "location": {
            "city": "Cape Town",
            "latitude": -33.9249,
            "longitude": 18.4241,
            "radius_km": 40,
            "enforce_radius": False,
        },
        "employment_types": ["permanent"],
        "work_arrangements": ["hybrid", "remote"],
        "seniority_target": "senior",
        "salary": {"min": 45000, "max": 60000, "enforce": True},
        "top_k": 20,
    }}}


class JobDetails(BaseModel):
    """Typed semi-structured job details (seniority, skills, compensation, geo)."""

    seniority: Optional[str] = Field(None, description="Seniority level of the role")
    work_arrangement: Optional[str] = Field(
        None, description="Work arrangement (onsite, hybrid, remote)"
    )
    required_skills: List[str] = Field(default_factory=list, description="Must-have skills")
    nice_to_have_skills: List[str] = Field(
        default_factory=list, description="Nice-to-have skills"
    )
    salary_min: Optional[float] = Field(None, ge=0, description="Minimum salary offered")
    salary_max: Optional[float] = Field(None, ge=0, description="Maximum salary offered")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Job latitude")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Job longitude")
    summary: Optional[str] = Field(None, description="Short role summary")
    department: Optional[str] = Field(None, description="Department")
    responsibilities: List[str] = Field(
        default_factory=list, description="Key responsibilities"
    )

    @field_validator("required_skills", "nice_to_have_skills", "responsibilities", mode="before")
    @classmethod
    def clean_lists(cls, v: Optional[List[str]]) -> List[str]:
        """Strip list entries and drop empty ones."""
        return _clean_string_list(v)

    @field_validator("seniority", "work_arrangement", "summary", "department")
    @classmethod
    def strip_fields(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from optional text fields."""
        return _strip_optional(v)

    @property
    def has_coordinates(self) -> bool:
        """Whether both latitude and longitude are known."""
        return self.latitude is not None and self.longitude is not None

    @property
    def all_skills(self) -> List[str]:
        """Required skills followed by nice-to-have skills."""
        return [*self.required_skills, *self.nice_to_have_skills]


class JobPosting(BaseModel):
    """A job posting as stored by the job store."""

    id: str = Field(..., description="Job identity")
    title: str = Field(..., description="Job title")
    company: Optional[str] = Field(None, description="Company name")
    location: Optional[str] = Field(None, description="Free-text job location")
    employment_type: Optional[str] = Field(
        None, description="Employment type (permanent, contract, ...)"
    )
    description: Optional[str] = Field(None, description="Full job description")
    details: JobDetails = Field(default_factory=JobDetails, description="Typed job details")
    created_at: datetime = Field(..., description="When the job was posted (UTC)")

    @field_validator("id", "title")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from required string fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("company", "location", "employment_type", "description")
    @classmethod
    def strip_optional_fields(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from optional text fields."""
        return _strip_optional(v)

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "id": "job-042",
        "title": "Senior Data Engineer",
        "company": "Example Corp",
        "location": "Cape Town, Western Cape",
        "employment_type": "permanent",
        "description": "Build and run our data platform...",
        "details": {
            "seniority": "senior",
            "work_arrangement": "hybrid",
            "required_skills": ["Python", "SQL", "AWS"],
            "nice_to_have_skills": ["Airflow"],
            "salary_min": 50000,
            "salary_max": 65000,
            "latitude": -33.9249,
            "longitude": 18.4241,
        },
        "created_at": "2026-10-01T08:00:00Z",
    }}}
