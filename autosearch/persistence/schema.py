"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for the database schema and provides
conversion methods between ORM models and domain models. List-valued fields,
job details and embedding vectors are stored as JSON text.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

import numpy as np
from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from autosearch.domain.models import (
    CandidateProfile,
    JobDetails,
    JobPosting,
    LocationPreference,
    SalaryPreference,
    SearchPreferences,
)

logger = logging.getLogger(__name__)

# Create base class for ORM models
Base = declarative_base()


class CandidateProfileModel(Base):
    """ORM model for candidate_profiles table."""

    __tablename__ = "candidate_profiles"

    id = Column(String(64), primary_key=True, nullable=False)
    user_id = Column(String(64), nullable=True)
    full_name = Column(String(255), nullable=True)
    job_title = Column(String(255), nullable=True)
    skills = Column(Text, nullable=False, default="[]")
    experience_level = Column(String(50), nullable=True)
    city = Column(String(255), nullable=True)
    province = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True)
    salary_expectation_min = Column(Float, nullable=True)
    salary_expectation_max = Column(Float, nullable=True)

    __table_args__ = (Index("idx_candidate_profiles_user", "user_id"),)

    def to_domain(self) -> CandidateProfile:
        """Convert ORM model to domain model.

        Returns:
            CandidateProfile: Domain model instance
        """
        return CandidateProfile(
            id=self.id,
            user_id=self.user_id,
            full_name=self.full_name,
            job_title=self.job_title,
            skills=_load_json_list(self.skills),
            experience_level=self.experience_level,
            city=self.city,
            province=self.province,
            country=self.country,
            salary_expectation_min=self.salary_expectation_min,
            salary_expectation_max=self.salary_expectation_max,
        )

    @classmethod
    def from_domain(cls, profile: CandidateProfile) -> "CandidateProfileModel":
        """Create ORM model from domain model.

        Args:
            profile: Domain model instance

        Returns:
            CandidateProfileModel: ORM model instance
        """
        model = cls(id=profile.id)
        model.apply(profile)
        return model

    def apply(self, profile: CandidateProfile) -> None:
        """Copy every mutable field from a domain model onto this row."""
        self.user_id = profile.user_id
        self.full_name = profile.full_name
        self.job_title = profile.job_title
        self.skills = json.dumps(profile.skills)
        self.experience_level = profile.experience_level
        self.city = profile.city
        self.province = profile.province
        self.country = profile.country
        self.salary_expectation_min = profile.salary_expectation_min
        self.salary_expectation_max = profile.salary_expectation_max


class SearchPreferencesModel(Base):
    """ORM model for search_preferences table (one row per candidate)."""

    __tablename__ = "search_preferences"

    candidate_id = Column(
        String(64),
        ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    job_titles = Column(Text, nullable=False, default="[]")
    employment_types = Column(Text, nullable=False, default="[]")
    work_arrangements = Column(Text, nullable=False, default="[]")
    seniority_target = Column(String(50), nullable=True)

    # Location preference (all null when none was supplied)
    location_city = Column(String(255), nullable=True)
    location_province = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    radius_km = Column(Float, nullable=True)
    enforce_radius = Column(Boolean, nullable=True)

    # Salary preference (all null when none was supplied)
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    enforce_salary = Column(Boolean, nullable=True)

    top_k = Column(Integer, nullable=False, default=20)

    def to_domain(self) -> SearchPreferences:
        """Convert ORM model to domain model.

        Returns:
            SearchPreferences: Domain model instance
        """
        location = None
        if self.enforce_radius is not None:
            location = LocationPreference(
                city=self.location_city,
                province=self.location_province,
                latitude=self.latitude,
                longitude=self.longitude,
                radius_km=self.radius_km,
                enforce_radius=self.enforce_radius,
            )

        salary = None
        if self.enforce_salary is not None:
            salary = SalaryPreference(
                min=self.salary_min,
                max=self.salary_max,
                enforce=self.enforce_salary,
            )

        return SearchPreferences(
            candidate_id=self.candidate_id,
            job_titles=_load_json_list(self.job_titles),
            location=location,
            employment_types=_load_json_list(self.employment_types),
            work_arrangements=_load_json_list(self.work_arrangements),
            seniority_target=self.seniority_target,
            salary=salary,
            top_k=self.top_k,
        )

    @classmethod
    def from_domain(cls, preferences: SearchPreferences) -> "SearchPreferencesModel":
        """Create ORM model from domain model.

        Args:
            preferences: Domain model instance

        Returns:
            SearchPreferencesModel: ORM model instance
        """
        model = cls(candidate_id=preferences.candidate_id)
        model.apply(preferences)
        return model

    def apply(self, preferences: SearchPreferences) -> None:
        """Copy every mutable field from a domain model onto this row."""
        self.job_titles = json.dumps(preferences.job_titles)
        self.employment_types = json.dumps(preferences.employment_types)
        self.work_arrangements = json.dumps(preferences.work_arrangements)
        self.seniority_target = preferences.seniority_target
        self.top_k = preferences.top_k

        location = preferences.location
        self.location_city = location.city if location else None
        self.location_province = location.province if location else None
        self.latitude = location.latitude if location else None
        self.longitude = location.longitude if location else None
        self.radius_km = location.radius_km if location else None
        self.enforce_radius = location.enforce_radius if location else None

        salary = preferences.salary
        self.salary_min = salary.min if salary else None
        self.salary_max = salary.max if salary else None
        self.enforce_salary = salary.enforce if salary else None


class JobModel(Base):
    """ORM model for jobs table.

    Semi-structured details (seniority, skills, compensation, coordinates) are
    stored as one JSON text column.
    """

    __tablename__ = "jobs"

    id = Column(String(64), primary_key=True, nullable=False)
    title = Column(Text, nullable=False)
    company = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    employment_type = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    details = Column(Text, nullable=False, default="{}")

    # Timestamp (stored as ISO 8601 string)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_jobs_created_at", "created_at"),)

    def to_domain(self) -> JobPosting:
        """Convert ORM model to domain model.

        Returns:
            JobPosting: Domain model instance
        """
        return JobPosting(
            id=self.id,
            title=self.title,
            company=self.company,
            location=self.location,
            employment_type=self.employment_type,
            description=self.description,
            details=JobDetails.model_validate(json.loads(self.details or "{}")),
            created_at=_parse_datetime(self.created_at),
        )

    @classmethod
    def from_domain(cls, job: JobPosting) -> "JobModel":
        """Create ORM model from domain model.

        Args:
            job: Domain model instance

        Returns:
            JobModel: ORM model instance
        """
        model = cls(id=job.id)
        model.apply(job)
        return model

    def apply(self, job: JobPosting) -> None:
        """Copy every mutable field from a domain model onto this row."""
        self.title = job.title
        self.company = job.company
        self.location = job.location
        self.employment_type = job.employment_type
        self.description = job.description
        self.details = job.details.model_dump_json(exclude_none=True)
        self.created_at = _format_datetime(job.created_at)


class CandidateEmbeddingModel(Base):
    """ORM model for candidate_embeddings table."""

    __tablename__ = "candidate_embeddings"

    candidate_id = Column(
        String(64),
        ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    vector = Column(Text, nullable=False)
    dimension = Column(Integer, nullable=False)
    updated_at = Column(String(50), nullable=False)


class JobEmbeddingModel(Base):
    """ORM model for job_embeddings table."""

    __tablename__ = "job_embeddings"

    job_id = Column(
        String(64),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    vector = Column(Text, nullable=False)
    dimension = Column(Integer, nullable=False)
    updated_at = Column(String(50), nullable=False)


def encode_vector(vector: Sequence[float]) -> str:
    """Serialize a vector as JSON text."""
    return json.dumps([float(value) for value in vector])


def decode_vector(text: str) -> np.ndarray:
    """Parse JSON text into a float64 vector."""
    return np.asarray(json.loads(text), dtype=np.float64)


def _load_json_list(text: Optional[str]) -> List[Any]:
    if not text:
        return []
    value = json.loads(text)
    return value if isinstance(value, list) else []


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO 8601 string for database storage.

    Args:
        dt: Datetime object (naive values are treated as UTC)

    Returns:
        ISO 8601 formatted string or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse ISO 8601 string to datetime object.

    Args:
        dt_str: ISO 8601 formatted string

    Returns:
        Timezone-aware datetime in UTC or None
    """
    if dt_str is None or dt_str == "":
        return None

    dt_str = dt_str.rstrip("Z")

    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S")

    return dt.replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        from sqlalchemy import inspect

        inspector = inspect(engine)
        tables = inspector.get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
