"""Data access layer (repositories) for persistence operations.

This module provides repository classes for candidate profiles, search
preferences, jobs and embedding vectors. Repositories encapsulate database
operations and return domain models (or numpy vectors) rather than ORM models.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from autosearch.domain.models import CandidateProfile, JobPosting, SearchPreferences
from autosearch.utils.timestamps import utc_now

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import (
    CandidateEmbeddingModel,
    CandidateProfileModel,
    JobEmbeddingModel,
    JobModel,
    SearchPreferencesModel,
    _format_datetime,
    decode_vector,
    encode_vector,
)

logger = logging.getLogger(__name__)


class CandidateRepository:
    """Repository for candidate profile operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, candidate_id: str) -> Optional[CandidateProfile]:
        """Retrieve a candidate profile by identity.

        Args:
            candidate_id: Candidate profile identity

        Returns:
            CandidateProfile if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(CandidateProfileModel, candidate_id)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving candidate {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve candidate: {e}") from e

    def list_ids(self) -> List[str]:
        """Return every candidate identity (ordered by id)."""
        try:
            stmt = select(CandidateProfileModel.id).order_by(CandidateProfileModel.id)
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing candidates: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list candidates: {e}") from e

    def upsert(self, profile: CandidateProfile) -> CandidateProfile:
        """Insert a new profile or update an existing one.

        Args:
            profile: CandidateProfile to persist

        Returns:
            Persisted CandidateProfile

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(CandidateProfileModel, profile.id)
            if existing:
                existing.apply(profile)
                self.session.flush()
                return existing.to_domain()

            model = CandidateProfileModel.from_domain(profile)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting candidate {profile.id}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to upsert candidate due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting candidate {profile.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert candidate: {e}") from e


class PreferencesRepository:
    """Repository for per-candidate search preferences."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_for_candidate(self, candidate_id: str) -> Optional[SearchPreferences]:
        """Retrieve the stored preferences of a candidate.

        Args:
            candidate_id: Candidate profile identity

        Returns:
            SearchPreferences if the candidate saved any, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(SearchPreferencesModel, candidate_id)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving preferences for {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve preferences: {e}") from e

    def upsert(self, preferences: SearchPreferences) -> SearchPreferences:
        """Insert or replace a candidate's preferences.

        Raises:
            DataIntegrityError: If the candidate profile does not exist
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(SearchPreferencesModel, preferences.candidate_id)
            if existing:
                existing.apply(preferences)
                self.session.flush()
                return existing.to_domain()

            model = SearchPreferencesModel.from_domain(preferences)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(
                f"Integrity error upserting preferences for {preferences.candidate_id}: {e}",
                exc_info=True,
            )
            raise DataIntegrityError(
                f"Failed to upsert preferences due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(
                f"Error upserting preferences for {preferences.candidate_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to upsert preferences: {e}") from e


class JobRepository:
    """Repository for job posting operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, job_id: str) -> Optional[JobPosting]:
        """Retrieve a job by identity.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(JobModel, job_id)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e

    def get_by_ids(self, job_ids: Sequence[str]) -> Dict[str, JobPosting]:
        """Load several jobs at once.

        Args:
            job_ids: Job identities to load

        Returns:
            Mapping of job id to JobPosting (unknown ids are absent)

        Raises:
            PersistenceError: If database error occurs
        """
        if not job_ids:
            return {}

        try:
            stmt = select(JobModel).where(JobModel.id.in_(list(job_ids)))
            models = self.session.execute(stmt).scalars().all()
            return {model.id: model.to_domain() for model in models}
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {len(job_ids)} jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve jobs: {e}") from e

    def list_ids(self) -> List[str]:
        """Return every job identity (ordered by id)."""
        try:
            stmt = select(JobModel.id).order_by(JobModel.id)
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list jobs: {e}") from e

    def upsert(self, job: JobPosting) -> JobPosting:
        """Insert new job or update existing job.

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(JobModel, job.id)
            if existing:
                existing.apply(job)
                self.session.flush()
                return existing.to_domain()

            model = JobModel.from_domain(job)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting job {job.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert job due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting job {job.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert job: {e}") from e

    def bulk_upsert(self, jobs: List[JobPosting]) -> List[JobPosting]:
        """Upsert multiple jobs in a single transaction.

        Raises:
            PersistenceError: If database error occurs
        """
        return [self.upsert(job) for job in jobs]


class EmbeddingRepository:
    """Repository for candidate and job embedding vectors.

    Vectors are stored as JSON text and returned as float64 numpy arrays.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_candidate_vector(self, candidate_id: str) -> Optional[np.ndarray]:
        """Return the stored vector of a candidate, or None if absent.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(CandidateEmbeddingModel, candidate_id)
            return decode_vector(model.vector) if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving embedding for candidate {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve candidate embedding: {e}") from e

    def save_candidate_vector(
        self, candidate_id: str, vector: Sequence[float], updated_at: Optional[datetime] = None
    ) -> None:
        """Insert or replace a candidate's vector.

        Raises:
            RecordNotFoundError: If the candidate profile does not exist
            PersistenceError: If database error occurs
        """
        try:
            if self.session.get(CandidateProfileModel, candidate_id) is None:
                raise RecordNotFoundError(f"Candidate {candidate_id} not found")
            self._save(CandidateEmbeddingModel, "candidate_id", candidate_id, vector, updated_at)
        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error saving embedding for candidate {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save candidate embedding: {e}") from e

    def list_job_vectors(self) -> List[Tuple[str, np.ndarray]]:
        """Return every stored job vector, ordered by job id.

        This order is the storage order used to break similarity ties.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(JobEmbeddingModel).order_by(JobEmbeddingModel.job_id)
            models = self.session.execute(stmt).scalars().all()
            return [(model.job_id, decode_vector(model.vector)) for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Error listing job embeddings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list job embeddings: {e}") from e

    def save_job_vector(
        self, job_id: str, vector: Sequence[float], updated_at: Optional[datetime] = None
    ) -> None:
        """Insert or replace a job's vector.

        Raises:
            RecordNotFoundError: If the job does not exist
            PersistenceError: If database error occurs
        """
        try:
            if self.session.get(JobModel, job_id) is None:
                raise RecordNotFoundError(f"Job {job_id} not found")
            self._save(JobEmbeddingModel, "job_id", job_id, vector, updated_at)
        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error saving embedding for job {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save job embedding: {e}") from e

    def job_ids_without_vectors(self) -> List[str]:
        """Return ids of jobs that have no stored vector (ordered by id)."""
        try:
            stmt = (
                select(JobModel.id)
                .outerjoin(JobEmbeddingModel, JobEmbeddingModel.job_id == JobModel.id)
                .where(JobEmbeddingModel.job_id.is_(None))
                .order_by(JobModel.id)
            )
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error finding jobs without embeddings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to find jobs without embeddings: {e}") from e

    def candidate_ids_without_vectors(self) -> List[str]:
        """Return ids of candidates that have no stored vector (ordered by id)."""
        try:
            stmt = (
                select(CandidateProfileModel.id)
                .outerjoin(
                    CandidateEmbeddingModel,
                    CandidateEmbeddingModel.candidate_id == CandidateProfileModel.id,
                )
                .where(CandidateEmbeddingModel.candidate_id.is_(None))
                .order_by(CandidateProfileModel.id)
            )
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error finding candidates without embeddings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to find candidates without embeddings: {e}") from e

    def _save(self, model_cls, key_name: str, key: str, vector, updated_at) -> None:
        encoded = encode_vector(vector)
        timestamp = _format_datetime(updated_at or utc_now())
        existing = self.session.get(model_cls, key)
        if existing:
            existing.vector = encoded
            existing.dimension = len(vector)
            existing.updated_at = timestamp
        else:
            self.session.add(
                model_cls(
                    **{key_name: key},
                    vector=encoded,
                    dimension=len(vector),
                    updated_at=timestamp,
                )
            )
        self.session.flush()
