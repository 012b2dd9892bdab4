"""Embedding index: stored candidate/job vectors and (re)indexing.

The matching core reads vectors through this class and asks it to reindex a
candidate whose vector is missing. The CLI ``index`` command uses it to embed
jobs and candidates in bulk.
"""

from typing import List, Optional, Tuple

import numpy as np

from autosearch.domain.models import CandidateProfile, JobPosting
from autosearch.logging import get_logger
from autosearch.matching.exceptions import EmbeddingUnavailable
from autosearch.persistence.repositories import (
    CandidateRepository,
    EmbeddingRepository,
    JobRepository,
)

from .provider import EmbeddingProvider

logger = get_logger(__name__, component="embeddings")


def candidate_document(profile: CandidateProfile) -> str:
    """Text embedded for a candidate profile."""
    parts: List[str] = []
    if profile.full_name:
        parts.append(profile.full_name)
    if profile.job_title:
        parts.append(f"Job Title: {profile.job_title}")
    if profile.experience_level:
        parts.append(f"Experience Level: {profile.experience_level}")

    location = [value for value in (profile.city, profile.province, profile.country) if value]
    if location:
        parts.append(f"Location: {', '.join(location)}")

    if profile.skills:
        parts.append(f"Skills: {', '.join(profile.skills)}")
    return "\n".join(parts)


def job_document(job: JobPosting) -> str:
    """Text embedded for a job posting."""
    details = job.details
    parts: List[str] = [job.title]
    if job.company:
        parts.append(f"Company: {job.company}")
    if job.location:
        parts.append(f"Location: {job.location}")
    if details.seniority:
        parts.append(f"Seniority: {details.seniority}")
    if details.summary:
        parts.append(details.summary)
    if details.department:
        parts.append(f"Department: {details.department}")
    if details.work_arrangement:
        parts.append(f"Work Arrangement: {details.work_arrangement}")
    if job.employment_type:
        parts.append(f"Employment Type: {job.employment_type}")
    if job.description:
        parts.append(job.description)
    if details.responsibilities:
        parts.append(f"Responsibilities: {'; '.join(details.responsibilities)}")
    if details.required_skills:
        parts.append(f"Required Skills: {', '.join(details.required_skills)}")
    if details.nice_to_have_skills:
        parts.append(f"Nice to Have: {', '.join(details.nice_to_have_skills)}")
    return "\n".join(parts)


class EmbeddingIndex:
    """Read and (re)build stored embedding vectors.

    Args:
        candidates: Candidate profile repository
        jobs: Job repository
        embeddings: Vector repository
        provider: Embedding provider used for (re)indexing
    """

    def __init__(
        self,
        candidates: CandidateRepository,
        jobs: JobRepository,
        embeddings: EmbeddingRepository,
        provider: EmbeddingProvider,
    ):
        self.candidates = candidates
        self.jobs = jobs
        self.embeddings = embeddings
        self.provider = provider

    def get_candidate_embedding(self, candidate_id: str) -> Optional[np.ndarray]:
        """Stored vector of a candidate, or None."""
        return self.embeddings.get_candidate_vector(candidate_id)

    def list_job_embeddings(self) -> List[Tuple[str, np.ndarray]]:
        """Every stored job vector in storage order (job id ascending)."""
        return self.embeddings.list_job_vectors()

    def reindex_candidate(self, candidate_id: str) -> bool:
        """Embed a candidate's profile and store the vector.

        Returns:
            True if a vector was stored, False if the profile is missing,
            has no embeddable content, or the provider failed
        """
        profile = self.candidates.get_by_id(candidate_id)
        if profile is None:
            logger.warning(
                f"Cannot index unknown candidate {candidate_id}",
                extra={"event": "embeddings.candidate.missing", "candidate_id": candidate_id},
            )
            return False

        return self._index(
            "candidate",
            candidate_id,
            candidate_document(profile),
            self.embeddings.save_candidate_vector,
        )

    def index_job(self, job_id: str) -> bool:
        """Embed a job posting and store the vector.

        Returns:
            True if a vector was stored, False otherwise
        """
        job = self.jobs.get_by_id(job_id)
        if job is None:
            logger.warning(
                f"Cannot index unknown job {job_id}",
                extra={"event": "embeddings.job.missing", "job_id": job_id},
            )
            return False

        return self._index("job", job_id, job_document(job), self.embeddings.save_job_vector)

    def index_all_jobs(self, only_missing: bool = True) -> int:
        """Index every job (or only those without a vector).

        Returns:
            Number of jobs indexed successfully
        """
        job_ids = self.embeddings.job_ids_without_vectors() if only_missing else self.jobs.list_ids()
        indexed = sum(1 for job_id in job_ids if self.index_job(job_id))
        logger.info(
            f"Indexed {indexed}/{len(job_ids)} jobs",
            extra={"event": "embeddings.jobs.indexed", "indexed": indexed, "total": len(job_ids)},
        )
        return indexed

    def index_all_candidates(self, only_missing: bool = True) -> int:
        """Index every candidate (or only those without a vector).

        Returns:
            Number of candidates indexed successfully
        """
        candidate_ids = (
            self.embeddings.candidate_ids_without_vectors()
            if only_missing
            else self.candidates.list_ids()
        )
        indexed = sum(1 for candidate_id in candidate_ids if self.reindex_candidate(candidate_id))
        logger.info(
            f"Indexed {indexed}/{len(candidate_ids)} candidates",
            extra={
                "event": "embeddings.candidates.indexed",
                "indexed": indexed,
                "total": len(candidate_ids),
            },
        )
        return indexed

    def _index(self, kind: str, entity_id: str, document: str, save) -> bool:
        try:
            vector = self.provider.embed(document)
        except EmbeddingUnavailable as e:
            logger.warning(
                f"Failed to embed {kind} {entity_id}: {e}",
                extra={"event": f"embeddings.{kind}.failed", f"{kind}_id": entity_id},
            )
            return False

        save(entity_id, vector)
        logger.debug(
            f"Indexed {kind} {entity_id}",
            extra={
                "event": f"embeddings.{kind}.indexed",
                f"{kind}_id": entity_id,
                "dimension": len(vector),
            },
        )
        return True
