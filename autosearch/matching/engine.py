"""Heuristic job matching: retrieval, hard filters and multi-factor scoring.

This module implements the primary matching entry point that:
1. Loads the candidate profile and checks the candidate has a vector
2. Composes and embeds the query text
3. Retrieves the top-N jobs by vector similarity
4. Drops jobs violating hard constraints
5. Scores the survivors and returns them sorted by heuristic score
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from autosearch.config.models import MatchingConfig
from autosearch.domain.models import CandidateProfile, JobPosting, SearchPreferences
from autosearch.logging import get_logger
from autosearch.utils.timestamps import utc_now

from .exceptions import CandidateNotFound, EmbeddingUnavailable, MatchingCancelled
from .filters import apply_hard_filters, candidate_salary_bounds, job_distance_km
from .models import HeuristicFeatures, JobMatch, MatchScores, ScoreBreakdown
from .query import compose_query_text
from .scoring import (
    heuristic_score,
    jaccard,
    recency_score,
    salary_alignment,
    seniority_alignment,
    title_similarity,
    type_arrangement_match,
)
from .vectors import rank_by_similarity, to_vector

logger = get_logger(__name__, component="matching")


def compute_features(
    job: JobPosting,
    similarity: float,
    profile: CandidateProfile,
    preferences: SearchPreferences,
    now: datetime,
) -> HeuristicFeatures:
    """Compute the eight heuristic sub-scores of one job.

    Args:
        job: Job that survived the hard filters
        similarity: Rescaled cosine similarity of query and job vectors
        profile: Candidate profile
        preferences: Candidate search preferences
        now: Reference time for recency

    Returns:
        HeuristicFeatures for the job
    """
    cand_min, cand_max = candidate_salary_bounds(profile, preferences)
    details = job.details

    return HeuristicFeatures(
        vec_similarity=similarity,
        skills_jaccard=jaccard(profile.skills, details.all_skills),
        title_similarity=title_similarity(job.title, preferences.job_titles),
        distance_km=job_distance_km(preferences, job),
        salary_alignment=salary_alignment(
            details.salary_min, details.salary_max, cand_min, cand_max
        ),
        seniority_alignment=seniority_alignment(
            details.seniority, preferences.seniority_target or profile.experience_level
        ),
        type_arrangement=type_arrangement_match(
            job.employment_type,
            details.work_arrangement,
            preferences.employment_types,
            preferences.work_arrangements,
        ),
        recency=recency_score(job.created_at, now),
    )


class JobMatcher:
    """Ranks jobs for a candidate with vector retrieval and heuristic scoring.

    Collaborators are injected so tests can replace any of them:
    - candidates: object with ``get_by_id(candidate_id)``
    - jobs: object with ``get_by_ids(job_ids) -> {job_id: JobPosting}``
    - index: object with ``get_candidate_embedding``, ``reindex_candidate``
      and ``list_job_embeddings`` (see ``autosearch.embeddings.EmbeddingIndex``)
    - provider: object with ``embed(text) -> list[float]``
    """

    def __init__(self, candidates, jobs, index, provider, settings: Optional[MatchingConfig] = None):
        """Initialize JobMatcher.

        Args:
            candidates: Candidate profile store
            jobs: Job store
            index: Embedding index
            provider: Embedding provider used for the query text
            settings: Matching limits (defaults to MatchingConfig())
        """
        self.candidates = candidates
        self.jobs = jobs
        self.index = index
        self.provider = provider
        self.settings = settings or MatchingConfig()

    def load_profile(self, candidate_id: str) -> CandidateProfile:
        """Load a candidate profile.

        Raises:
            CandidateNotFound: If no profile exists
        """
        profile = self.candidates.get_by_id(candidate_id)
        if profile is None:
            raise CandidateNotFound(candidate_id)
        return profile

    def ensure_candidate_embedding(self, candidate_id: str) -> None:
        """Make sure the candidate has a stored vector, reindexing once if needed.

        Raises:
            EmbeddingUnavailable: If the vector is still missing after reindexing
        """
        if self.index.get_candidate_embedding(candidate_id) is not None:
            return

        logger.warning(
            f"No embedding for candidate {candidate_id}, reindexing",
            extra={"event": "matching.candidate.reindexing", "candidate_id": candidate_id},
        )
        self.index.reindex_candidate(candidate_id)

        if self.index.get_candidate_embedding(candidate_id) is None:
            raise EmbeddingUnavailable(
                f"Candidate {candidate_id} profile not ready for matching",
                candidate_id=candidate_id,
            )

    def match_jobs(
        self,
        preferences: SearchPreferences,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[JobMatch]:
        """Rank jobs for the candidate named in ``preferences``.

        Args:
            preferences: Candidate search preferences
            limit: Maximum matches to return (default: ``preferences.top_k``)
            now: Reference time for recency (default: current UTC time)
            cancel_event: Optional cancellation signal

        Returns:
            JobMatch list sorted by heuristic score descending; ties keep
            retrieval order

        Raises:
            CandidateNotFound: If the candidate profile does not exist
            EmbeddingUnavailable: If the candidate vector or the query
                embedding cannot be produced
            DimensionMismatch: If stored vectors differ in length from the query
            MatchingCancelled: If ``cancel_event`` is set
        """
        now = now or utc_now()
        limit = preferences.top_k if limit is None else limit
        candidate_id = preferences.candidate_id

        profile = self.load_profile(candidate_id)
        self.ensure_candidate_embedding(candidate_id)

        query_text = compose_query_text(profile, preferences)
        query_vector = to_vector(self.provider.embed(query_text))
        _raise_if_cancelled(cancel_event)

        job_vectors = self.index.list_job_embeddings()
        retrieved = rank_by_similarity(
            query_vector,
            job_vectors,
            limit=self.settings.retrieval_limit,
            workers=self.settings.scan_workers,
            cancel_event=cancel_event,
        )
        similarities: Dict[str, float] = dict(retrieved)

        logger.info(
            f"Retrieved {len(retrieved)} of {len(job_vectors)} jobs by vector similarity",
            extra={
                "event": "retrieval.completed",
                "scanned": len(job_vectors),
                "retrieved": len(retrieved),
            },
        )

        loaded = self.jobs.get_by_ids([job_id for job_id, _ in retrieved])
        # Retrieval order, skipping vectors whose job row no longer exists
        ordered_jobs = [loaded[job_id] for job_id, _ in retrieved if job_id in loaded]
        survivors = apply_hard_filters(
            ordered_jobs, profile, preferences, self.settings.default_radius_km
        )

        matches = []
        for job in survivors:
            features = compute_features(job, similarities[job.id], profile, preferences, now)
            matches.append(
                JobMatch(
                    job_id=job.id,
                    job=job,
                    scores=MatchScores(
                        heuristic=heuristic_score(features),
                        breakdown=ScoreBreakdown.from_features(features),
                    ),
                )
            )

        # list.sort is stable, so equal scores keep retrieval order
        matches.sort(key=lambda match: match.heuristic, reverse=True)
        result = matches[:limit]

        logger.info(
            f"Matched {len(result)} jobs for candidate {candidate_id}",
            extra={
                "event": "matching.completed",
                "candidate_id": candidate_id,
                "filtered_out": len(ordered_jobs) - len(survivors),
                "scored": len(matches),
                "returned": len(result),
            },
        )
        return result


def _raise_if_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise MatchingCancelled("Matching cancelled")
