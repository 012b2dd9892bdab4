"""Pipeline orchestration for indexing and matching runs."""

import threading
from datetime import datetime
from typing import Optional
from uuid import uuid4

from autosearch.config.environment import EnvironmentConfig
from autosearch.config.models import AppConfig
from autosearch.domain.models import SearchPreferences
from autosearch.embeddings import EmbeddingIndex, EmbeddingProvider
from autosearch.logging import get_logger
from autosearch.logging.context import log_context
from autosearch.matching.engine import JobMatcher
from autosearch.persistence.database import get_session
from autosearch.persistence.repositories import (
    CandidateRepository,
    EmbeddingRepository,
    JobRepository,
    PreferencesRepository,
)
from autosearch.reranking import ChatCompletionClient, Reranker
from autosearch.utils.timestamps import utc_now

from .models import IndexRunResult, MatchRunResult

logger = get_logger(__name__, component="pipeline")


class MatchPipeline:
    """
    Orchestrates one matching request end to end.

    Each run opens a database session, wires the repositories into the
    embedding index and the job matcher, ranks jobs for the candidate and
    optionally re-ranks the best of them with the LLM.
    """

    def __init__(
        self,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        provider: EmbeddingProvider,
        chat_client: Optional[ChatCompletionClient] = None,
    ):
        """
        Initialize the match pipeline.

        Args:
            app_config: Application configuration
            env_config: Environment configuration
            provider: Embedding provider for query texts and reindexing
            chat_client: Chat client for re-ranking (None serves heuristic-only results)
        """
        self.app_config = app_config
        self.env_config = env_config
        self.provider = provider
        self.reranker = Reranker(chat_client, pool_size=app_config.matching.rerank_pool_size)

    def run(
        self,
        candidate_id: str,
        rerank: bool = True,
        top_k: Optional[int] = None,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> MatchRunResult:
        """
        Rank jobs for one candidate.

        Without re-ranking, up to ``top_k`` heuristic matches are returned
        (default: the candidate's preferred top_k). With re-ranking, the
        heuristic pool is sent to the LLM and up to ``top_k`` re-ranked
        results are returned (default: ``matching.rerank_top_k``).

        Args:
            candidate_id: Candidate profile identity
            rerank: Whether to run the LLM re-rank stage
            top_k: Override for the number of returned jobs
            now: Reference time for recency scoring
            cancel_event: Optional cancellation signal

        Returns:
            MatchRunResult with matches and (when re-ranked) results

        Raises:
            CandidateNotFound: If the candidate profile does not exist
            EmbeddingUnavailable: If the candidate is not ready for matching
            DimensionMismatch: If stored vectors have inconsistent lengths
            MatchingCancelled: If ``cancel_event`` is set
        """
        run_started_at = utc_now()
        run_id = uuid4().hex
        settings = self.app_config.matching

        with log_context(run_id=run_id, candidate_id=candidate_id):
            logger.info(
                f"Matching run started for candidate {candidate_id}",
                extra={"event": "matching.run.started", "rerank": rerank},
            )

            with get_session() as session:
                candidates = CandidateRepository(session)
                jobs = JobRepository(session)
                index = EmbeddingIndex(
                    candidates, jobs, EmbeddingRepository(session), self.provider
                )
                matcher = JobMatcher(candidates, jobs, index, self.provider, settings=settings)

                preferences = PreferencesRepository(session).get_for_candidate(candidate_id)
                if preferences is None:
                    logger.debug(
                        "No stored preferences, using defaults",
                        extra={"event": "matching.preferences.defaulted"},
                    )
                    preferences = SearchPreferences(candidate_id=candidate_id)

                if rerank:
                    matches = matcher.match_jobs(
                        preferences,
                        limit=settings.rerank_pool_size,
                        now=now,
                        cancel_event=cancel_event,
                    )
                    profile = matcher.load_profile(candidate_id)
                    results = self.reranker.rerank_matches(
                        matches,
                        profile,
                        preferences,
                        top_k=top_k if top_k is not None else settings.rerank_top_k,
                        cancel_event=cancel_event,
                    )
                else:
                    matches = matcher.match_jobs(
                        preferences, limit=top_k, now=now, cancel_event=cancel_event
                    )
                    results = []

            result = MatchRunResult(
                run_id=run_id,
                candidate_id=candidate_id,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                matches=matches,
                results=results,
                reranked=rerank,
            )

            logger.info(
                f"Matching run completed: {result.returned_count} jobs returned",
                extra={
                    "event": "matching.run.completed",
                    "duration_ms": int(result.duration_seconds * 1000),
                    "matched": len(matches),
                    "returned": result.returned_count,
                },
            )
            return result


def run_indexing(
    provider: EmbeddingProvider,
    include_candidates: bool = True,
    only_missing: bool = True,
) -> IndexRunResult:
    """
    Build stored vectors for jobs and (optionally) candidates.

    Args:
        provider: Embedding provider
        include_candidates: Also index candidate profiles
        only_missing: Skip entities that already have a vector

    Returns:
        IndexRunResult with indexed and pending counts
    """
    run_id = uuid4().hex
    result = IndexRunResult()

    with log_context(run_id=run_id):
        logger.info(
            "Indexing run started",
            extra={
                "event": "indexing.run.started",
                "include_candidates": include_candidates,
                "only_missing": only_missing,
            },
        )

        with get_session() as session:
            candidates = CandidateRepository(session)
            jobs = JobRepository(session)
            embeddings = EmbeddingRepository(session)
            index = EmbeddingIndex(candidates, jobs, embeddings, provider)

            result.jobs_pending = len(
                embeddings.job_ids_without_vectors() if only_missing else jobs.list_ids()
            )
            result.jobs_indexed = index.index_all_jobs(only_missing=only_missing)

            if include_candidates:
                result.candidates_pending = len(
                    embeddings.candidate_ids_without_vectors()
                    if only_missing
                    else candidates.list_ids()
                )
                result.candidates_indexed = index.index_all_candidates(only_missing=only_missing)

        logger.info(
            "Indexing run completed",
            extra={
                "event": "indexing.run.completed",
                "jobs_indexed": result.jobs_indexed,
                "candidates_indexed": result.candidates_indexed,
                "had_errors": result.had_errors,
            },
        )
    return result
