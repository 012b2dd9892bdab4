"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from autosearch.matching.models import JobMatch, RerankedJob


@dataclass
class MatchRunResult:
    """
    Outcome of one matching request.

    Attributes:
        run_id: Unique identifier of the run (also stamped on its log records)
        candidate_id: Candidate the jobs were ranked for
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        matches: Heuristic matches (the re-rank pool when re-ranking)
        results: Re-ranked results (empty when re-ranking was skipped)
        reranked: Whether the re-rank stage ran
        duration_seconds: Total time for the run
    """

    run_id: str
    candidate_id: str
    run_started_at: datetime
    run_finished_at: datetime
    matches: List[JobMatch] = field(default_factory=list)
    results: List[RerankedJob] = field(default_factory=list)
    reranked: bool = False
    duration_seconds: float = 0.0

    def __post_init__(self):
        """Compute duration if not set."""
        if self.duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.duration_seconds = delta.total_seconds()

    @property
    def returned_count(self) -> int:
        """Number of jobs handed back to the caller."""
        return len(self.results) if self.reranked else len(self.matches)


@dataclass
class IndexRunResult:
    """
    Outcome of an indexing run.

    Attributes:
        jobs_indexed: Jobs that received a vector
        jobs_pending: Jobs that were considered for indexing
        candidates_indexed: Candidates that received a vector
        candidates_pending: Candidates that were considered for indexing
    """

    jobs_indexed: int = 0
    jobs_pending: int = 0
    candidates_indexed: int = 0
    candidates_pending: int = 0

    @property
    def had_errors(self) -> bool:
        """Whether any entity could not be indexed."""
        return (
            self.jobs_indexed < self.jobs_pending
            or self.candidates_indexed < self.candidates_pending
        )


@dataclass
class ImportResult:
    """Counts of records written by an import."""

    candidates: int = 0
    preferences: int = 0
    jobs: int = 0
