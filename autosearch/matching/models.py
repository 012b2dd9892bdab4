"""Data models for the matching and re-ranking stages.

This module defines the transient structures produced while ranking jobs for
one request: the raw heuristic features of a job, the scored JobMatch handed
from the heuristic ranker to the re-ranker, and the final RerankedJob.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from autosearch.domain.models import JobPosting


@dataclass(frozen=True)
class HeuristicFeatures:
    """Raw sub-scores of one job, each in [0, 1].

    ``distance_km`` is the great-circle distance when both the candidate and
    the job carry coordinates, and None otherwise. The location sub-score is
    derived from it (see ``scoring.location_score``).

    Attributes:
        vec_similarity: Rescaled cosine similarity of query and job vectors
        skills_jaccard: Jaccard overlap of candidate and job skills
        title_similarity: Coarse title match signal
        distance_km: Distance between candidate and job, if known
        salary_alignment: Overlap of candidate and job salary bands
        seniority_alignment: Closeness on the seniority ladder
        type_arrangement: Employment type / work arrangement match
        recency: Posting freshness
    """

    vec_similarity: float
    skills_jaccard: float
    title_similarity: float
    distance_km: Optional[float]
    salary_alignment: float
    seniority_alignment: float
    type_arrangement: float
    recency: float


@dataclass(frozen=True)
class ScoreBreakdown:
    """Every sub-score that went into a heuristic score, for explanation."""

    vec_similarity: float
    skills_jaccard: float
    title_similarity: float
    distance_km: Optional[float]
    salary_alignment: float
    seniority_alignment: float
    type_arrangement: float
    recency: float

    @classmethod
    def from_features(cls, features: HeuristicFeatures) -> "ScoreBreakdown":
        """Build a breakdown from the features a score was computed with."""
        return cls(
            vec_similarity=features.vec_similarity,
            skills_jaccard=features.skills_jaccard,
            title_similarity=features.title_similarity,
            distance_km=features.distance_km,
            salary_alignment=features.salary_alignment,
            seniority_alignment=features.seniority_alignment,
            type_arrangement=features.type_arrangement,
            recency=features.recency,
        )

    def to_dict(self) -> Dict[str, Optional[float]]:
        """Serialize with the wire (camelCase) field names."""
        return {
            "vecSimilarity": self.vec_similarity,
            "skillsJaccard": self.skills_jaccard,
            "titleSimilarity": self.title_similarity,
            "distanceKm": self.distance_km,
            "salaryAlignment": self.salary_alignment,
            "seniorityAlignment": self.seniority_alignment,
            "typeArrangement": self.type_arrangement,
            "recency": self.recency,
        }


@dataclass(frozen=True)
class MatchScores:
    """Heuristic score (0-100) plus the breakdown it was computed from."""

    heuristic: int
    breakdown: ScoreBreakdown


@dataclass(frozen=True)
class JobMatch:
    """A job that survived retrieval and hard filters, with its heuristic score.

    Produced by the heuristic ranker and consumed by the re-ranker.
    """

    job_id: str
    job: JobPosting
    scores: MatchScores

    @property
    def heuristic(self) -> int:
        """Convenience accessor for the heuristic score."""
        return self.scores.heuristic


@dataclass(frozen=True)
class RerankScores:
    """Final score triple. All values are integers in [0, 100]."""

    heuristic: int
    llm: int
    final: int
    breakdown: ScoreBreakdown


@dataclass(frozen=True)
class RerankedJob:
    """Final output unit of the matching core.

    Attributes:
        job_id: Job identity
        job: Full job payload
        scores: Heuristic, LLM and blended scores plus breakdown
        explanation: Human-readable reason for the match (<= 320 chars)
        risks: Gaps or concerns (<= 200 chars), if any
        highlighted_skills: Candidate skills that drive the match (<= 5)
    """

    job_id: str
    job: JobPosting
    scores: RerankScores
    explanation: str
    risks: Optional[str] = None
    highlighted_skills: List[str] = field(default_factory=list)
