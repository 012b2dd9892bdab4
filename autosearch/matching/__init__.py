"""Job matching core: query composition, retrieval, hard filters and scoring.

This module provides:
- JobMatcher: primary entry point ranking jobs for a candidate
- compose_query_text: semantic query text from candidate state
- cosine_similarity / rank_by_similarity: exhaustive vector retrieval
- heuristic_score and the individual sub-score functions
- JobMatch / RerankedJob and the payload builders for results
"""

from .engine import JobMatcher, compute_features
from .exceptions import (
    CandidateNotFound,
    DimensionMismatch,
    EmbeddingUnavailable,
    LLMFailure,
    MatchingCancelled,
    MatchingError,
    PartialLLMOmission,
)
from .models import (
    HeuristicFeatures,
    JobMatch,
    MatchScores,
    RerankedJob,
    RerankScores,
    ScoreBreakdown,
)
from .query import compose_query_text
from .scoring import HEURISTIC_WEIGHTS, heuristic_score, round_half_up
from .utils import build_match_payload, build_result_payload, format_match_list, format_shortlist
from .vectors import cosine_similarity, rank_by_similarity

__all__ = [
    "JobMatcher",
    "compute_features",
    "compose_query_text",
    "cosine_similarity",
    "rank_by_similarity",
    "heuristic_score",
    "round_half_up",
    "HEURISTIC_WEIGHTS",
    "HeuristicFeatures",
    "ScoreBreakdown",
    "MatchScores",
    "JobMatch",
    "RerankScores",
    "RerankedJob",
    "build_result_payload",
    "build_match_payload",
    "format_shortlist",
    "format_match_list",
    "MatchingError",
    "CandidateNotFound",
    "EmbeddingUnavailable",
    "DimensionMismatch",
    "MatchingCancelled",
    "LLMFailure",
    "PartialLLMOmission",
]
