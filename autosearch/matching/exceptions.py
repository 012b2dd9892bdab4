"""Custom exceptions for the matching and re-ranking stages."""

from typing import Iterable, List, Optional


class MatchingError(Exception):
    """Base exception for all matching errors.

    Catching this exception will catch any error raised while composing,
    retrieving, scoring or re-ranking jobs for a candidate.
    """

    pass


class CandidateNotFound(MatchingError):
    """No candidate profile exists for the requested identity."""

    def __init__(self, candidate_id: str) -> None:
        """Initialize with the candidate identity that was not found.

        Args:
            candidate_id: Identity of the missing candidate profile
        """
        super().__init__(f"Candidate profile not found: {candidate_id}")
        self.candidate_id = candidate_id


class EmbeddingUnavailable(MatchingError):
    """An embedding vector is missing and could not be generated.

    Raised when the embedding provider fails, or when a candidate has no
    stored vector and re-indexing did not produce one. Always surfaced to
    the caller.
    """

    def __init__(self, message: str, candidate_id: Optional[str] = None) -> None:
        """Initialize embedding error.

        Args:
            message: Human-readable error message
            candidate_id: Candidate whose vector is unavailable, if any
        """
        super().__init__(message)
        self.candidate_id = candidate_id


class DimensionMismatch(MatchingError):
    """Two vectors that must be compared have different lengths.

    Indicates a data-integrity problem (for example, job vectors produced by a
    different embedding model than the query). Never masked.
    """

    def __init__(self, left: int, right: int) -> None:
        """Initialize with the two vector lengths.

        Args:
            left: Length of the first vector
            right: Length of the second vector
        """
        super().__init__(f"Vector dimension mismatch: {left} vs {right}")
        self.left = left
        self.right = right


class MatchingCancelled(MatchingError):
    """The request's cancellation signal was set while work was in progress."""

    pass


class LLMFailure(MatchingError):
    """The re-ranking LLM call failed (transport, timeout, parse or schema).

    Absorbed by the re-ranker, which falls back to heuristic scores.
    """

    pass


class PartialLLMOmission(MatchingError):
    """The LLM responded but left some of the submitted jobs unscored.

    Absorbed by the re-ranker, which substitutes heuristic scores for the
    omitted jobs.
    """

    def __init__(self, job_ids: Iterable[str]) -> None:
        """Initialize with the omitted job identities.

        Args:
            job_ids: Jobs submitted to the LLM but missing from its response
        """
        self.job_ids: List[str] = list(job_ids)
        super().__init__(
            f"LLM omitted {len(self.job_ids)} job(s) from its response: {', '.join(self.job_ids)}"
        )
