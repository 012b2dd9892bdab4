"""LLM re-ranking of heuristic matches.

The re-ranker sends the best heuristic matches to a chat model in one batched
request and blends its judgment into the final score:

    final = round_half_up(0.7 * heuristic + 0.3 * llm_score)

Failures never reach the caller. A failed call (transport, timeout, invalid
JSON or schema) falls back to heuristic scores for the whole pool; jobs the
model leaves out get heuristic scores individually.
"""

import threading
from typing import Dict, List, Optional, Sequence

from autosearch.domain.models import CandidateProfile, SearchPreferences
from autosearch.logging import get_logger
from autosearch.matching.exceptions import LLMFailure, MatchingCancelled, PartialLLMOmission
from autosearch.matching.models import JobMatch, RerankedJob, RerankScores
from autosearch.matching.scoring import round_half_up
from autosearch.utils.text import normalize_term, truncate_text

from .llm import ChatCompletionClient
from .prompts import (
    MAX_EXPLANATION_CHARS,
    MAX_HIGHLIGHTED_SKILLS,
    MAX_RISKS_CHARS,
    build_messages,
)
from .schema import RerankResult, parse_rerank_response

logger = get_logger(__name__, component="rerank")

DEFAULT_POOL_SIZE = 50
DEFAULT_TOP_K = 10

HEURISTIC_BLEND_WEIGHT = 0.7
LLM_BLEND_WEIGHT = 0.3

OMITTED_EXPLANATION = "Good match based on skills and experience"
FALLBACK_EXPLANATION = "Matched based on skills, experience, and preferences"


def blend_scores(heuristic: int, llm_score: int) -> int:
    """Blend heuristic and LLM scores into the final 0-100 score."""
    blended = round_half_up(HEURISTIC_BLEND_WEIGHT * heuristic + LLM_BLEND_WEIGHT * llm_score)
    return max(0, min(100, blended))


def filter_highlighted_skills(
    suggested: Sequence[str], candidate_skills: Sequence[str]
) -> List[str]:
    """Keep only skills the candidate actually has.

    Matching is case-insensitive; the candidate's spelling is returned,
    duplicates are dropped and at most five skills are kept.

    Example:
        >>> filter_highlighted_skills(["python", "Kubernetes", "PYTHON", "sql"], ["Python", "SQL"])
        ['Python', 'SQL']
    """
    owned: Dict[str, str] = {}
    for skill in candidate_skills:
        owned.setdefault(normalize_term(skill), skill)

    kept: List[str] = []
    seen = set()
    for skill in suggested:
        if not isinstance(skill, str):
            continue
        key = normalize_term(skill)
        if key in owned and key not in seen:
            seen.add(key)
            kept.append(owned[key])
        if len(kept) == MAX_HIGHLIGHTED_SKILLS:
            break
    return kept


def _heuristic_only(match: JobMatch, explanation: str) -> RerankedJob:
    heuristic = match.scores.heuristic
    return RerankedJob(
        job_id=match.job_id,
        job=match.job,
        scores=RerankScores(
            heuristic=heuristic,
            llm=heuristic,
            final=heuristic,
            breakdown=match.scores.breakdown,
        ),
        explanation=explanation,
        risks=None,
        highlighted_skills=[],
    )


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise MatchingCancelled("Re-ranking cancelled")


class Reranker:
    """Blends heuristic match scores with a batched LLM judgment.

    Args:
        client: Chat client, or None to always serve heuristic-only results
        pool_size: Maximum number of matches sent to the LLM
    """

    def __init__(self, client: Optional[ChatCompletionClient], pool_size: int = DEFAULT_POOL_SIZE):
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")
        self.client = client
        self.pool_size = pool_size

    def rerank_matches(
        self,
        matches: Sequence[JobMatch],
        profile: CandidateProfile,
        preferences: SearchPreferences,
        top_k: int = DEFAULT_TOP_K,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[RerankedJob]:
        """Re-rank heuristic matches.

        Args:
            matches: JobMatch list sorted by heuristic score
            profile: Candidate profile
            preferences: Candidate search preferences
            top_k: Maximum number of results
            cancel_event: Optional cancellation signal, checked before and
                after the LLM call

        Returns:
            At most ``top_k`` RerankedJob sorted by final score descending;
            ties keep heuristic order

        Raises:
            MatchingCancelled: If ``cancel_event`` is set
        """
        if not matches or top_k <= 0:
            return []

        pool = list(matches[: self.pool_size])
        _check_cancelled(cancel_event)

        if self.client is None:
            logger.info(
                "No LLM client configured, returning heuristic ranking",
                extra={"event": "rerank.skipped", "pool_size": len(pool)},
            )
            return self._fallback(pool, top_k)

        try:
            results = self._request_scores(pool, profile, preferences, cancel_event)
        except LLMFailure as e:
            logger.warning(
                f"LLM re-ranking failed, falling back to heuristic scores: {e}",
                extra={
                    "event": "rerank.llm.failed",
                    "error_type": type(e.__cause__ or e).__name__,
                    "pool_size": len(pool),
                },
            )
            return self._fallback(pool, top_k)

        reranked = self._combine(pool, results, profile)
        # list.sort is stable, so equal finals keep heuristic order
        reranked.sort(key=lambda item: item.scores.final, reverse=True)
        output = reranked[:top_k]

        logger.info(
            f"Re-ranked {len(pool)} matches, returning {len(output)}",
            extra={
                "event": "rerank.completed",
                "pool_size": len(pool),
                "scored": len(results),
                "returned": len(output),
            },
        )
        return output

    def _request_scores(
        self,
        pool: List[JobMatch],
        profile: CandidateProfile,
        preferences: SearchPreferences,
        cancel_event: Optional[threading.Event],
    ) -> Dict[str, RerankResult]:
        """Call the LLM and index its results by job id (first entry wins).

        Raises:
            LLMFailure: On any client, JSON or schema error
            MatchingCancelled: If cancelled while the call was in flight
        """
        system_prompt, user_prompt = build_messages(pool, profile, preferences)

        logger.info(
            f"Requesting LLM scores for {len(pool)} jobs",
            extra={"event": "rerank.llm.requested", "pool_size": len(pool)},
        )

        try:
            raw = self.client.complete_json(system_prompt, user_prompt)
        except LLMFailure:
            raise
        except Exception as e:
            raise LLMFailure(f"LLM client error: {e}") from e

        _check_cancelled(cancel_event)
        response = parse_rerank_response(raw)

        pool_ids = {match.job_id for match in pool}
        results: Dict[str, RerankResult] = {}
        ignored = []
        for result in response.results:
            if result.job_id not in pool_ids:
                ignored.append(result.job_id)
                continue
            results.setdefault(result.job_id, result)

        if ignored:
            logger.debug(
                f"Ignoring {len(ignored)} unknown job id(s) in LLM response",
                extra={"event": "rerank.llm.unknown_ids", "job_ids": ignored},
            )
        return results

    def _combine(
        self,
        pool: List[JobMatch],
        results: Dict[str, RerankResult],
        profile: CandidateProfile,
    ) -> List[RerankedJob]:
        reranked = []
        omitted = []

        for match in pool:
            result = results.get(match.job_id)
            if result is None:
                omitted.append(match.job_id)
                reranked.append(_heuristic_only(match, OMITTED_EXPLANATION))
                continue

            heuristic = match.scores.heuristic
            reranked.append(
                RerankedJob(
                    job_id=match.job_id,
                    job=match.job,
                    scores=RerankScores(
                        heuristic=heuristic,
                        llm=result.llm_score,
                        final=blend_scores(heuristic, result.llm_score),
                        breakdown=match.scores.breakdown,
                    ),
                    explanation=truncate_text(result.explanation, max_length=MAX_EXPLANATION_CHARS),
                    risks=(
                        truncate_text(result.risks, max_length=MAX_RISKS_CHARS)
                        if result.risks
                        else None
                    ),
                    highlighted_skills=filter_highlighted_skills(
                        result.highlighted_skills, profile.skills
                    ),
                )
            )

        if omitted:
            omission = PartialLLMOmission(omitted)
            logger.info(
                str(omission),
                extra={"event": "rerank.llm.partial", "omitted_job_ids": omission.job_ids},
            )

        return reranked

    @staticmethod
    def _fallback(pool: List[JobMatch], top_k: int) -> List[RerankedJob]:
        """Heuristic-only results in heuristic order."""
        return [_heuristic_only(match, FALLBACK_EXPLANATION) for match in pool[:top_k]]
