"""Result assembly: JSON-ready payloads and plain-text shortlists.

Payload keys use camelCase so the output can be served to web clients
unchanged.
"""

from typing import Any, Dict, List, Sequence

from autosearch.utils.text import truncate_text
from autosearch.utils.timestamps import format_timestamp

from .models import JobMatch, RerankedJob


def _job_fields(job) -> Dict[str, Any]:
    return {
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "employmentType": job.employment_type,
        "postedAt": format_timestamp(job.created_at),
    }


def build_result_payload(reranked: RerankedJob) -> Dict[str, Any]:
    """Build the JSON-ready payload of a re-ranked job.

    Returns:
        Dict with keys:
        - jobId, title, company, location, employmentType, postedAt
        - scores: {heuristic, llm, final, breakdown}
        - explanation, risks, highlightedSkills
    """
    return {
        "jobId": reranked.job_id,
        **_job_fields(reranked.job),
        "scores": {
            "heuristic": reranked.scores.heuristic,
            "llm": reranked.scores.llm,
            "final": reranked.scores.final,
            "breakdown": reranked.scores.breakdown.to_dict(),
        },
        "explanation": reranked.explanation,
        "risks": reranked.risks,
        "highlightedSkills": list(reranked.highlighted_skills),
    }


def build_match_payload(match: JobMatch) -> Dict[str, Any]:
    """Build the JSON-ready payload of a heuristic-only match.

    Same shape as ``build_result_payload`` without the LLM fields.
    """
    return {
        "jobId": match.job_id,
        **_job_fields(match.job),
        "scores": {
            "heuristic": match.scores.heuristic,
            "breakdown": match.scores.breakdown.to_dict(),
        },
    }


def format_shortlist(results: Sequence[RerankedJob], width: int = 100) -> str:
    """Render re-ranked results as a numbered plain-text list.

    Example output:
        1. Senior Data Engineer @ Example Corp (Cape Town) [final 84 | heuristic 80 | llm 93]
           Strong overlap on Python and SQL with a matching seniority level.
           Skills: Python, SQL
           Risks: No AWS experience listed.
    """
    if not results:
        return "No matching jobs found."

    lines: List[str] = []
    for rank, item in enumerate(results, 1):
        job = item.job
        header = f"{rank}. {job.title}"
        if job.company:
            header += f" @ {job.company}"
        if job.location:
            header += f" ({job.location})"
        header += (
            f" [final {item.scores.final} | heuristic {item.scores.heuristic}"
            f" | llm {item.scores.llm}]"
        )
        lines.append(header)
        lines.append(f"   {truncate_text(item.explanation, max_length=width)}")
        if item.highlighted_skills:
            lines.append(f"   Skills: {', '.join(item.highlighted_skills)}")
        if item.risks:
            lines.append(f"   Risks: {truncate_text(item.risks, max_length=width)}")

    return "\n".join(lines)


def format_match_list(matches: Sequence[JobMatch]) -> str:
    """Render heuristic-only matches as a numbered plain-text list."""
    if not matches:
        return "No matching jobs found."

    lines = []
    for rank, match in enumerate(matches, 1):
        job = match.job
        company = f" @ {job.company}" if job.company else ""
        lines.append(f"{rank}. {job.title}{company} [heuristic {match.heuristic}]")
    return "\n".join(lines)
