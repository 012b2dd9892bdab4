"""Prompt construction for the batched re-ranking request."""

import json
from typing import Any, Dict, Sequence, Tuple

from autosearch.domain.models import CandidateProfile, SearchPreferences
from autosearch.matching.filters import DEFAULT_RADIUS_KM, candidate_salary_bounds
from autosearch.matching.models import JobMatch

MAX_EXPLANATION_CHARS = 320
MAX_RISKS_CHARS = 200
MIN_HIGHLIGHTED_SKILLS = 2
MAX_HIGHLIGHTED_SKILLS = 5

SYSTEM_PROMPT = f"""You re-rank job matches for one candidate.

Rules:
- Use only the fields provided for the candidate and each job. Do not invent facts about the candidate, the company or the role.
- Weigh title fit, required and transferable skills, seniority, location and radius, salary fit, employment type, work arrangement and posting recency.
- Score every job in the request exactly once, keyed by its job_id.
- explanation: at most {MAX_EXPLANATION_CHARS} characters.
- risks: at most {MAX_RISKS_CHARS} characters describing gaps or concerns, or null.
- highlighted_skills: {MIN_HIGHLIGHTED_SKILLS} to {MAX_HIGHLIGHTED_SKILLS} skills taken from the candidate's own skills list.
- Respond with a single JSON object and nothing else, matching:
{{"results": [{{"job_id": "string", "llm_score": 0-100, "explanation": "string", "risks": "string or null", "highlighted_skills": ["string"]}}]}}"""


def build_candidate_summary(
    profile: CandidateProfile, preferences: SearchPreferences
) -> Dict[str, Any]:
    """Candidate facts sent to the LLM (preferences over profile)."""
    location = preferences.location
    salary_min, salary_max = candidate_salary_bounds(profile, preferences)

    radius = None
    if location is not None:
        radius = location.radius_km if location.radius_km is not None else DEFAULT_RADIUS_KM

    return {
        "job_titles": preferences.job_titles or ([profile.job_title] if profile.job_title else []),
        "skills": list(profile.skills),
        "experience_level": preferences.seniority_target or profile.experience_level,
        "location": {
            "city": (location.city if location else None) or profile.city,
            "province": (location.province if location else None) or profile.province,
            "radius_km": radius,
        },
        "employment_types": list(preferences.employment_types),
        "work_arrangements": list(preferences.work_arrangements),
        "salary": {"min": salary_min, "max": salary_max},
    }


def build_job_snippet(match: JobMatch) -> Dict[str, Any]:
    """Job facts and heuristic signals sent to the LLM."""
    job = match.job
    details = job.details
    breakdown = match.scores.breakdown
    return {
        "job_id": match.job_id,
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "seniority": details.seniority,
        "employment_type": job.employment_type,
        "work_arrangement": details.work_arrangement,
        "skills_required": list(details.required_skills),
        "skills_nice": list(details.nice_to_have_skills),
        "salary_min": details.salary_min,
        "salary_max": details.salary_max,
        "distance_km": _rounded(breakdown.distance_km, 1),
        "vec_sim": _rounded(breakdown.vec_similarity, 3),
        "skills_jaccard": _rounded(breakdown.skills_jaccard, 3),
        "title_sim": _rounded(breakdown.title_similarity, 3),
        "recency": _rounded(breakdown.recency, 3),
        "heuristic_score": match.scores.heuristic,
    }


def build_user_prompt(candidate: Dict[str, Any], jobs: Sequence[Dict[str, Any]]) -> str:
    """The user message: a JSON object ``{"candidate": ..., "jobs": [...]}``."""
    return json.dumps({"candidate": candidate, "jobs": list(jobs)}, ensure_ascii=False)


def build_messages(
    matches: Sequence[JobMatch], profile: CandidateProfile, preferences: SearchPreferences
) -> Tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for a batch of matches."""
    candidate = build_candidate_summary(profile, preferences)
    jobs = [build_job_snippet(match) for match in matches]
    return SYSTEM_PROMPT, build_user_prompt(candidate, jobs)


def _rounded(value, digits: int):
    return None if value is None else round(value, digits)
