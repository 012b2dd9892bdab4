"""Semantic query composition from candidate state."""

from typing import List

from autosearch.domain.models import CandidateProfile, SearchPreferences


def compose_query_text(profile: CandidateProfile, preferences: SearchPreferences) -> str:
    """Build the text that is embedded to query the job corpus.

    Preferences take priority over the profile. Lines, in order:
    desired titles (or current role), skills, target seniority (or
    experience level), preferred location (or home city), employment types
    and work arrangements. Lines with no value are skipped.

    Args:
        profile: Candidate profile
        preferences: Candidate search preferences

    Returns:
        Newline-joined query text (deterministic for the same inputs)

    Example:
        >>> profile = CandidateProfile(id="c1", job_title="Analyst", skills=["SQL"])
        >>> print(compose_query_text(profile, SearchPreferences(candidate_id="c1")))
        Current role: Analyst
        Skills: SQL
    """
    lines: List[str] = []

    if preferences.job_titles:
        lines.append(f"Looking for: {', '.join(preferences.job_titles)}")
    elif profile.job_title:
        lines.append(f"Current role: {profile.job_title}")

    if profile.skills:
        lines.append(f"Skills: {', '.join(profile.skills)}")

    if preferences.seniority_target:
        lines.append(f"Seniority level: {preferences.seniority_target}")
    elif profile.experience_level:
        lines.append(f"Experience level: {profile.experience_level}")

    preferred_city = preferences.location.city if preferences.location else None
    if preferred_city:
        lines.append(f"Preferred location: {preferred_city}")
    elif profile.city:
        lines.append(f"Located in: {profile.city}")

    if preferences.employment_types:
        lines.append(f"Employment type: {', '.join(preferences.employment_types)}")

    if preferences.work_arrangements:
        lines.append(f"Work arrangement: {', '.join(preferences.work_arrangements)}")

    return "\n".join(lines)
