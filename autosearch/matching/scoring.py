"""Heuristic scoring functions for job matching.

Each sub-score maps one aspect of candidate/job fit into [0, 1]:
skills overlap, title match, geographic proximity, salary alignment,
seniority distance, employment type / work arrangement match and posting
recency. ``heuristic_score`` combines them with fixed weights into a single
integer score in [0, 100].
"""

import math
from datetime import datetime
from typing import Dict, Iterable, Optional, Sequence

from autosearch.utils.text import normalize_term, normalize_terms
from autosearch.utils.timestamps import age_in_days

from .models import HeuristicFeatures

EARTH_RADIUS_KM = 6371.0

# Location decay constant in km: exp(-distance / k)
LOCATION_DECAY_KM = 20.0

NEUTRAL_LOCATION_SCORE = 0.5
NEUTRAL_SALARY_SCORE = 0.6
NEUTRAL_SENIORITY_SCORE = 0.6
NEUTRAL_TYPE_ARRANGEMENT_SCORE = 0.7

TITLE_MATCH_SCORE = 0.8
TITLE_MISMATCH_SCORE = 0.3
TITLE_NEUTRAL_SCORE = 0.5

RECENCY_FULL_SCORE_DAYS = 7.0
RECENCY_FLOOR_DAYS = 90.0
RECENCY_FLOOR_SCORE = 0.1

SENIORITY_LADDER = (
    "intern",
    "entry",
    "junior",
    "intermediate",
    "mid",
    "senior",
    "lead",
    "manager",
    "director",
    "executive",
)

# Score by number of ladder steps between job and target; further is 0.2
SENIORITY_STEP_SCORES = {0: 1.0, 1: 0.7, 2: 0.4}
SENIORITY_FAR_SCORE = 0.2

HEURISTIC_WEIGHTS: Dict[str, float] = {
    "vec_similarity": 0.35,
    "skills_jaccard": 0.15,
    "title_similarity": 0.10,
    "location": 0.10,
    "salary_alignment": 0.10,
    "seniority_alignment": 0.08,
    "type_arrangement": 0.07,
    "recency": 0.05,
}


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp a value into [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 rounding away from zero for positives.

    Python's built-in ``round`` uses banker's rounding (``round(72.5) == 72``);
    scores must round 72.5 up to 73.
    """
    return int(math.floor(value + 0.5))


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    """Jaccard similarity of two term lists, case-insensitive and trimmed.

    Args:
        a: First list (e.g., candidate skills)
        b: Second list (e.g., job required + nice-to-have skills)

    Returns:
        |A ∩ B| / |A ∪ B|, or 0.0 when both are empty

    Example:
        >>> jaccard(["Python", "SQL"], ["python", "sql", "AWS"])
        0.6666666666666666
    """
    set_a = set(normalize_terms(a))
    set_b = set(normalize_terms(b))
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def title_similarity(job_title: str, preferred_titles: Sequence[str]) -> float:
    """Coarse title match signal.

    Returns 0.8 if any preferred title is a case-insensitive substring of the
    job title, 0.3 if titles were supplied but none match, and 0.5 if no
    title preference exists.
    """
    preferred = normalize_terms(preferred_titles)
    if not preferred:
        return TITLE_NEUTRAL_SCORE
    title = normalize_term(job_title or "")
    if any(candidate in title for candidate in preferred):
        return TITLE_MATCH_SCORE
    return TITLE_MISMATCH_SCORE


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers.

    Example:
        >>> round(haversine_km(-33.9249, 18.4241, -26.2041, 28.0473))
        1261
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Guard against tiny floating overshoot above 1.0 for antipodal points
    a = clamp(a)
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def location_score(distance_km: Optional[float], decay_km: float = LOCATION_DECAY_KM) -> float:
    """Exponential decay of distance; neutral 0.5 when the distance is unknown."""
    if distance_km is None:
        return NEUTRAL_LOCATION_SCORE
    return clamp(math.exp(-max(distance_km, 0.0) / decay_km))


def salary_alignment(
    job_min: Optional[float],
    job_max: Optional[float],
    cand_min: Optional[float],
    cand_max: Optional[float],
) -> float:
    """Overlap of the candidate's and the job's salary bands.

    A job that states no salary scores a neutral 0.6 regardless of the
    candidate's expectations. Otherwise the overlap of the two bands as a
    fraction of their combined span maps to ``0.6 + 0.4 * fraction`` when the
    bands overlap, and 0.1 when they don't. Missing candidate bounds default to
    0 (min) and the candidate min (max).

    Example:
        >>> salary_alignment(20000, 25000, 20000, 25000)
        1.0
        >>> salary_alignment(20000, 25000, 40000, 50000)
        0.1
    """
    if job_min is None and job_max is None:
        return NEUTRAL_SALARY_SCORE

    j_min = job_min if job_min is not None else job_max
    j_max = job_max if job_max is not None else job_min
    c_min = cand_min if cand_min is not None else 0.0
    c_max = cand_max if cand_max is not None else c_min

    overlap = max(0.0, min(j_max, c_max) - max(j_min, c_min))
    span = max(j_max, c_max) - min(j_min, c_min)
    if span == 0:
        span = 1.0

    if overlap > 0:
        return clamp(0.6 + 0.4 * (overlap / span))
    return 0.1


def seniority_alignment(job_seniority: Optional[str], target_seniority: Optional[str]) -> float:
    """Closeness of two seniority levels on the ordered ladder.

    Exact match scores 1.0, one step 0.7, two steps 0.4 and anything further
    0.2. Unknown or unrecognised levels on either side score a neutral 0.6.
    """
    if not job_seniority or not target_seniority:
        return NEUTRAL_SENIORITY_SCORE

    job_level = normalize_term(job_seniority)
    target_level = normalize_term(target_seniority)
    if job_level not in SENIORITY_LADDER or target_level not in SENIORITY_LADDER:
        return NEUTRAL_SENIORITY_SCORE

    steps = abs(SENIORITY_LADDER.index(job_level) - SENIORITY_LADDER.index(target_level))
    return SENIORITY_STEP_SCORES.get(steps, SENIORITY_FAR_SCORE)


def type_arrangement_match(
    job_employment_type: Optional[str],
    job_work_arrangement: Optional[str],
    preferred_employment_types: Sequence[str],
    preferred_work_arrangements: Sequence[str],
) -> float:
    """Average of the employment-type and work-arrangement checks.

    A check counts only when its preference list is supplied and the job
    states the corresponding value. With no counted checks the score is a
    neutral 0.7.
    """
    score = 0.0
    factors = 0

    employment_types = set(normalize_terms(preferred_employment_types))
    if employment_types and job_employment_type:
        score += 1.0 if normalize_term(job_employment_type) in employment_types else 0.0
        factors += 1

    arrangements = set(normalize_terms(preferred_work_arrangements))
    if arrangements and job_work_arrangement:
        score += 1.0 if normalize_term(job_work_arrangement) in arrangements else 0.0
        factors += 1

    if factors == 0:
        return NEUTRAL_TYPE_ARRANGEMENT_SCORE
    return score / factors


def recency_score(posted_at: datetime, now: Optional[datetime] = None) -> float:
    """Freshness of a posting.

    1.0 within 7 days, linear decay to 0.1 at 90 days, 0.1 beyond that.
    A pure function of ``now - posted_at``.
    """
    age = age_in_days(posted_at, now)
    if age <= RECENCY_FULL_SCORE_DAYS:
        return 1.0
    if age >= RECENCY_FLOOR_DAYS:
        return RECENCY_FLOOR_SCORE
    decay_window = RECENCY_FLOOR_DAYS - RECENCY_FULL_SCORE_DAYS
    return clamp(1.0 - (age - RECENCY_FULL_SCORE_DAYS) / decay_window * (1.0 - RECENCY_FLOOR_SCORE))


def heuristic_score(features: HeuristicFeatures) -> int:
    """Combine the sub-scores into one integer score in [0, 100].

    score = 100 * (0.35 vec + 0.15 skills + 0.10 title + 0.10 location
                   + 0.10 salary + 0.08 seniority + 0.07 type + 0.05 recency)

    Args:
        features: Sub-scores of one job

    Returns:
        Rounded (half-up) and clamped score
    """
    components = {
        "vec_similarity": features.vec_similarity,
        "skills_jaccard": features.skills_jaccard,
        "title_similarity": features.title_similarity,
        "location": location_score(features.distance_km),
        "salary_alignment": features.salary_alignment,
        "seniority_alignment": features.seniority_alignment,
        "type_arrangement": features.type_arrangement,
        "recency": features.recency,
    }
    weighted = sum(HEURISTIC_WEIGHTS[name] * clamp(value) for name, value in components.items())
    return int(clamp(round_half_up(100 * weighted), 0, 100))
