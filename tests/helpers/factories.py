"""Builders and in-memory collaborators for matching tests."""

import json
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from autosearch.domain.models import CandidateProfile, JobPosting, SearchPreferences
from autosearch.embeddings import EmbeddingProvider
from autosearch.matching.exceptions import EmbeddingUnavailable
from autosearch.matching.models import JobMatch, MatchScores, ScoreBreakdown
from autosearch.reranking import ChatCompletionClient

NOW = datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc)


def make_profile(**overrides) -> CandidateProfile:
    """Candidate profile with sensible defaults."""
    data = {
        "id": "cand-1",
        "full_name": "Thandi Mokoena",
        "job_title": "Data Engineer",
        "skills": ["Python", "SQL"],
        "city": "Cape Town",
    }
    data.update(overrides)
    return CandidateProfile(**data)


def make_preferences(**overrides) -> SearchPreferences:
    data = {"candidate_id": "cand-1"}
    data.update(overrides)
    return SearchPreferences(**data)


def make_job(
    job_id: str = "job-1",
    title: str = "Data Engineer",
    days_old: float = 2,
    details: Optional[Dict] = None,
    **overrides,
) -> JobPosting:
    """Job posting created ``days_old`` days before NOW."""
    data = {
        "id": job_id,
        "title": title,
        "company": "Example Corp",
        "location": "Cape Town",
        "employment_type": "permanent",
        "description": "Build data pipelines.",
        "details": details if details is not None else {"required_skills": ["Python", "SQL"]},
        "created_at": NOW - timedelta(days=days_old),
    }
    data.update(overrides)
    return JobPosting(**data)


def make_breakdown(**overrides) -> ScoreBreakdown:
    data = {
        "vec_similarity": 0.8,
        "skills_jaccard": 0.5,
        "title_similarity": 0.8,
        "distance_km": None,
        "salary_alignment": 0.6,
        "seniority_alignment": 0.6,
        "type_arrangement": 0.7,
        "recency": 1.0,
    }
    data.update(overrides)
    return ScoreBreakdown(**data)


def make_match(job: JobPosting, heuristic: int) -> JobMatch:
    """JobMatch with a fixed heuristic score."""
    return JobMatch(
        job_id=job.id,
        job=job,
        scores=MatchScores(heuristic=heuristic, breakdown=make_breakdown()),
    )


class FakeEmbeddingProvider(EmbeddingProvider):
    """Returns canned vectors and records every embedded text."""

    def __init__(
        self,
        default: Sequence[float] = (1.0, 0.0, 0.0),
        by_text: Optional[Dict[str, Sequence[float]]] = None,
        fail: bool = False,
    ):
        self.default = list(default)
        self.by_text = by_text or {}
        self.fail = fail
        self.texts: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.texts.append(text)
        if self.fail:
            raise EmbeddingUnavailable("provider offline")
        return list(self.by_text.get(text, self.default))


class InMemoryCandidates:
    def __init__(self, profiles: Sequence[CandidateProfile] = ()):
        self.profiles = {profile.id: profile for profile in profiles}

    def get_by_id(self, candidate_id: str) -> Optional[CandidateProfile]:
        return self.profiles.get(candidate_id)


class InMemoryJobs:
    def __init__(self, jobs: Sequence[JobPosting] = ()):
        self.jobs = {job.id: job for job in jobs}
        self.requested: List[List[str]] = []

    def get_by_ids(self, job_ids: Sequence[str]) -> Dict[str, JobPosting]:
        self.requested.append(list(job_ids))
        return {job_id: self.jobs[job_id] for job_id in job_ids if job_id in self.jobs}


class InMemoryIndex:
    """Embedding index double.

    ``reindexed_vectors`` holds what ``reindex_candidate`` stores; a candidate
    missing from it stays without a vector.
    """

    def __init__(
        self,
        candidate_vectors: Optional[Dict[str, Sequence[float]]] = None,
        job_vectors: Sequence[Tuple[str, Sequence[float]]] = (),
        reindexed_vectors: Optional[Dict[str, Sequence[float]]] = None,
    ):
        self.candidate_vectors = dict(candidate_vectors or {})
        self.job_vectors = [(job_id, np.asarray(v, dtype=np.float64)) for job_id, v in job_vectors]
        self.reindexed_vectors = dict(reindexed_vectors or {})
        self.reindex_calls: List[str] = []

    def get_candidate_embedding(self, candidate_id: str):
        vector = self.candidate_vectors.get(candidate_id)
        return None if vector is None else np.asarray(vector, dtype=np.float64)

    def reindex_candidate(self, candidate_id: str) -> bool:
        self.reindex_calls.append(candidate_id)
        if candidate_id in self.reindexed_vectors:
            self.candidate_vectors[candidate_id] = self.reindexed_vectors[candidate_id]
            return True
        return False

    def list_job_embeddings(self):
        return list(self.job_vectors)


class ScriptedChatClient(ChatCompletionClient):
    """Chat client that replays a canned answer or raises a canned error."""

    def __init__(self, response=None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        if isinstance(self.response, (dict, list)):
            return json.dumps(self.response)
        return self.response
