"""Unit tests for embedding providers and the embedding index."""

import math
from unittest.mock import MagicMock

import openai
import pytest

from autosearch.embeddings import (
    EmbeddingIndex,
    HashingEmbeddingProvider,
    OpenAIEmbeddingProvider,
    build_embedding_provider,
    candidate_document,
    job_document,
)
from autosearch.matching.exceptions import EmbeddingUnavailable
from autosearch.persistence import (
    CandidateRepository,
    EmbeddingRepository,
    JobRepository,
    close_database,
    get_session,
    init_database,
)
from tests.helpers import FakeEmbeddingProvider, make_job, make_profile


@pytest.fixture
def temp_database():
    init_database("sqlite:///:memory:")
    yield
    close_database()


class TestHashingEmbeddingProvider:
    """Tests for the offline hashing provider."""

    def test_fixed_dimension_and_unit_norm(self):
        vector = HashingEmbeddingProvider(dimension=64).embed("Python SQL data engineer")
        assert len(vector) == 64
        assert math.sqrt(sum(v * v for v in vector)) == pytest.approx(1.0)

    def test_deterministic(self):
        provider = HashingEmbeddingProvider()
        assert provider.embed("Python and SQL") == provider.embed("Python and SQL")

    def test_case_insensitive(self):
        provider = HashingEmbeddingProvider()
        assert provider.embed("PYTHON sql") == provider.embed("python SQL")

    def test_empty_text_is_unavailable(self):
        with pytest.raises(EmbeddingUnavailable):
            HashingEmbeddingProvider().embed("   ")

    def test_text_without_tokens_is_unavailable(self):
        with pytest.raises(EmbeddingUnavailable):
            HashingEmbeddingProvider().embed("!!! ???")

    def test_invalid_dimension(self):
        with pytest.raises(ValueError):
            HashingEmbeddingProvider(dimension=0)


class TestOpenAIEmbeddingProvider:
    """Tests for the OpenAI provider with a mocked client."""

    def _item(self, index, embedding):
        item = MagicMock()
        item.index = index
        item.embedding = embedding
        return item

    def test_embed_many_orders_by_index(self):
        client = MagicMock()
        client.embeddings.create.return_value = MagicMock(
            data=[self._item(1, [0.0, 1.0]), self._item(0, [1.0, 0.0])]
        )
        provider = OpenAIEmbeddingProvider(client, model="text-embedding-3-small")

        assert provider.embed_many(["first", "second"]) == [[1.0, 0.0], [0.0, 1.0]]
        client.embeddings.create.assert_called_once_with(
            model="text-embedding-3-small", input=["first", "second"]
        )

    def test_api_error_is_unavailable(self):
        client = MagicMock()
        client.embeddings.create.side_effect = openai.APIConnectionError(request=MagicMock())
        with pytest.raises(EmbeddingUnavailable):
            OpenAIEmbeddingProvider(client).embed("Python")

    def test_missing_vector_is_unavailable(self):
        client = MagicMock()
        client.embeddings.create.return_value = MagicMock(data=[])
        with pytest.raises(EmbeddingUnavailable):
            OpenAIEmbeddingProvider(client).embed("Python")

    def test_empty_text_never_reaches_api(self):
        client = MagicMock()
        with pytest.raises(EmbeddingUnavailable):
            OpenAIEmbeddingProvider(client).embed("")
        client.embeddings.create.assert_not_called()


class TestBuildEmbeddingProvider:
    """Tests for the provider factory."""

    def test_hashing(self):
        provider = build_embedding_provider("hashing", dimension=32)
        assert isinstance(provider, HashingEmbeddingProvider)
        assert provider.dimension == 32

    def test_openai_requires_key(self):
        with pytest.raises(ValueError):
            build_embedding_provider("openai", api_key=None)

    def test_openai(self):
        provider = build_embedding_provider("openai", model="text-embedding-3-large", api_key="sk-test")
        assert isinstance(provider, OpenAIEmbeddingProvider)
        assert provider.model == "text-embedding-3-large"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            build_embedding_provider("word2vec")


class TestDocuments:
    """Tests for the texts that get embedded."""

    def test_candidate_document(self):
        text = candidate_document(make_profile(experience_level="senior", province="Western Cape"))
        assert "Job Title: Data Engineer" in text
        assert "Experience Level: senior" in text
        assert "Location: Cape Town, Western Cape" in text
        assert "Skills: Python, SQL" in text

    def test_job_document(self):
        job = make_job(
            details={
                "seniority": "senior",
                "required_skills": ["Python"],
                "nice_to_have_skills": ["Airflow"],
                "responsibilities": ["Own pipelines", "Mentor juniors"],
            }
        )
        text = job_document(job)
        assert text.splitlines()[0] == "Data Engineer"
        assert "Required Skills: Python" in text
        assert "Nice to Have: Airflow" in text
        assert "Responsibilities: Own pipelines; Mentor juniors" in text


class TestEmbeddingIndex:
    """Tests for reindexing against a real database."""

    def _seed(self):
        with get_session() as session:
            CandidateRepository(session).upsert(make_profile())
            JobRepository(session).bulk_upsert([make_job("job-1"), make_job("job-2")])

    def _index(self, session, provider):
        return EmbeddingIndex(
            CandidateRepository(session),
            JobRepository(session),
            EmbeddingRepository(session),
            provider,
        )

    def test_reindex_candidate_stores_vector(self, temp_database):
        self._seed()
        with get_session() as session:
            index = self._index(session, FakeEmbeddingProvider(default=[0.6, 0.8]))
            assert index.get_candidate_embedding("cand-1") is None
            assert index.reindex_candidate("cand-1") is True
            assert list(index.get_candidate_embedding("cand-1")) == [0.6, 0.8]

    def test_reindex_unknown_candidate(self, temp_database):
        with get_session() as session:
            assert self._index(session, FakeEmbeddingProvider()).reindex_candidate("ghost") is False

    def test_provider_failure_stores_nothing(self, temp_database):
        self._seed()
        with get_session() as session:
            index = self._index(session, FakeEmbeddingProvider(fail=True))
            assert index.reindex_candidate("cand-1") is False
            assert index.get_candidate_embedding("cand-1") is None

    def test_index_all_jobs_only_missing(self, temp_database):
        self._seed()
        provider = FakeEmbeddingProvider(default=[1.0, 0.0])
        with get_session() as session:
            index = self._index(session, provider)
            assert index.index_job("job-1") is True
            assert index.index_all_jobs() == 1
            assert [job_id for job_id, _ in index.list_job_embeddings()] == ["job-1", "job-2"]
            assert index.index_all_jobs(only_missing=False) == 2

    def test_index_all_candidates(self, temp_database):
        self._seed()
        with get_session() as session:
            index = self._index(session, FakeEmbeddingProvider())
            assert index.index_all_candidates() == 1
            assert index.index_all_candidates() == 0
