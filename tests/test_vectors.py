"""Unit tests for cosine similarity and exhaustive top-N retrieval."""

import threading

import numpy as np
import pytest

from autosearch.matching.exceptions import DimensionMismatch, MatchingCancelled
from autosearch.matching.vectors import (
    _shard_bounds,
    cosine_similarity,
    rank_by_similarity,
    to_vector,
)


class TestCosineSimilarity:
    """Tests for rescaled cosine similarity."""

    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(0.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.5)

    def test_magnitude_does_not_matter(self):
        assert cosine_similarity([1.0, 1.0], [10.0, 10.0]) == pytest.approx(1.0)

    def test_zero_vector_scores_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0

    def test_symmetric(self):
        a, b = [0.3, -0.2, 0.9], [0.1, 0.4, -0.5]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatch) as exc_info:
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])
        assert exc_info.value.left == 2
        assert exc_info.value.right == 3

    def test_to_vector_rejects_matrices(self):
        with pytest.raises(ValueError):
            to_vector([[1.0, 0.0], [0.0, 1.0]])


class TestRankBySimilarity:
    """Tests for the exhaustive scan."""

    def test_sorted_by_similarity_descending(self):
        vectors = [
            ("job-a", [0.0, 1.0]),
            ("job-b", [1.0, 0.0]),
            ("job-c", [1.0, 1.0]),
        ]
        ranked = rank_by_similarity([1.0, 0.0], vectors)
        assert [job_id for job_id, _ in ranked] == ["job-b", "job-c", "job-a"]
        assert ranked[0][1] == pytest.approx(1.0)

    def test_limit_keeps_best(self):
        vectors = [(f"job-{i}", [1.0, i / 10]) for i in range(10)]
        ranked = rank_by_similarity([1.0, 0.0], vectors, limit=3)
        assert [job_id for job_id, _ in ranked] == ["job-0", "job-1", "job-2"]

    def test_ties_keep_storage_order(self):
        vectors = [("job-3", [1.0, 0.0]), ("job-1", [2.0, 0.0]), ("job-2", [3.0, 0.0])]
        ranked = rank_by_similarity([1.0, 0.0], vectors)
        assert [job_id for job_id, _ in ranked] == ["job-3", "job-1", "job-2"]

    def test_empty_corpus(self):
        assert rank_by_similarity([1.0, 0.0], []) == []

    def test_zero_limit(self):
        assert rank_by_similarity([1.0, 0.0], [("job-1", [1.0, 0.0])], limit=0) == []

    def test_mismatched_job_vector_raises(self):
        vectors = [("job-1", [1.0, 0.0]), ("job-2", [1.0, 0.0, 0.0])]
        with pytest.raises(DimensionMismatch):
            rank_by_similarity([1.0, 0.0], vectors)

    @pytest.mark.parametrize("workers", [2, 3, 4, 8, 50])
    def test_parallel_scan_matches_serial(self, workers):
        rng = np.random.default_rng(42)
        vectors = [(f"job-{i:03d}", rng.normal(size=16)) for i in range(101)]
        # Duplicate vectors create exact ties across shard boundaries
        vectors.extend((f"dup-{i:03d}", vectors[i][1].copy()) for i in range(0, 100, 7))
        query = rng.normal(size=16)

        serial = rank_by_similarity(query, vectors, limit=40, workers=1)
        parallel = rank_by_similarity(query, vectors, limit=40, workers=workers)

        assert parallel == serial

    def test_cancelled_before_scan(self):
        cancel_event = threading.Event()
        cancel_event.set()
        with pytest.raises(MatchingCancelled):
            rank_by_similarity([1.0, 0.0], [("job-1", [1.0, 0.0])], cancel_event=cancel_event)

    def test_cancelled_during_scan(self):
        cancel_event = threading.Event()

        class CancellingVectors(list):
            """Sets the cancel signal once the scan reads the second vector."""

            def __getitem__(self, index):
                if isinstance(index, int) and index == 1:
                    cancel_event.set()
                return super().__getitem__(index)

            def __iter__(self):
                for index in range(len(self)):
                    yield self[index]

        vectors = CancellingVectors([(f"job-{i}", [1.0, 0.0]) for i in range(5)])
        with pytest.raises(MatchingCancelled):
            rank_by_similarity([1.0, 0.0], vectors, cancel_event=cancel_event)


class TestShardBounds:
    """Tests for contiguous shard splitting."""

    def test_even_split(self):
        assert _shard_bounds(9, 3) == [(0, 3), (3, 6), (6, 9)]

    def test_remainder_goes_to_first_shards(self):
        assert _shard_bounds(10, 3) == [(0, 4), (4, 7), (7, 10)]

    def test_more_workers_than_items(self):
        assert _shard_bounds(2, 5) == [(0, 1), (1, 2)]

    def test_shards_cover_range(self):
        bounds = _shard_bounds(1000, 7)
        assert bounds[0][0] == 0
        assert bounds[-1][1] == 1000
        assert all(a[1] == b[0] for a, b in zip(bounds, bounds[1:]))
