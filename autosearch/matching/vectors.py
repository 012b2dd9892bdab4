"""Vector similarity and exhaustive top-N retrieval.

Job vectors are scanned in full for every request. The scan can optionally be
split into contiguous shards scored on a thread pool; each pair is computed
independently and the merged result is re-sorted with the same key, so the
output is identical for any worker count.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import DimensionMismatch, MatchingCancelled

logger = logging.getLogger(__name__)

DEFAULT_RETRIEVAL_LIMIT = 200

VectorLike = Union[np.ndarray, Sequence[float]]

# (job_id, similarity, storage position)
ScoredVector = Tuple[str, float, int]


def to_vector(values: VectorLike) -> np.ndarray:
    """Convert a sequence of floats into a 1-D float64 array."""
    vector = np.asarray(values, dtype=np.float64)
    if vector.ndim != 1:
        raise ValueError(f"Expected a 1-D vector, got shape {vector.shape}")
    return vector


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """Cosine similarity rescaled from [-1, 1] into [0, 1].

    Args:
        a: First vector
        b: Second vector

    Returns:
        ``(cos(a, b) + 1) / 2``, or 0.0 when either vector has zero magnitude

    Raises:
        DimensionMismatch: If the vectors have different lengths

    Example:
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0])
        1.0
        >>> cosine_similarity([1.0, 0.0], [-1.0, 0.0])
        0.0
    """
    left = to_vector(a)
    right = to_vector(b)
    if left.shape[0] != right.shape[0]:
        raise DimensionMismatch(left.shape[0], right.shape[0])

    norm_left = float(np.linalg.norm(left))
    norm_right = float(np.linalg.norm(right))
    if norm_left == 0.0 or norm_right == 0.0:
        return 0.0

    cosine = float(np.dot(left, right)) / (norm_left * norm_right)
    # Rounding error can push |cos| marginally past 1
    cosine = max(-1.0, min(1.0, cosine))
    return (cosine + 1.0) / 2.0


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise MatchingCancelled("Similarity scan cancelled")


def _score_shard(
    query: np.ndarray,
    shard: Sequence[Tuple[str, VectorLike]],
    offset: int,
    cancel_event: Optional[threading.Event],
) -> List[ScoredVector]:
    scored = []
    for index, (job_id, vector) in enumerate(shard):
        _check_cancelled(cancel_event)
        scored.append((job_id, cosine_similarity(query, vector), offset + index))
    return scored


def _shard_bounds(total: int, workers: int) -> List[Tuple[int, int]]:
    """Split [0, total) into at most ``workers`` contiguous, non-empty ranges."""
    workers = max(1, min(workers, total))
    size, remainder = divmod(total, workers)
    bounds = []
    start = 0
    for shard_index in range(workers):
        end = start + size + (1 if shard_index < remainder else 0)
        bounds.append((start, end))
        start = end
    return bounds


def rank_by_similarity(
    query: VectorLike,
    job_vectors: Sequence[Tuple[str, VectorLike]],
    limit: int = DEFAULT_RETRIEVAL_LIMIT,
    workers: int = 1,
    cancel_event: Optional[threading.Event] = None,
) -> List[Tuple[str, float]]:
    """Score every job vector against the query and keep the best ``limit``.

    Results are sorted by similarity descending; ties keep storage order
    (the order of ``job_vectors``).

    Args:
        query: Query embedding
        job_vectors: ``(job_id, vector)`` pairs in storage order
        limit: Maximum number of results
        workers: Number of threads to shard the scan over
        cancel_event: Optional cancellation signal checked per vector

    Returns:
        List of ``(job_id, similarity)`` tuples

    Raises:
        DimensionMismatch: If any job vector differs in length from the query
        MatchingCancelled: If ``cancel_event`` is set during the scan
    """
    _check_cancelled(cancel_event)
    query_vector = to_vector(query)
    total = len(job_vectors)
    if total == 0 or limit <= 0:
        return []

    if workers <= 1 or total == 1:
        scored = _score_shard(query_vector, job_vectors, 0, cancel_event)
    else:
        bounds = _shard_bounds(total, workers)
        scored = []
        with ThreadPoolExecutor(max_workers=len(bounds), thread_name_prefix="similarity-scan") as pool:
            futures = [
                pool.submit(_score_shard, query_vector, job_vectors[start:end], start, cancel_event)
                for start, end in bounds
            ]
            for future in futures:
                scored.extend(future.result())

    scored.sort(key=lambda item: (-item[1], item[2]))
    top = scored[:limit]

    logger.debug(
        f"Scanned {total} job vectors, kept {len(top)}",
        extra={
            "event": "retrieval.scan.completed",
            "scanned": total,
            "kept": len(top),
            "workers": workers,
        },
    )

    return [(job_id, similarity) for job_id, similarity, _ in top]
