"""Embedding providers and the stored-vector index.

This module provides:
- EmbeddingProvider: text -> vector interface
- OpenAIEmbeddingProvider / HashingEmbeddingProvider: concrete providers
- EmbeddingIndex: candidate/job vector access and reindexing
"""

from .index import EmbeddingIndex, candidate_document, job_document
from .provider import (
    EmbeddingProvider,
    HashingEmbeddingProvider,
    OpenAIEmbeddingProvider,
    build_embedding_provider,
)

__all__ = [
    "EmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "HashingEmbeddingProvider",
    "build_embedding_provider",
    "EmbeddingIndex",
    "candidate_document",
    "job_document",
]
