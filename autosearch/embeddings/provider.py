"""Embedding providers: turn free text into a fixed-length vector.

Two implementations ship with the package:
- OpenAIEmbeddingProvider: the OpenAI embeddings API (text-embedding-3-small)
- HashingEmbeddingProvider: deterministic token hashing for offline use and tests

Any provider failure surfaces as EmbeddingUnavailable; a provider never
returns an empty or placeholder vector.
"""

import hashlib
import re
from abc import ABC, abstractmethod
from typing import List, Optional

import openai

from autosearch.logging import get_logger
from autosearch.matching.exceptions import EmbeddingUnavailable

logger = get_logger(__name__, component="embeddings")

DEFAULT_OPENAI_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_HASHING_DIMENSION = 256

_TOKEN_PATTERN = re.compile(r"[a-z0-9+#.]+")


class EmbeddingProvider(ABC):
    """Abstract embedding provider."""

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """Embed a single text.

        Raises:
            EmbeddingUnavailable: If no vector can be produced
        """
        ...

    def embed_many(self, texts: List[str]) -> List[List[float]]:
        """Embed several texts, one request per text unless overridden."""
        return [self.embed(text) for text in texts]


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embeddings from the OpenAI API.

    The client is constructed by the caller and injected, so tests can pass
    a mock and the process never holds a hidden global client.
    """

    def __init__(self, client: "openai.OpenAI", model: str = DEFAULT_OPENAI_EMBEDDING_MODEL):
        self.client = client
        self.model = model

    def embed(self, text: str) -> List[float]:
        return self.embed_many([text])[0]

    def embed_many(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        cleaned = [_require_text(text) for text in texts]

        try:
            response = self.client.embeddings.create(model=self.model, input=cleaned)
        except openai.OpenAIError as e:
            logger.error(
                f"Embedding request failed: {e}",
                extra={
                    "event": "embeddings.request.failed",
                    "model": self.model,
                    "error_type": type(e).__name__,
                },
            )
            raise EmbeddingUnavailable(f"Embedding provider failed: {e}") from e

        by_index = {item.index: list(item.embedding) for item in response.data}
        missing = [i for i in range(len(cleaned)) if not by_index.get(i)]
        if missing:
            raise EmbeddingUnavailable(
                f"Embedding provider returned no vector for {len(missing)} of {len(cleaned)} inputs"
            )

        logger.debug(
            f"Embedded {len(cleaned)} text(s)",
            extra={"event": "embeddings.request.completed", "model": self.model, "count": len(cleaned)},
        )
        return [by_index[i] for i in range(len(cleaned))]


class HashingEmbeddingProvider(EmbeddingProvider):
    """Deterministic bag-of-tokens embeddings via feature hashing.

    Each lowercase token is hashed (md5) into one bucket with a signed
    weight; the vector is L2-normalised. Lexical only, but stable across
    processes and free of network calls.
    """

    def __init__(self, dimension: int = DEFAULT_HASHING_DIMENSION):
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.dimension = dimension

    def embed(self, text: str) -> List[float]:
        cleaned = _require_text(text)
        vector = [0.0] * self.dimension

        for token in _TOKEN_PATTERN.findall(cleaned.lower()):
            digest = hashlib.md5(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:4], "big") % self.dimension
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign

        norm = sum(value * value for value in vector) ** 0.5
        if norm == 0.0:
            raise EmbeddingUnavailable("Text contains no embeddable tokens")
        return [value / norm for value in vector]


def build_embedding_provider(
    provider: str,
    model: str = DEFAULT_OPENAI_EMBEDDING_MODEL,
    dimension: int = DEFAULT_HASHING_DIMENSION,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
) -> EmbeddingProvider:
    """Create the provider named in configuration.

    Args:
        provider: "openai" or "hashing"
        model: OpenAI embedding model
        dimension: Vector length for the hashing provider
        api_key: OpenAI API key (required for "openai")
        timeout: Client timeout in seconds

    Raises:
        ValueError: If the provider is unknown or the API key is missing
    """
    if provider == "hashing":
        return HashingEmbeddingProvider(dimension=dimension)
    if provider == "openai":
        if not api_key:
            raise ValueError("OPENAI_API_KEY is required for the openai embedding provider")
        client = openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        return OpenAIEmbeddingProvider(client, model=model)
    raise ValueError(f"Unknown embedding provider: {provider}")


def _require_text(text: Optional[str]) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise EmbeddingUnavailable("Cannot embed empty text")
    return cleaned
