"""Configuration schema models using Pydantic."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class EmbeddingProviderType(str, Enum):
    """Supported embedding providers."""

    OPENAI = "openai"
    HASHING = "hashing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class MatchingConfig(BaseModel):
    """Retrieval, filtering and re-ranking limits."""

    retrieval_limit: int = Field(
        200, ge=1, le=10000, description="Number of jobs kept by the vector scan"
    )
    rerank_pool_size: int = Field(
        50, ge=1, le=200, description="Maximum number of matches sent to the LLM"
    )
    rerank_top_k: int = Field(
        10, ge=1, le=200, description="Default number of re-ranked results"
    )
    scan_workers: int = Field(
        1, ge=1, le=64, description="Threads used to shard the similarity scan"
    )
    default_radius_km: float = Field(
        50.0, gt=0, description="Radius used when an enforced location sets none"
    )


class LLMConfig(BaseModel):
    """LLM re-ranking settings."""

    enabled: bool = Field(True, description="Whether to re-rank with an LLM")
    model: str = Field("gpt-4o", min_length=1, description="Chat completion model")
    temperature: float = Field(0.3, ge=0.0, le=2.0, description="Sampling temperature")
    timeout_seconds: float = Field(
        30.0, gt=0, le=600, description="Client-side timeout for the re-rank call"
    )

    @field_validator("model")
    @classmethod
    def strip_model(cls, v: str) -> str:
        """Strip whitespace from model name."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("model cannot be empty")
        return stripped


class EmbeddingsConfig(BaseModel):
    """Embedding provider settings."""

    provider: EmbeddingProviderType = Field(
        EmbeddingProviderType.OPENAI, description="Embedding provider (openai or hashing)"
    )
    model: str = Field(
        "text-embedding-3-small", min_length=1, description="Embedding model (openai only)"
    )
    dimension: int = Field(
        256, ge=8, le=8192, description="Vector length (hashing provider only)"
    )

    model_config = {"use_enum_values": True}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for Auto Search."""

    matching: MatchingConfig = Field(
        default_factory=MatchingConfig, description="Matching limits"
    )
    llm: LLMConfig = Field(default_factory=LLMConfig, description="LLM re-ranking settings")
    embeddings: EmbeddingsConfig = Field(
        default_factory=EmbeddingsConfig, description="Embedding provider settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @model_validator(mode="after")
    def validate_limits(self):
        """Validate that the re-rank output fits inside the re-rank pool."""
        if self.matching.rerank_top_k > self.matching.rerank_pool_size:
            raise ValueError(
                f"matching.rerank_top_k ({self.matching.rerank_top_k}) cannot exceed "
                f"matching.rerank_pool_size ({self.matching.rerank_pool_size})"
            )
        return self

    def requires_openai_key(self) -> bool:
        """Whether the embedding provider needs an OpenAI API key.

        The LLM re-ranker falls back to heuristic-only ranking without a key,
        so only the embedding provider makes the key mandatory.
        """
        return self.embeddings.provider == EmbeddingProviderType.OPENAI.value
