"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/autosearch.db"


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.openai_api_key = openai_api_key
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level
        self.environment = environment or "local"


def load_environment_config(require_openai: bool = False) -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Optional environment variables:
    - OPENAI_API_KEY: API key for embeddings and LLM re-ranking
      (required when ``require_openai`` is True)
    - DATABASE_URL: Database URL (default: sqlite:///./data/autosearch.db)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Deployment environment tag stamped on log records

    Args:
        require_openai: Fail when OPENAI_API_KEY is not set

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    openai_api_key = os.getenv("OPENAI_API_KEY")
    database_url = os.getenv("DATABASE_URL")
    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")

    if require_openai and not (openai_api_key and openai_api_key.strip()):
        errors.append("Missing required environment variable: OPENAI_API_KEY")

    # Validate log level if provided
    if log_level:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_level.upper() not in valid_levels:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(valid_levels)}"
            )

    if database_url is not None and not database_url.strip():
        errors.append("DATABASE_URL is set but empty")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Set embeddings.provider to 'hashing' and llm.enabled to false to run offline",
                "Ensure LOG_LEVEL is a standard level name",
            ],
        )

    return EnvironmentConfig(
        openai_api_key=openai_api_key.strip() if openai_api_key else None,
        database_url=database_url.strip() if database_url else None,
        log_level=log_level.upper() if log_level else None,
        environment=environment,
    )
