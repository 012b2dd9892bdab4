"""Configuration management module for Auto Search."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_config, validate_config_file
from .models import (
    AppConfig,
    EmbeddingProviderType,
    EmbeddingsConfig,
    LLMConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MatchingConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "parse_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "MatchingConfig",
    "LLMConfig",
    "EmbeddingsConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "EmbeddingProviderType",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
