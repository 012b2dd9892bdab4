"""Integration tests for configuration module."""

from pathlib import Path

import pytest

from autosearch.config import (
    AppConfig,
    ConfigurationError,
    EmbeddingProviderType,
    load_config,
    parse_config,
    validate_config_file,
)
from autosearch.config.environment import DEFAULT_DATABASE_URL, load_environment_config
from autosearch.config.validators import check_for_warnings


# Test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Clear environment variables the loader reads."""
    for name in ("OPENAI_API_KEY", "DATABASE_URL", "LOG_LEVEL", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)


class TestConfigurationLoading:
    """Test configuration loading from YAML files."""

    def test_load_valid_config(self, mock_env_vars):
        app_config, env_config = load_config(FIXTURES_DIR / "valid_config.yaml")

        assert app_config.matching.retrieval_limit == 150
        assert app_config.matching.rerank_pool_size == 40
        assert app_config.matching.rerank_top_k == 8
        assert app_config.matching.scan_workers == 2
        assert app_config.matching.default_radius_km == 35

        assert app_config.llm.model == "gpt-4o-mini"
        assert app_config.llm.temperature == 0.2

        assert app_config.embeddings.provider == "hashing"
        assert app_config.embeddings.dimension == 128

        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"

        assert env_config.database_url == DEFAULT_DATABASE_URL

    def test_load_minimal_config_uses_defaults(self, mock_env_vars):
        app_config, _ = load_config(FIXTURES_DIR / "minimal_config.yaml")

        assert app_config.matching.retrieval_limit == 200
        assert app_config.matching.rerank_pool_size == 50
        assert app_config.matching.rerank_top_k == 10
        assert app_config.llm.model == "gpt-4o"
        assert app_config.logging.format == "key-value"

    def test_empty_config_file_means_defaults(self, tmp_path, mock_env_vars, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        app_config, env_config = load_config(config_file)

        assert app_config == AppConfig()
        assert env_config.openai_api_key == "sk-test"

    def test_no_config_file_means_defaults(self, tmp_path, mock_env_vars, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        app_config, _ = load_config()

        assert app_config.embeddings.provider == EmbeddingProviderType.OPENAI.value

    def test_config_file_not_found(self, mock_env_vars):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(Path("nonexistent.yaml"))
        assert "not found" in str(exc_info.value)

    def test_invalid_yaml_syntax(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text("matching:\n  retrieval_limit: [unclosed\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file)
        assert "Failed to parse YAML" in str(exc_info.value)

    def test_top_level_list_rejected(self, tmp_path, mock_env_vars):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- one\n- two\n")

        with pytest.raises(ConfigurationError):
            load_config(config_file)


class TestConfigurationValidation:
    """Test schema validation of configuration values."""

    def test_top_k_cannot_exceed_pool(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"matching": {"rerank_pool_size": 5, "rerank_top_k": 10}})
        assert "rerank_top_k" in str(exc_info.value)

    def test_invalid_provider(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"embeddings": {"provider": "word2vec"}})
        assert "embeddings -> provider" in str(exc_info.value)

    def test_invalid_type_is_reported_with_path(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"matching": {"retrieval_limit": "lots"}})
        assert exc_info.value.errors
        assert "matching -> retrieval_limit" in exc_info.value.errors[0]

    def test_every_problem_is_reported(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"matching": {"retrieval_limit": 0, "scan_workers": 0}})
        assert len(exc_info.value.errors) == 2

    @pytest.mark.parametrize(
        "section,values",
        [
            ("matching", {"rerank_pool_size": 0}),
            ("matching", {"default_radius_km": -5}),
            ("llm", {"temperature": 3.0}),
            ("llm", {"model": "   "}),
            ("embeddings", {"dimension": 2}),
            ("logging", {"format": "xml"}),
        ],
    )
    def test_out_of_range_values(self, section, values):
        with pytest.raises(ConfigurationError):
            parse_config({section: values})

    def test_openai_key_required_only_for_openai_embeddings(self):
        assert AppConfig().requires_openai_key() is True
        assert parse_config({"embeddings": {"provider": "hashing"}}).requires_openai_key() is False


class TestConfigurationWarnings:
    """Test non-fatal configuration warnings."""

    def test_pool_larger_than_retrieval_limit(self):
        warnings = check_for_warnings({"matching": {"retrieval_limit": 20, "rerank_pool_size": 40}})
        assert any("exceeds retrieval_limit" in w for w in warnings)

    def test_hashing_provider_warning(self):
        warnings = check_for_warnings({"embeddings": {"provider": "hashing"}})
        assert any("lexical" in w for w in warnings)

    def test_defaults_have_no_warnings(self):
        assert check_for_warnings({}) == []

    def test_load_config_emits_warnings(self, mock_env_vars):
        with pytest.warns(UserWarning):
            load_config(FIXTURES_DIR / "minimal_config.yaml")


class TestEnvironmentVariables:
    """Test environment variable loading."""

    def test_defaults(self, mock_env_vars):
        env_config = load_environment_config()
        assert env_config.openai_api_key is None
        assert env_config.database_url == DEFAULT_DATABASE_URL
        assert env_config.log_level is None
        assert env_config.environment == "local"

    def test_values_are_read(self, monkeypatch, mock_env_vars):
        monkeypatch.setenv("OPENAI_API_KEY", " sk-test ")
        monkeypatch.setenv("DATABASE_URL", "sqlite:///tmp/test.db")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ENVIRONMENT", "staging")

        env_config = load_environment_config()

        assert env_config.openai_api_key == "sk-test"
        assert env_config.database_url == "sqlite:///tmp/test.db"
        assert env_config.log_level == "DEBUG"
        assert env_config.environment == "staging"

    def test_missing_openai_key_when_required(self, mock_env_vars):
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config(require_openai=True)
        assert "OPENAI_API_KEY" in str(exc_info.value)

    def test_openai_embeddings_without_key_fail_to_load(self, mock_env_vars, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("embeddings:\n  provider: openai\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file)

    def test_invalid_log_level(self, monkeypatch, mock_env_vars):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ConfigurationError):
            load_environment_config()

    def test_empty_database_url(self, monkeypatch, mock_env_vars):
        monkeypatch.setenv("DATABASE_URL", "  ")
        with pytest.raises(ConfigurationError):
            load_environment_config()


class TestConfigurationHelpers:
    """Test configuration helper functions."""

    def test_validate_config_file_utility(self):
        assert validate_config_file(FIXTURES_DIR / "valid_config.yaml") is True

    def test_validate_config_file_reports_invalid(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("matching:\n  rerank_pool_size: 0\n")
        assert validate_config_file(config_file) is False

    def test_example_config_is_valid(self):
        example = Path(__file__).parent.parent / "config.example.yaml"
        assert validate_config_file(example) is True
