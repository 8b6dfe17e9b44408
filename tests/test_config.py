"""Tests for configuration module."""

import pytest

from nicodemos.config import DEFAULT_GROQ_MODELS, Environment, LLMProvider
from nicodemos.errors import ConfigurationError


def test_default_settings(settings):
    """Test that default settings are loaded correctly."""
    config = settings()

    assert config.groq_api_key is None
    assert config.groq_models == DEFAULT_GROQ_MODELS
    assert config.deliberation_provider == LLMProvider.GEMINI
    assert config.deliberation_max_iterations == 3
    assert config.cache_ttl_seconds == 86400
    assert config.cache_max_entries == 200
    assert config.history_window == 10
    assert config.environment == Environment.DEVELOPMENT
    assert config.log_level == "INFO"


def test_settings_read_from_environment(settings, monkeypatch):
    """Test that credentials are read from the process environment."""
    monkeypatch.setenv("GROQ_API_KEY", "gsk-env-key")
    monkeypatch.setenv("GROQ_MODELS", '["model-a", "model-b"]')

    config = settings()

    assert config.groq_api_key == "gsk-env-key"
    assert config.groq_models == ["model-a", "model-b"]


def test_validate_missing_groq_key(settings):
    """Test that a missing Groq key is a configuration error."""
    config = settings()

    with pytest.raises(ConfigurationError, match="Groq API key is required"):
        config.validate_provider_config()


def test_configuration_error_is_value_error(settings):
    """Test that configuration errors can be handled as ValueError."""
    with pytest.raises(ValueError):
        settings().validate_provider_config()


def test_validate_empty_model_list(settings):
    """Test that an empty fallback list is rejected."""
    config = settings(groq_api_key="gsk-test", groq_models=[])

    with pytest.raises(ConfigurationError, match="At least one Groq model"):
        config.validate_provider_config()


def test_valid_groq_config(settings):
    """Test valid Groq configuration."""
    config = settings(groq_api_key="gsk-test")

    # Should not raise
    config.validate_provider_config()


def test_validate_deliberation_gemini_key(settings):
    """Test Gemini deliberation configuration validation."""
    config = settings(groq_api_key="gsk-test")

    with pytest.raises(ConfigurationError, match="Gemini API key is required"):
        config.validate_deliberation_config()


def test_validate_deliberation_with_groq(settings):
    """Test deliberation can reuse the Groq credential."""
    config = settings(groq_api_key="gsk-test", deliberation_provider=LLMProvider.GROQ)

    config.validate_deliberation_config()
