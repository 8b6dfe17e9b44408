"""Configuration management using pydantic-settings."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nicodemos.errors import ConfigurationError


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    GROQ = "groq"
    GEMINI = "gemini"


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


DEFAULT_GROQ_MODELS = [
    "llama-3.3-70b-versatile",
    "llama-3.1-70b-versatile",
    "mixtral-8x7b-32768",
    "llama-3.1-8b-instant",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Groq Configuration (single-shot assistant)
    groq_api_key: str | None = Field(
        default=None,
        description="Groq API key, required by the assistant",
    )
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="OpenAI-compatible Groq endpoint",
    )
    groq_models: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GROQ_MODELS),
        description="Model identifiers tried in order until one succeeds",
    )

    # Google Gemini Configuration (deliberation committee)
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )
    gemini_model: str = Field(
        default="gemini-flash-latest",
        description="Google Gemini model to use",
    )

    # Deliberation Configuration
    deliberation_provider: LLMProvider = Field(
        default=LLMProvider.GEMINI,
        description="LLM provider backing the research/synthesis/audit committee",
    )
    deliberation_max_iterations: int = Field(
        default=3,
        ge=1,
        description="Maximum synthesize/audit rounds before returning an unapproved draft",
    )

    # Response Cache Configuration
    cache_ttl_seconds: float = Field(
        default=60 * 60 * 24,
        gt=0,
        description="Seconds a cached first-turn answer stays valid",
    )
    cache_max_entries: int = Field(
        default=200,
        ge=1,
        description="Cache capacity; oldest entries are evicted beyond it",
    )
    cache_version: int = Field(
        default=6,
        description="Cache key version; bump to invalidate every cached answer",
    )

    # Assistant Configuration
    history_window: int = Field(
        default=10,
        ge=0,
        description="Number of most recent conversation turns forwarded to the model",
    )
    coalesce_requests: bool = Field(
        default=True,
        description="Share one backend call between concurrent identical first-turn questions",
    )

    # Application Configuration
    host: str = Field(
        default="0.0.0.0",
        description="HTTP bind address",
    )
    port: int = Field(
        default=3000,
        description="HTTP port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )

    def validate_provider_config(self) -> None:
        """Validate that required API keys are set for the configured providers."""
        if not self.groq_api_key:
            raise ConfigurationError("Groq API key is required (set GROQ_API_KEY)")
        if not self.groq_models:
            raise ConfigurationError("At least one Groq model must be configured")

    def validate_deliberation_config(self) -> None:
        """Validate the credential of the deliberation provider."""
        if self.deliberation_provider == LLMProvider.GEMINI and not self.gemini_api_key:
            raise ConfigurationError("Gemini API key is required when using Gemini provider")
        elif self.deliberation_provider == LLMProvider.GROQ and not self.groq_api_key:
            raise ConfigurationError("Groq API key is required when using Groq provider")


# Global settings instance - lazy loaded
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
