"""Factory for creating completion providers from configuration."""

from nicodemos.config import LLMProvider as LLMProviderEnum
from nicodemos.config import Settings, get_settings
from nicodemos.errors import ConfigurationError
from nicodemos.llm.base import CompletionProvider, LLMProviderFactory


def create_llm_provider(
    provider_name: str | None = None,
    settings: Settings | None = None,
) -> CompletionProvider:
    """Create a completion provider from configuration.

    Args:
        provider_name: Provider to build, defaults to Groq
        settings: Settings to read credentials from, defaults to global settings

    Returns:
        Configured provider instance

    Raises:
        ConfigurationError: If the provider's API key is missing
        ValueError: If the provider name is unknown
    """
    settings = settings or get_settings()
    provider_name = provider_name or LLMProviderEnum.GROQ

    if provider_name == LLMProviderEnum.GROQ:
        from nicodemos.llm.groq import GroqConfig

        if not settings.groq_api_key:
            raise ConfigurationError("Groq API key is required")

        config = GroqConfig(api_key=settings.groq_api_key, base_url=settings.groq_base_url)
        return LLMProviderFactory.create("groq", config=config)

    elif provider_name == LLMProviderEnum.GEMINI:
        from nicodemos.llm.gemini import GeminiConfig

        if not settings.gemini_api_key:
            raise ConfigurationError("Gemini API key is required")

        config = GeminiConfig(api_key=settings.gemini_api_key, model=settings.gemini_model)
        return LLMProviderFactory.create("gemini", config=config)

    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")


def create_completion_provider(settings: Settings | None = None) -> CompletionProvider:
    """Create the provider backing the single-shot assistant."""
    return create_llm_provider(LLMProviderEnum.GROQ, settings=settings)


def create_deliberation_provider(settings: Settings | None = None) -> CompletionProvider:
    """Create the provider backing the deliberation committee."""
    settings = settings or get_settings()
    return create_llm_provider(settings.deliberation_provider, settings=settings)
