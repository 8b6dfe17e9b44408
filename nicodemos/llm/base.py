"""Base completion provider interface and factory pattern."""

from abc import ABC, abstractmethod
from typing import Any, Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """A single chat message sent to a backend."""

    role: Literal["system", "user", "assistant"]
    content: str


class CompletionRequest(BaseModel):
    """Backend-agnostic completion request.

    `model` is left empty by callers that go through the gateway; the gateway
    fills it in for each backend identifier it tries.
    """

    model: str = ""
    messages: list[ChatMessage]
    temperature: float = 0.5
    max_tokens: int = 1000
    top_p: float | None = None
    json_mode: bool = False


class ResponseResult(BaseModel):
    """Result from a completion call."""

    content: str
    model: str
    token_count: int | None = None
    finish_reason: str | None = None


class CompletionProvider(ABC):
    """Abstract base class for completion backends."""

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> ResponseResult:
        """Run one completion round trip.

        Args:
            request: Completion request with `model` set

        Returns:
            ResponseResult with the generated text and metadata

        Raises:
            BackendError: If the backend call fails for any reason
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is healthy and accessible.

        Returns:
            True if healthy, False otherwise
        """
        pass


class LLMProviderFactory:
    """Factory for creating completion providers."""

    _providers: dict[str, type[CompletionProvider]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type[CompletionProvider]) -> None:
        """Register a provider class.

        Args:
            name: Provider name (e.g., "groq", "gemini")
            provider_class: Provider class to register
        """
        cls._providers[name] = provider_class

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> CompletionProvider:
        """Create a provider instance.

        Args:
            name: Provider name
            **kwargs: Provider-specific configuration

        Returns:
            CompletionProvider instance

        Raises:
            ValueError: If provider name is not registered
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys())
            raise ValueError(f"Unknown provider '{name}'. Available: {available}")

        return cls._providers[name](**kwargs)

    @classmethod
    def list_providers(cls) -> list[str]:
        """List all registered provider names.

        Returns:
            List of provider names
        """
        return list(cls._providers.keys())
