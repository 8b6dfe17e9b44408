"""Groq provider implementation (OpenAI-compatible chat completions)."""

import logging
from typing import Any

import openai
from pydantic import BaseModel

from nicodemos.errors import BackendError, ConfigurationError
from nicodemos.llm.base import CompletionProvider, CompletionRequest, ResponseResult

logger = logging.getLogger(__name__)


class GroqConfig(BaseModel):
    """Configuration for Groq provider."""

    api_key: str
    base_url: str = "https://api.groq.com/openai/v1"
    health_model: str = "llama-3.1-8b-instant"
    top_p: float = 0.85
    timeout: int = 60
    # Fallback across models is handled by the gateway, not by the SDK
    max_retries: int = 0


class GroqProvider(CompletionProvider):
    """Groq provider implementation using the OpenAI SDK."""

    def __init__(self, config: GroqConfig | None = None, **kwargs: Any) -> None:
        """Initialize Groq provider.

        Args:
            config: Groq configuration
            **kwargs: Additional configuration options

        Raises:
            ConfigurationError: If no API key is configured
        """
        api_key = config.api_key if config else kwargs.get("api_key")
        if not api_key:
            raise ConfigurationError("Groq API key is required")

        self.config = config or GroqConfig(**kwargs)
        self.client = openai.AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
        )

    async def complete(self, request: CompletionRequest) -> ResponseResult:
        """Generate a chat completion with the requested Groq model.

        Args:
            request: Completion request

        Returns:
            ResponseResult with the raw message content

        Raises:
            BackendError: On transport failures and non-success statuses
        """
        params: dict[str, Any] = {
            "model": request.model,
            "messages": [message.model_dump() for message in request.messages],
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "top_p": request.top_p if request.top_p is not None else self.config.top_p,
        }
        if request.json_mode:
            params["response_format"] = {"type": "json_object"}

        try:
            logger.debug(f"Sending request to Groq with model: {request.model}")
            response = await self.client.chat.completions.create(**params)

        except openai.APIStatusError as e:
            logger.warning(f"Groq model {request.model} returned status {e.status_code}: {e.message}")
            raise BackendError(request.model, e.message, status_code=e.status_code) from e
        except openai.OpenAIError as e:
            logger.warning(f"Groq request with model {request.model} failed: {e}")
            raise BackendError(request.model, str(e)) from e

        if not response.choices:
            raise BackendError(request.model, "Response contained no choices")

        choice = response.choices[0]

        return ResponseResult(
            content=choice.message.content or "",
            model=response.model or request.model,
            token_count=response.usage.total_tokens if response.usage else None,
            finish_reason=choice.finish_reason,
        )

    async def health_check(self) -> bool:
        """Check if Groq service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            await self.client.models.retrieve(self.config.health_model)
            return True
        except Exception as e:
            logger.warning(f"Groq health check failed: {e}")
            return False
