"""Google Gemini provider implementation."""

import logging
from typing import Any

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import BaseModel

from nicodemos.errors import BackendError, ConfigurationError
from nicodemos.llm.base import CompletionProvider, CompletionRequest, ResponseResult

logger = logging.getLogger(__name__)


class GeminiConfig(BaseModel):
    """Configuration for Gemini provider."""

    api_key: str
    model: str = "gemini-flash-latest"


class GeminiProvider(CompletionProvider):
    """Google Gemini provider implementation."""

    def __init__(self, config: GeminiConfig | None = None, **kwargs: Any) -> None:
        """Initialize Gemini provider.

        Args:
            config: Gemini configuration
            **kwargs: Additional configuration options

        Raises:
            ConfigurationError: If no API key is configured
        """
        api_key = config.api_key if config else kwargs.get("api_key")
        if not api_key:
            raise ConfigurationError("Gemini API key is required")

        self.config = config or GeminiConfig(**kwargs)
        genai.configure(api_key=self.config.api_key)

    def _build_model(self, request: CompletionRequest) -> tuple[Any, list[dict[str, Any]]]:
        """Map chat messages onto a Gemini model and its contents.

        System messages become the model's system instruction; assistant turns
        are sent with Gemini's `model` role.
        """
        system_parts = [m.content for m in request.messages if m.role == "system"]
        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [m.content]}
            for m in request.messages
            if m.role != "system"
        ]
        model = genai.GenerativeModel(
            request.model or self.config.model,
            system_instruction="\n\n".join(system_parts) or None,
        )
        return model, contents

    async def complete(self, request: CompletionRequest) -> ResponseResult:
        """Generate content using Gemini.

        Args:
            request: Completion request

        Returns:
            ResponseResult with generated text

        Raises:
            BackendError: If the call fails or the response carries no text
        """
        model_name = request.model or self.config.model
        model, contents = self._build_model(request)
        generation_config = genai.types.GenerationConfig(
            max_output_tokens=request.max_tokens,
            temperature=request.temperature,
            top_p=request.top_p,
            response_mime_type="application/json" if request.json_mode else None,
        )

        try:
            response = await model.generate_content_async(
                contents,
                generation_config=generation_config,
            )
            text = response.text

        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Gemini request with model {model_name} failed: {e}")
            raise BackendError(model_name, str(e.message), status_code=e.code) from e
        except Exception as e:
            logger.error(f"Gemini response request failed: {e}")
            raise BackendError(model_name, str(e)) from e

        return ResponseResult(
            content=text,
            model=model_name,
            token_count=response.usage_metadata.total_token_count
            if response.usage_metadata
            else None,
            finish_reason=response.candidates[0].finish_reason.name
            if response.candidates
            else None,
        )

    async def health_check(self) -> bool:
        """Check if Gemini service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            genai.get_model(f"models/{self.config.model}")
            return True
        except Exception as e:
            logger.warning(f"Gemini health check failed: {e}")
            return False
