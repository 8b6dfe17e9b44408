"""LLM providers module."""

from nicodemos.llm.base import (
    ChatMessage,
    CompletionProvider,
    CompletionRequest,
    LLMProviderFactory,
    ResponseResult,
)
from nicodemos.llm.factory import (
    create_completion_provider,
    create_deliberation_provider,
    create_llm_provider,
)
from nicodemos.llm.gateway import CompletionGateway, GatewayResult
from nicodemos.llm.gemini import GeminiConfig, GeminiProvider
from nicodemos.llm.groq import GroqConfig, GroqProvider

# Register all providers
LLMProviderFactory.register("groq", GroqProvider)
LLMProviderFactory.register("gemini", GeminiProvider)

__all__ = [
    "ChatMessage",
    "CompletionGateway",
    "CompletionProvider",
    "CompletionRequest",
    "GatewayResult",
    "GeminiConfig",
    "GeminiProvider",
    "GroqConfig",
    "GroqProvider",
    "LLMProviderFactory",
    "ResponseResult",
    "create_completion_provider",
    "create_deliberation_provider",
    "create_llm_provider",
]
