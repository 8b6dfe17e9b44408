"""Ordered model fallback over a single completion provider."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nicodemos.errors import BackendError, ConfigurationError, ExhaustionError
from nicodemos.llm.base import CompletionProvider, CompletionRequest

if TYPE_CHECKING:
    from nicodemos.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class GatewayResult:
    """First successful completion and the failures that preceded it."""

    raw_payload: str
    backend_used: str
    failures: list[BackendError] = field(default_factory=list)


class CompletionGateway:
    """Tries each configured model identifier in order, returning the first success.

    Models are never tried in parallel: a later identifier is only called once
    every earlier one has failed.
    """

    def __init__(self, provider: CompletionProvider, models: list[str]) -> None:
        """Initialize the gateway.

        Args:
            provider: Backend used for every attempt
            models: Model identifiers, most to least preferred

        Raises:
            ConfigurationError: If no model identifiers are given
        """
        if not models:
            raise ConfigurationError("CompletionGateway needs at least one model identifier")
        self.provider = provider
        self.models = list(models)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "CompletionGateway":
        """Build a gateway from settings, failing fast without a credential."""
        from nicodemos.llm.factory import create_completion_provider

        settings.validate_provider_config()
        return cls(create_completion_provider(settings), settings.groq_models)

    async def complete(self, request: CompletionRequest) -> GatewayResult:
        """Run the request against each model until one succeeds.

        Args:
            request: Completion request; its `model` field is overwritten per attempt

        Returns:
            GatewayResult with the raw payload and the model that served it

        Raises:
            ExhaustionError: If every model failed
        """
        failures: list[BackendError] = []

        for model in self.models:
            attempt = request.model_copy(update={"model": model})
            logger.info(f"Trying model: {model}")
            try:
                result = await self.provider.complete(attempt)
            except BackendError as e:
                logger.warning(f"Model {model} failed, falling back: {e.message}")
                failures.append(e)
                continue

            if failures:
                logger.info(f"Model {model} succeeded after {len(failures)} failed attempt(s)")
            return GatewayResult(
                raw_payload=result.content,
                backend_used=result.model or model,
                failures=failures,
            )

        logger.error(f"All {len(self.models)} models failed")
        raise ExhaustionError(failures)
