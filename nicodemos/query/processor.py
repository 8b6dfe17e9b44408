"""Single-shot assistant pipeline: classify, compose, complete, normalize."""

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

from nicodemos.errors import ExhaustionError
from nicodemos.llm.base import ChatMessage, CompletionRequest
from nicodemos.llm.gateway import CompletionGateway
from .cache import ResponseCache
from .classifier import classify
from .models import (
    AnswerOk,
    AnswerOutcome,
    BackendExhausted,
    ConversationTurn,
    StructuredAnswer,
)
from .normalizer import ResponseNormalizer
from .prompts import PromptComposer

if TYPE_CHECKING:
    from nicodemos.config import Settings

logger = logging.getLogger(__name__)


class QueryProcessor:
    """Answers assistant questions through the completion gateway.

    First-turn questions (no history) are served from the response cache when
    possible, and concurrent identical first-turn questions share one backend
    call. Follow-up turns always go to the backend and never touch the cache.
    """

    def __init__(
        self,
        gateway: CompletionGateway,
        cache: ResponseCache | None = None,
        composer: PromptComposer | None = None,
        normalizer: ResponseNormalizer | None = None,
        coalesce_requests: bool = True,
    ):
        """Initialize query processor.

        Args:
            gateway: Completion gateway with the ordered model list
            cache: Shared response cache for first-turn questions
            composer: Prompt composer
            normalizer: Response normalizer
            coalesce_requests: Share in-flight work between identical first-turn questions
        """
        self.gateway = gateway
        self.cache = cache if cache is not None else ResponseCache()
        self.composer = composer or PromptComposer()
        self.normalizer = normalizer or ResponseNormalizer()
        self.coalesce_requests = coalesce_requests
        self._in_flight: dict[str, asyncio.Task[AnswerOutcome]] = {}

    @classmethod
    def from_settings(cls, settings: "Settings") -> "QueryProcessor":
        """Build the full pipeline from settings.

        Raises:
            ConfigurationError: If the Groq credential is missing
        """
        return cls(
            gateway=CompletionGateway.from_settings(settings),
            cache=ResponseCache.from_settings(settings),
            composer=PromptComposer(history_window=settings.history_window),
            coalesce_requests=settings.coalesce_requests,
        )

    async def health_check(self) -> dict[str, bool]:
        """Check health of query processing components.

        Returns:
            Health status dictionary
        """
        health = {"llm": await self.gateway.provider.health_check()}
        health["query_processor"] = True
        health["overall"] = all(health.values())
        return health

    async def ask(
        self,
        question: str,
        history: Sequence[ConversationTurn] | None = None,
    ) -> AnswerOutcome:
        """Answer a question.

        Args:
            question: User question
            history: Prior conversation turns, oldest first

        Returns:
            AnswerOk with the structured answer, or BackendExhausted
        """
        history = list(history or [])
        start_time = time.time()

        if history:
            outcome = await self._generate(question, history)
        else:
            outcome = await self._ask_first_turn(question)

        logger.info(f"Question answered in {time.time() - start_time:.2f}s ({type(outcome).__name__})")
        return outcome

    async def ask_assistant(
        self,
        question: str,
        history: Sequence[ConversationTurn] | None = None,
    ) -> StructuredAnswer:
        """Answer a question, raising ExhaustionError if no backend succeeded."""
        outcome = await self.ask(question, history)
        return outcome.unwrap()

    async def _ask_first_turn(self, question: str) -> AnswerOutcome:
        cached = self.cache.get(question)
        if cached is not None:
            logger.info("Serving first-turn question from cache")
            return AnswerOk(cached)

        if not self.coalesce_requests:
            return await self._generate_and_cache(question)

        key = self.cache.key_for(question)
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._generate_and_cache(question))
            self._in_flight[key] = task
            task.add_done_callback(lambda _: self._in_flight.pop(key, None))
        else:
            logger.info(f"Joining in-flight request for {key}")

        # One caller being cancelled must not cancel the shared work
        return await asyncio.shield(task)

    async def _generate_and_cache(self, question: str) -> AnswerOutcome:
        outcome = await self._generate(question, [])
        if isinstance(outcome, AnswerOk):
            self.cache.put(question, outcome.answer)
        return outcome

    async def _generate(self, question: str, history: list[ConversationTurn]) -> AnswerOutcome:
        category = classify(question)
        prompt = self.composer.compose(category, history, question)
        logger.debug(f"Question category: {category.value}, max_tokens: {prompt.max_tokens}")

        request = CompletionRequest(
            messages=[ChatMessage(**message) for message in prompt.messages],
            temperature=prompt.temperature,
            max_tokens=prompt.max_tokens,
            json_mode=True,
        )

        try:
            result = await self.gateway.complete(request)
        except ExhaustionError as e:
            logger.error(f"No backend could answer: {e}")
            return BackendExhausted(e.failures)

        return AnswerOk(self.normalizer.normalize(result.raw_payload, result.backend_used))
