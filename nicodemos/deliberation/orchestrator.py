"""Research, synthesis and audit committee for higher-assurance answers."""

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from nicodemos.errors import BackendError, DeliberationFailure
from nicodemos.llm.base import ChatMessage, CompletionProvider, CompletionRequest
from .models import (
    AgentPhase,
    AgentRole,
    AgentUpdate,
    DeliberationResult,
    DeliberationState,
    Verdict,
)
from .prompts import (
    AUDITOR_PROMPT,
    RESEARCHER_PROMPT,
    SYNTHESIZER_PROMPT,
    audit_input,
    is_approved,
    synthesis_input,
)

if TYPE_CHECKING:
    from nicodemos.config import Settings

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 3

UpdateCallback = Callable[[AgentUpdate], None]

SCRIPTURE_REFERENCE = re.compile(
    r"(?:\b[1-3]\s?)?\b[A-ZÁÉÍÓÚÂÊÔ][a-záàâãéêíóôõúç]+\.?\s\d{1,3}:\d{1,3}(?:\s?[-–]\s?\d{1,3})?"
)


def extract_sources(text: str) -> list[str]:
    """Scripture references in order of first appearance, without duplicates."""
    sources: list[str] = []
    for match in SCRIPTURE_REFERENCE.finditer(text):
        reference = match.group(0).strip()
        if reference not in sources:
            sources.append(reference)
    return sources


class DeliberationOrchestrator:
    """Runs the researcher once, then synthesizer and auditor until approval.

    Every call goes to a single model: a failing call aborts the whole
    deliberation with DeliberationFailure instead of falling back.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        model: str,
        max_iterations: int = MAX_ITERATIONS,
        temperature: float = 0.4,
        max_tokens: int = 2048,
    ) -> None:
        self.provider = provider
        self.model = model
        self.max_iterations = max_iterations
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DeliberationOrchestrator":
        """Build the committee from settings.

        Raises:
            ConfigurationError: If the deliberation provider has no credential
        """
        from nicodemos.config import LLMProvider
        from nicodemos.llm.factory import create_deliberation_provider

        settings.validate_deliberation_config()
        model = (
            settings.gemini_model
            if settings.deliberation_provider == LLMProvider.GEMINI
            else settings.groq_models[0]
        )
        return cls(
            provider=create_deliberation_provider(settings),
            model=model,
            max_iterations=settings.deliberation_max_iterations,
        )

    async def run(
        self,
        question: str,
        on_update: UpdateCallback | None = None,
    ) -> DeliberationResult:
        """Deliberate on a question.

        Args:
            question: User question
            on_update: Optional progress callback; its failures are ignored

        Returns:
            DeliberationResult with the last draft and the number of iterations

        Raises:
            DeliberationFailure: If any completion call fails
        """
        self._notify(on_update, AgentRole.RESEARCHER, AgentPhase.SEARCHING,
                     "Varrendo bases teológicas e referências...")
        research = await self._call(RESEARCHER_PROMPT, question, stage=AgentRole.RESEARCHER, iteration=0)
        self._notify(on_update, AgentRole.RESEARCHER, AgentPhase.COMPLETED, "Pesquisa concluída.")

        state = DeliberationState(research_notes=research)

        while state.verdict != Verdict.APPROVED and state.iteration < self.max_iterations:
            state.iteration += 1

            self._notify(on_update, AgentRole.SYNTHESIZER, AgentPhase.THINKING,
                         f"Formulando resposta teológica (iteração {state.iteration})...", state.iteration)
            state.draft_answer = await self._call(
                SYNTHESIZER_PROMPT,
                synthesis_input(state.research_notes, question),
                stage=AgentRole.SYNTHESIZER,
                iteration=state.iteration,
            )
            self._notify(on_update, AgentRole.SYNTHESIZER, AgentPhase.COMPLETED,
                         "Resposta formulada.", state.iteration)

            self._notify(on_update, AgentRole.AUDITOR, AgentPhase.DEBATING,
                         "Auditando consistência e veracidade...", state.iteration)
            audit = await self._call(
                AUDITOR_PROMPT,
                audit_input(state.draft_answer, research),
                stage=AgentRole.AUDITOR,
                iteration=state.iteration,
            )

            if is_approved(audit):
                state.verdict = Verdict.APPROVED
                self._notify(on_update, AgentRole.AUDITOR, AgentPhase.APPROVED,
                             "Resposta validada com sucesso!", state.iteration)
            else:
                logger.info(f"Auditor rejected draft {state.iteration}/{self.max_iterations}")
                state.append_critique(audit)
                self._notify(on_update, AgentRole.AUDITOR, AgentPhase.REJECTED,
                             "Ajustando detalhes para maior precisão...", state.iteration)

        approved = state.verdict == Verdict.APPROVED
        if not approved:
            logger.warning(f"Returning unapproved draft after {state.iteration} iterations")

        return DeliberationResult(
            answer=state.draft_answer,
            sources=extract_sources(research),
            iterations=state.iteration,
            approved=approved,
        )

    async def _call(self, system_prompt: str, content: str, stage: AgentRole, iteration: int) -> str:
        request = CompletionRequest(
            model=self.model,
            messages=[
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=content),
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        try:
            result = await self.provider.complete(request)
        except BackendError as e:
            logger.error(f"Deliberation {stage.value} step failed: {e}")
            raise DeliberationFailure(stage.value, iteration, e.message) from e
        return result.content

    @staticmethod
    def _notify(
        on_update: UpdateCallback | None,
        agent: AgentRole,
        phase: AgentPhase,
        message: str,
        iteration: int = 0,
    ) -> None:
        if on_update is None:
            return
        try:
            on_update(AgentUpdate(agent=agent, phase=phase, message=message, iteration=iteration))
        except Exception:
            logger.exception("Agent update callback failed")
