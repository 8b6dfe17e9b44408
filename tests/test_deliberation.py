"""Tests for the deliberation committee."""

import pytest

from nicodemos.config import LLMProvider
from nicodemos.errors import BackendError, ConfigurationError, DeliberationFailure
from nicodemos.deliberation.models import AgentPhase, AgentRole, DeliberationState
from nicodemos.deliberation.orchestrator import DeliberationOrchestrator, extract_sources
from nicodemos.deliberation.prompts import is_approved
from nicodemos.llm.groq import GroqProvider

RESEARCH = "Contexto: João 3:1-21 e Números 21:8-9. Nicodemos era fariseu (João 3:1-21)."
REJECTION = "1. Cita fatos fora da pesquisa. REJEITADO"


def make_orchestrator(provider, **kwargs) -> DeliberationOrchestrator:
    return DeliberationOrchestrator(provider, model="gemini-test", **kwargs)


class TestDeliberationOrchestrator:
    """Test DeliberationOrchestrator."""

    @pytest.mark.asyncio
    async def test_approved_on_first_pass(self, scripted_provider):
        provider = scripted_provider([RESEARCH, "Rascunho 1", "APROVADO"])

        result = await make_orchestrator(provider).run("Quem foi Nicodemos?")

        assert result.answer == "Rascunho 1"
        assert result.iterations == 1
        assert result.approved is True
        assert len(provider.requests) == 3
        assert all(request.model == "gemini-test" for request in provider.requests)

    @pytest.mark.asyncio
    async def test_always_rejected_stops_at_cap(self, scripted_provider):
        """Test that the last unapproved draft is returned after three rounds."""
        provider = scripted_provider([
            RESEARCH,
            "Rascunho 1", REJECTION,
            "Rascunho 2", REJECTION,
            "Rascunho 3", REJECTION,
        ])

        result = await make_orchestrator(provider).run("Quem foi Nicodemos?")

        assert result.answer == "Rascunho 3"
        assert result.iterations == 3
        assert result.approved is False
        assert len(provider.requests) == 7

    @pytest.mark.asyncio
    async def test_critique_feeds_next_synthesis(self, scripted_provider):
        provider = scripted_provider([RESEARCH, "Rascunho 1", REJECTION, "Rascunho 2", "APROVADO"])

        result = await make_orchestrator(provider).run("Quem foi Nicodemos?")

        assert result.iterations == 2
        first_synthesis = provider.requests[1].messages[-1].content
        second_synthesis = provider.requests[3].messages[-1].content
        assert "Crítica do Auditor" not in first_synthesis
        assert f"Crítica do Auditor: {REJECTION}" in second_synthesis
        assert "Pergunta do Usuário: Quem foi Nicodemos?" in second_synthesis

        # The auditor always compares against the original research
        second_audit = provider.requests[4].messages[-1].content
        assert "Resposta a ser auditada: Rascunho 2" in second_audit
        assert "Crítica do Auditor" not in second_audit

    @pytest.mark.asyncio
    async def test_custom_iteration_cap(self, scripted_provider):
        provider = scripted_provider([RESEARCH, "Rascunho 1", REJECTION])

        result = await make_orchestrator(provider, max_iterations=1).run("Pergunta")

        assert result.iterations == 1
        assert result.approved is False

    @pytest.mark.asyncio
    async def test_sources_come_from_research(self, scripted_provider):
        provider = scripted_provider([RESEARCH, "Veja Romanos 8:1", "APROVADO"])

        result = await make_orchestrator(provider).run("Quem foi Nicodemos?")

        assert result.sources == ["João 3:1-21", "Números 21:8-9"]

    @pytest.mark.asyncio
    async def test_updates_are_emitted_in_order(self, scripted_provider):
        provider = scripted_provider([RESEARCH, "Rascunho 1", REJECTION, "Rascunho 2", "APROVADO"])
        updates = []

        await make_orchestrator(provider).run("Quem foi Nicodemos?", updates.append)

        assert [(u.agent, u.phase) for u in updates] == [
            (AgentRole.RESEARCHER, AgentPhase.SEARCHING),
            (AgentRole.RESEARCHER, AgentPhase.COMPLETED),
            (AgentRole.SYNTHESIZER, AgentPhase.THINKING),
            (AgentRole.SYNTHESIZER, AgentPhase.COMPLETED),
            (AgentRole.AUDITOR, AgentPhase.DEBATING),
            (AgentRole.AUDITOR, AgentPhase.REJECTED),
            (AgentRole.SYNTHESIZER, AgentPhase.THINKING),
            (AgentRole.SYNTHESIZER, AgentPhase.COMPLETED),
            (AgentRole.AUDITOR, AgentPhase.DEBATING),
            (AgentRole.AUDITOR, AgentPhase.APPROVED),
        ]
        assert updates[-1].iteration == 2

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_alter_flow(self, scripted_provider):
        provider = scripted_provider([RESEARCH, "Rascunho 1", "APROVADO"])

        def broken_callback(update):
            raise RuntimeError("UI went away")

        result = await make_orchestrator(provider).run("Quem foi Nicodemos?", broken_callback)

        assert result.approved is True
        assert result.answer == "Rascunho 1"

    @pytest.mark.asyncio
    async def test_research_failure_is_fatal(self, scripted_provider):
        error = BackendError("gemini-test", "quota exceeded", status_code=429)
        provider = scripted_provider([error])

        with pytest.raises(DeliberationFailure) as exc_info:
            await make_orchestrator(provider).run("Quem foi Nicodemos?")

        assert exc_info.value.stage == "researcher"
        assert exc_info.value.iteration == 0
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_audit_failure_is_fatal(self, scripted_provider):
        """Test that no partial result is returned when a later call fails."""
        provider = scripted_provider([
            RESEARCH, "Rascunho 1", REJECTION, "Rascunho 2",
            BackendError("gemini-test", "timeout"),
        ])

        with pytest.raises(DeliberationFailure) as exc_info:
            await make_orchestrator(provider).run("Quem foi Nicodemos?")

        assert exc_info.value.stage == "auditor"
        assert exc_info.value.iteration == 2

    def test_from_settings_requires_credential(self, settings):
        with pytest.raises(ConfigurationError, match="Gemini API key is required"):
            DeliberationOrchestrator.from_settings(settings(groq_api_key="test-key"))

    def test_from_settings_with_groq(self, settings):
        orchestrator = DeliberationOrchestrator.from_settings(
            settings(
                groq_api_key="test-key",
                deliberation_provider=LLMProvider.GROQ,
                deliberation_max_iterations=2,
            )
        )

        assert isinstance(orchestrator.provider, GroqProvider)
        assert orchestrator.model == "llama-3.3-70b-versatile"
        assert orchestrator.max_iterations == 2


class TestHelpers:
    @pytest.mark.parametrize(
        "audit,expected",
        [
            ("APROVADO", True),
            ("A resposta é sólida. Aprovado.", True),
            ("1. Especulação sem base. REJEITADO", False),
            ("Não pode ser APROVADO. REJEITADO", False),
            ("Sem veredito", False),
        ],
    )
    def test_is_approved(self, audit, expected):
        assert is_approved(audit) is expected

    def test_extract_sources(self):
        text = "Veja 1 Coríntios 13:4-7, Êxodo 3:14 e de novo Êxodo 3:14. Sem referência aqui."

        assert extract_sources(text) == ["1 Coríntios 13:4-7", "Êxodo 3:14"]

    def test_extract_sources_empty(self):
        assert extract_sources("Nenhuma citação.") == []

    def test_state_appends_critique(self):
        state = DeliberationState(research_notes="Notas")

        state.append_critique("Faltou contexto")

        assert state.research_notes == "Notas\n\nCrítica do Auditor: Faltou contexto"
