"""Shared fixtures and fake backends."""

import json

import pytest

from nicodemos.config import Settings
from nicodemos.errors import BackendError
from nicodemos.llm.base import CompletionProvider, CompletionRequest, ResponseResult


class ScriptedProvider(CompletionProvider):
    """Returns (or raises) scripted outcomes in call order."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests: list[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> ResponseResult:
        self.requests.append(request)
        if not self.outcomes:
            raise AssertionError("ScriptedProvider ran out of outcomes")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return ResponseResult(content=outcome, model=request.model)

    async def health_check(self) -> bool:
        return True


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def scripted_provider():
    """Factory for scripted providers."""
    return ScriptedProvider


@pytest.fixture
def backend_error():
    """Factory for backend errors."""

    def _make(model: str = "model-a", status_code: int | None = 500) -> BackendError:
        return BackendError(model, "service unavailable", status_code=status_code)

    return _make


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def answer_payload():
    """A well-formed assistant JSON payload."""
    return json.dumps(
        {
            "answer": "A graça é o favor imerecido de Deus.",
            "verses": [{"reference": "Efésios 2:8", "relevance": "Salvação pela graça"}],
            "keyTerms": [
                {
                    "original": "χάρις",
                    "transliteration": "charis",
                    "language": "Grego",
                    "meaning": "graça, favor",
                }
            ],
            "suggestedQuestions": ["O que é justificação?"],
        },
        ensure_ascii=False,
    )


@pytest.fixture
def settings(monkeypatch):
    """Settings isolated from the process environment and .env files."""
    for name in ("GROQ_API_KEY", "GROQ_MODELS", "GEMINI_API_KEY", "DELIBERATION_PROVIDER", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make
