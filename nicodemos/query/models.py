"""Assistant data models and tagged pipeline outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nicodemos.errors import BackendError, ExhaustionError


class QuestionCategory(str, Enum):
    """Question categories that drive prompt shape and token budget."""

    GREETING = "greeting"
    STRUCTURAL = "structural"
    EXEGETICAL = "exegetical"
    SIMPLE = "simple"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConversationTurn(CamelModel):
    """One prior turn of the caller-owned conversation."""

    role: Literal["user", "assistant"]
    content: str


class StudyVerse(CamelModel):
    """A verse suggested for further study."""

    reference: str = Field(min_length=1)
    relevance: str = Field(min_length=1)


class KeyTerm(CamelModel):
    """An original-language term discussed in the answer."""

    original: str = Field(min_length=1)
    transliteration: str = Field(min_length=1)
    language: str = Field(min_length=1)
    meaning: str = Field(min_length=1)


class StructuredAnswer(CamelModel):
    """Validated answer returned to callers."""

    answer: str
    verses: list[StudyVerse] = Field(default_factory=list)
    key_terms: list[KeyTerm] = Field(default_factory=list)
    suggested_questions: list[str] = Field(default_factory=list)
    backend_used: str = ""
    from_cache: bool = False


@dataclass
class AnswerOk:
    """The pipeline produced an answer."""

    answer: StructuredAnswer

    def unwrap(self) -> StructuredAnswer:
        return self.answer


@dataclass
class BackendExhausted:
    """Every backend model failed; no answer is available."""

    failures: list[BackendError] = field(default_factory=list)

    def unwrap(self) -> StructuredAnswer:
        raise ExhaustionError(self.failures)


AnswerOutcome = AnswerOk | BackendExhausted
