"""Single-shot assistant pipeline module."""

from .cache import ResponseCache, question_key
from .classifier import classify
from .models import (
    AnswerOk,
    AnswerOutcome,
    BackendExhausted,
    ConversationTurn,
    KeyTerm,
    QuestionCategory,
    StructuredAnswer,
    StudyVerse,
)
from .normalizer import ResponseNormalizer, repair_paragraphs
from .processor import QueryProcessor
from .prompts import ComposedPrompt, PromptComposer

__all__ = [
    "AnswerOk",
    "AnswerOutcome",
    "BackendExhausted",
    "ComposedPrompt",
    "ConversationTurn",
    "KeyTerm",
    "PromptComposer",
    "QueryProcessor",
    "QuestionCategory",
    "ResponseCache",
    "ResponseNormalizer",
    "StructuredAnswer",
    "StudyVerse",
    "classify",
    "question_key",
    "repair_paragraphs",
]
