"""Parsing, validation and markdown repair of raw model output."""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ValidationError

from nicodemos.errors import ParseError
from .models import KeyTerm, StructuredAnswer, StudyVerse

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL)

_HEADING_BREAK = re.compile(r"([^\s#])\s*(###[ \t]+)")
_HEADING_LINE_END = re.compile(r"^(###[^\n]*)\n(?!\n)", re.MULTILINE)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

VERSE_INTRODUCERS = [
    r"O vers[ií]culo",
    r"No vers[ií]culo",
    r"Em ",
    r"Ele diz",
    r"Jesus diz",
    r"Paulo (?:diz|escreve|afirma)",
    r"O texto diz",
    r"A passagem",
    r"Es[st]e vers[ií]culo",
    r"Aqui,",
    r"Neste",
]
LANGUAGE_INTRODUCERS = [
    r"A palavra",
    r"O termo",
    r"No grego",
    r"No hebraico",
    r"Em grego",
    r"Em hebraico",
    r"A express[aã]o",
    r"O verbo",
    r"O substantivo",
]
APPLICATION_INTRODUCERS = [
    r"Isso (?:significa|nos|revela|mostra|implica|aponta)",
    r"Essa (?:verdade|passagem|palavra|ideia)",
    r"Teologicamente",
    r"Na pr[aá]tica",
    r"Para n[oó]s",
    r"Portanto",
    r"Assim",
    r"Desse modo",
    r"[ÉE] importante notar",
    r"Vale destacar",
    r"Essa [eé] a",
    r"Este [eé] o",
]

_SENTENCE_BREAKS = [
    re.compile(r"""([.!?'"]) ((?:""" + "|".join(introducers) + r"))")
    for introducers in (VERSE_INTRODUCERS, LANGUAGE_INTRODUCERS, APPLICATION_INTRODUCERS)
]


def repair_paragraphs(text: str) -> str:
    """Split run-together commentary into markdown paragraphs.

    Puts headings on their own paragraph, starts a new paragraph before
    sentences that introduce a verse citation, an original-language term or a
    theological application, and collapses runs of blank lines. Applying it
    twice gives the same result as applying it once.
    """
    fixed = _HEADING_BREAK.sub(r"\1\n\n\2", text.strip())
    fixed = _HEADING_LINE_END.sub(r"\1\n\n", fixed)
    for pattern in _SENTENCE_BREAKS:
        fixed = pattern.sub(r"\1\n\n\2", fixed)
    fixed = _EXCESS_NEWLINES.sub("\n\n", fixed)
    return fixed.strip()


def _strip_code_fence(payload: str) -> str:
    cleaned = payload.strip()
    match = _CODE_FENCE.match(cleaned)
    return match.group(1).strip() if match else cleaned


def load_payload(payload: str) -> dict[str, Any]:
    """Parse a raw payload as a JSON object.

    Raises:
        ParseError: If the payload is not JSON or not an object
    """
    try:
        parsed = json.loads(_strip_code_fence(payload))
    except json.JSONDecodeError as e:
        raise ParseError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ParseError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _valid_items(items: Any, model: type[BaseModel]) -> list[Any]:
    """Keep only entries whose every field is a non-empty string."""
    if not isinstance(items, list):
        return []

    valid = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError:
            logger.debug(f"Dropping invalid {model.__name__} entry: {item!r}")
    return valid


def validate_verses(items: Any) -> list[StudyVerse]:
    return _valid_items(items, StudyVerse)


def validate_key_terms(items: Any) -> list[KeyTerm]:
    return _valid_items(items, KeyTerm)


def validate_questions(items: Any) -> list[str]:
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, str) and item]


class ResponseNormalizer:
    """Turns a raw backend payload into a StructuredAnswer.

    Malformed payloads never raise: non-JSON output becomes the answer text with
    empty structured lists.
    """

    def normalize(self, raw_payload: str, backend_used: str = "") -> StructuredAnswer:
        try:
            parsed = load_payload(raw_payload)
        except ParseError as e:
            logger.warning(f"Falling back to plain-text answer from {backend_used or 'backend'}: {e}")
            return StructuredAnswer(
                answer=repair_paragraphs(raw_payload),
                backend_used=backend_used,
            )

        answer = parsed.get("answer")
        if not isinstance(answer, str) or not answer:
            answer = raw_payload

        return StructuredAnswer(
            answer=repair_paragraphs(answer),
            verses=validate_verses(parsed.get("verses")),
            key_terms=validate_key_terms(parsed.get("keyTerms")),
            suggested_questions=validate_questions(parsed.get("suggestedQuestions")),
            backend_used=backend_used,
        )
