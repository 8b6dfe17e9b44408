"""Rule-based question classification.

Rules are an ordered list of `(predicate, category)` pairs; the first matching
rule wins and anything unmatched is `simple`. Classification is pure and never
touches the network.
"""

import re
from collections.abc import Callable

from .models import QuestionCategory

MAX_GREETING_WORDS = 5

GREETING_PATTERN = re.compile(
    r"^(?:ol[aá]|oi|bom dia|boa tarde|boa noite|shalom|paz|hey|hello|hi)\b"
)
STRUCTURAL_PATTERN = re.compile(
    r"estrutura|panorama|divis[aã]o|outline|resumo do livro|vis[aã]o geral"
    r"|se[cç][oõ]es|como .+ [eé] organizado"
)
EXEGETICAL_PATTERN = re.compile(
    r"\d+[.:]\d+|vers[ií]culo|expli(?:que|car)|signific|grego|hebr|original"
    r"|exeg|traduz|palavra"
)


def _normalize(text: str) -> str:
    return text.lower().strip()


def is_greeting(text: str) -> bool:
    """Short salutation of at most five words."""
    lower = _normalize(text)
    return bool(GREETING_PATTERN.search(lower)) and len(lower.split()) <= MAX_GREETING_WORDS


def is_structural(text: str) -> bool:
    """Asks about a book's structure, outline or overview."""
    return bool(STRUCTURAL_PATTERN.search(_normalize(text)))


def is_exegetical(text: str) -> bool:
    """Mentions a chapter:verse reference, meaning, translation or original languages."""
    return bool(EXEGETICAL_PATTERN.search(_normalize(text)))


CLASSIFICATION_RULES: list[tuple[Callable[[str], bool], QuestionCategory]] = [
    (is_greeting, QuestionCategory.GREETING),
    (is_structural, QuestionCategory.STRUCTURAL),
    (is_exegetical, QuestionCategory.EXEGETICAL),
]


def classify(text: str) -> QuestionCategory:
    """Map question text to exactly one category."""
    for predicate, category in CLASSIFICATION_RULES:
        if predicate(text):
            return category
    return QuestionCategory.SIMPLE
