"""In-process cache of first-turn answers."""

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import StructuredAnswer

if TYPE_CHECKING:
    from nicodemos.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60 * 24
DEFAULT_MAX_ENTRIES = 200
CACHE_VERSION = 6

# ASCII word characters, any whitespace and the Portuguese accented letters
_DISALLOWED_CHARS = re.compile(r"[^0-9A-Za-z_\sáàâãéèêíìîóòôõúùûç]")
_WHITESPACE = re.compile(r"\s+")
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def normalize_question(text: str) -> str:
    """Lowercase, trim, drop punctuation and collapse whitespace."""
    normalized = _DISALLOWED_CHARS.sub("", text.lower().strip())
    return _WHITESPACE.sub(" ", normalized)


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def question_key(text: str, version: int = CACHE_VERSION) -> str:
    """Versioned fingerprint of a question.

    A 32-bit signed rolling hash (`h = h * 31 + code`) over the normalized text.
    Bumping `version` invalidates every previously stored key.
    """
    value = 0
    for char in normalize_question(text):
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return f"nic_v{version}_{_to_base36(abs(value))}"


@dataclass
class CacheEntry:
    """Stored answer and the clock reading at insertion."""

    answer: StructuredAnswer
    created_at: float


class ResponseCache:
    """TTL cache with bounded, insertion-ordered eviction.

    Reads do not refresh an entry's position, and overwriting a key keeps its
    original position. Expired entries are dropped lazily when read.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        version: int = CACHE_VERSION,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.version = version
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ResponseCache":
        return cls(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
            version=settings.cache_version,
        )

    def key_for(self, question: str) -> str:
        return question_key(question, self.version)

    def get(self, question: str) -> StructuredAnswer | None:
        """Return a copy of the cached answer flagged `from_cache`, or None."""
        key = self.key_for(question)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self.clock() - entry.created_at >= self.ttl_seconds:
            logger.debug(f"Cache entry {key} expired")
            del self._entries[key]
            return None

        logger.debug(f"Cache hit for {key}")
        return entry.answer.model_copy(update={"from_cache": True}, deep=True)

    def put(self, question: str, answer: StructuredAnswer) -> None:
        """Store an answer, evicting the oldest entry beyond capacity."""
        key = self.key_for(question)
        self._entries[key] = CacheEntry(answer=answer.model_copy(deep=True), created_at=self.clock())

        if len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Evicted cache entry {oldest}")

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, question: object) -> bool:
        return isinstance(question, str) and self.key_for(question) in self._entries
