"""Deliberation state, progress updates and results."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class AgentRole(str, Enum):
    """Committee members."""

    RESEARCHER = "researcher"
    SYNTHESIZER = "synthesizer"
    AUDITOR = "auditor"


class AgentPhase(str, Enum):
    """Progress tags carried by agent updates."""

    SEARCHING = "searching"
    THINKING = "thinking"
    DEBATING = "debating"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class Verdict(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class AgentUpdate(BaseModel):
    """Progress notification for callers rendering live status."""

    agent: AgentRole
    phase: AgentPhase
    message: str
    iteration: int = 0


class DeliberationResult(BaseModel):
    """Final committee answer.

    `approved` is False when the iteration cap was reached and the last,
    still-rejected draft is being returned.
    """

    answer: str
    sources: list[str] = Field(default_factory=list)
    iterations: int
    approved: bool


@dataclass
class DeliberationState:
    """Mutable state of one deliberation; research notes only grow."""

    research_notes: str
    draft_answer: str = ""
    iteration: int = 0
    verdict: Verdict = Verdict.REJECTED

    def append_critique(self, critique: str) -> None:
        self.research_notes += f"\n\nCrítica do Auditor: {critique}"
