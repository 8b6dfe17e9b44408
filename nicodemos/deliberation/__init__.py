"""Multi-agent deliberation module."""

from .models import AgentPhase, AgentRole, AgentUpdate, DeliberationResult, DeliberationState
from .orchestrator import DeliberationOrchestrator, extract_sources

__all__ = [
    "AgentPhase",
    "AgentRole",
    "AgentUpdate",
    "DeliberationOrchestrator",
    "DeliberationResult",
    "DeliberationState",
    "extract_sources",
]
