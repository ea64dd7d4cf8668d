"""Lookups exposed to the presentation layer."""

from __future__ import annotations

from .config import OfficeConfig
from .paths import resolve_claude_home
from .watcher.models import Agent, AgentType


def get_claude_home(config: OfficeConfig | None = None) -> str:
    """Return the watched root as a string.

    Raises:
        ClaudeHomeNotFoundError: If no home directory can be determined.
    """
    return str(resolve_claude_home(config.claude_home if config else None))


def get_agents() -> list[Agent]:
    """Return the initial roster: one idle agent per role, at its desk."""
    return [Agent.for_type(agent_type) for agent_type in AgentType]
