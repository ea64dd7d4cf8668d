"""Unit tests for the lookups exposed to the presentation layer."""

from pathlib import Path

import pytest

from agents_office.commands import get_agents, get_claude_home
from agents_office.config import OfficeConfig
from agents_office.exceptions import ClaudeHomeNotFoundError
from agents_office.paths import resolve_claude_home
from agents_office.watcher.models import DESK_POSITIONS, AgentStatus, AgentType


class TestGetClaudeHome:
    """Test get_claude_home and resolve_claude_home."""

    def test_defaults_to_dot_claude_in_home(self, monkeypatch, tmp_path):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_claude_home() == str(tmp_path / ".claude")

    def test_config_override(self, tmp_path):
        config = OfficeConfig(claude_home=str(tmp_path / "elsewhere"))
        assert get_claude_home(config) == str(tmp_path / "elsewhere")

    def test_override_expands_user(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_claude_home("~/claude-logs") == tmp_path / "claude-logs"

    def test_empty_override_uses_default(self, monkeypatch, tmp_path):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert resolve_claude_home("") == tmp_path / ".claude"

    def test_missing_home_raises(self, monkeypatch):
        def no_home(cls):
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "home", classmethod(no_home))

        with pytest.raises(ClaudeHomeNotFoundError, match="Could not find home directory"):
            get_claude_home()


class TestGetAgents:
    """Test the initial roster."""

    def test_one_idle_agent_per_type(self):
        agents = get_agents()

        assert [agent.agent_type for agent in agents] == list(AgentType)
        assert all(agent.status is AgentStatus.IDLE for agent in agents)
        assert all(agent.current_task is None for agent in agents)

    def test_agents_sit_at_their_desks(self):
        for agent in get_agents():
            assert agent.id == agent.agent_type.value
            assert agent.desk_position == DESK_POSITIONS[agent.agent_type]
