"""Data models for the log watcher.

This module defines the core data structures shared by the parser, classifier,
tailer and batch aggregator: log entries, the closed agent taxonomy, agent
snapshots, per-file tailing state and the per-notification batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MAX_TASK_LENGTH = 200


class EntryType(Enum):
    """Kind of activity a single log line describes."""

    TOOL_CALL = "tool_call"
    TOOL_RESULT = "tool_result"
    MESSAGE = "message"
    ERROR = "error"
    TODO_UPDATE = "todo_update"
    SESSION_START = "session_start"
    SESSION_END = "session_end"


class AgentStatus(Enum):
    """Activity status shown for an agent desk."""

    IDLE = "idle"
    WORKING = "working"
    THINKING = "thinking"
    PASSING = "passing"
    ERROR = "error"


class AgentType(Enum):
    """Closed set of office roles a log entry can be routed to.

    The enum value doubles as the agent id and the deduplication key for
    agent updates within a batch.

    Attributes:
        READER: Reads files.
        SEARCHER: Globs, greps, searches and fetches from the web.
        WRITER: Creates files.
        EDITOR: Modifies files; default for unknown tools.
        RUNNER: Runs general shell commands.
        TESTER: Runs version-control, test and package-manager commands.
        PLANNER: Tracks todos and spawns tasks.
        SUPPORT: Talks to the user and handles errors.
    """

    READER = "reader"
    SEARCHER = "searcher"
    WRITER = "writer"
    EDITOR = "editor"
    RUNNER = "runner"
    TESTER = "tester"
    PLANNER = "planner"
    SUPPORT = "support"


_DESK_X_LEFT = 60.0
_DESK_X_MIDDLE = 150.0
_DESK_X_RIGHT = 240.0

_DESK_Y_SECTION_A = 130.0
_DESK_Y_SECTION_B = 320.0
_DESK_Y_SECTION_C = 520.0

# Section A: explore/plan, section B: build/run, section C: verify/support
DESK_POSITIONS: dict[AgentType, tuple[float, float]] = {
    AgentType.READER: (_DESK_X_LEFT, _DESK_Y_SECTION_A),
    AgentType.SEARCHER: (_DESK_X_MIDDLE, _DESK_Y_SECTION_A),
    AgentType.PLANNER: (_DESK_X_RIGHT, _DESK_Y_SECTION_A),
    AgentType.WRITER: (_DESK_X_LEFT, _DESK_Y_SECTION_B),
    AgentType.EDITOR: (_DESK_X_MIDDLE, _DESK_Y_SECTION_B),
    AgentType.RUNNER: (_DESK_X_RIGHT, _DESK_Y_SECTION_B),
    AgentType.TESTER: (_DESK_X_LEFT, _DESK_Y_SECTION_C),
    AgentType.SUPPORT: (_DESK_X_MIDDLE, _DESK_Y_SECTION_C),
}


def desk_position(agent_type: AgentType) -> tuple[float, float]:
    """Return the fixed desk coordinate for an agent type."""
    return DESK_POSITIONS[agent_type]


@dataclass(frozen=True)
class LogEntry:
    """One structured record derived from a single log line.

    Attributes:
        timestamp: Timestamp text as found in the line, empty if unknown.
        entry_type: Kind of activity.
        content: Human-readable text of the line.
        agent_id: Originating session/agent identifier, if the line carries one.
        tool_name: Tool referenced by the line, if any.
    """

    timestamp: str
    entry_type: EntryType
    content: str
    agent_id: str | None = None
    tool_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "entry_type": self.entry_type.value,
            "content": self.content,
            "agent_id": self.agent_id,
            "tool_name": self.tool_name,
        }


@dataclass(frozen=True)
class Agent:
    """Latest known snapshot of one office role.

    An Agent is rebuilt from scratch for every classified entry; there is at
    most one per agent type in a batch.

    Attributes:
        id: Stable identifier, equal to ``agent_type.value``.
        agent_type: Role the snapshot belongs to.
        status: Current activity status.
        current_task: Short summary of what the role is doing.
        desk_position: Fixed (x, y) coordinate of the role's desk.
    """

    id: str
    agent_type: AgentType
    status: AgentStatus
    current_task: str | None
    desk_position: tuple[float, float]

    @classmethod
    def for_type(
        cls,
        agent_type: AgentType,
        status: AgentStatus = AgentStatus.IDLE,
        current_task: str | None = None,
    ) -> Agent:
        return cls(
            id=agent_type.value,
            agent_type=agent_type,
            status=status,
            current_task=current_task,
            desk_position=desk_position(agent_type),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "agent_type": self.agent_type.value,
            "status": self.status.value,
            "current_task": self.current_task,
            "desk_position": list(self.desk_position),
        }


@dataclass
class TailerState:
    """Reading position for one tailed file.

    Attributes:
        byte_offset: Position in bytes up to which the file has been consumed.
        partial_line: Trailing fragment not yet terminated by a newline.
        inode: Inode seen at the last read, used to notice replaced files.
    """

    byte_offset: int = 0
    partial_line: str = ""
    inode: int | None = None


@dataclass
class Batch:
    """Entries and agent snapshots collected for one coalesced notification."""

    logs: list[LogEntry] = field(default_factory=list)
    agents: dict[str, Agent] = field(default_factory=dict)

    def add(self, entry: LogEntry, agent: Agent) -> None:
        self.logs.append(entry)
        # Re-insert so iteration order follows the latest update
        self.agents.pop(agent.id, None)
        self.agents[agent.id] = agent

    def is_empty(self) -> bool:
        return not self.logs

    def to_payload(self) -> dict[str, Any]:
        return {
            "logs": [entry.to_dict() for entry in self.logs],
            "agents": [agent.to_dict() for agent in self.agents.values()],
        }
