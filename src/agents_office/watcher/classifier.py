"""Routing of log entries to office roles.

Tool names are matched case-insensitively against a fixed table. ``Bash`` is
the one contextual rule: commands that mention version control, test runners
or package managers go to the tester, everything else to the runner.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import MAX_TASK_LENGTH, Agent, AgentStatus, AgentType, EntryType, LogEntry

DEFAULT_AGENT_TYPE = AgentType.EDITOR

BASH_TOOL = "bash"

TOOL_ROUTES: dict[str, AgentType] = {
    "read": AgentType.READER,
    "glob": AgentType.SEARCHER,
    "grep": AgentType.SEARCHER,
    "websearch": AgentType.SEARCHER,
    "webfetch": AgentType.SEARCHER,
    "write": AgentType.WRITER,
    "edit": AgentType.EDITOR,
    "notebookedit": AgentType.EDITOR,
    "editnotebook": AgentType.EDITOR,
    "todowrite": AgentType.PLANNER,
    "task": AgentType.PLANNER,
    "askuserquestion": AgentType.SUPPORT,
}

TESTER_KEYWORDS: tuple[str, ...] = (
    "git",
    "test",
    "npm",
    "pnpm",
    "yarn",
    "cargo",
    "jest",
    "vitest",
    "pytest",
)

STATUS_BY_ENTRY_TYPE: dict[EntryType, AgentStatus] = {
    EntryType.TOOL_CALL: AgentStatus.WORKING,
    EntryType.TOOL_RESULT: AgentStatus.IDLE,
    EntryType.ERROR: AgentStatus.ERROR,
    EntryType.MESSAGE: AgentStatus.THINKING,
}

TASK_LABELS: dict[EntryType, str] = {
    EntryType.TODO_UPDATE: "Todo update",
    EntryType.SESSION_START: "Session start",
    EntryType.SESSION_END: "Session end",
    EntryType.ERROR: "Error",
}


class ToolRouter:
    """Lookup table from tool name to agent type.

    Attributes:
        routes: Lower-cased tool name to agent type.
        tester_keywords: Lower-cased keywords that send a Bash command to the tester.
    """

    def __init__(
        self,
        routes: Mapping[str, AgentType] | None = None,
        tester_keywords: Iterable[str] | None = None,
    ):
        if routes is None:
            routes = TOOL_ROUTES
        if tester_keywords is None:
            tester_keywords = TESTER_KEYWORDS
        self.routes = {name.lower(): agent_type for name, agent_type in routes.items()}
        self.tester_keywords = tuple(keyword.lower() for keyword in tester_keywords)

    def extended(
        self,
        routes: Mapping[str, AgentType] | None = None,
        tester_keywords: Iterable[str] | None = None,
    ) -> ToolRouter:
        """Return a new router with extra routes and keywords layered on top."""
        merged_routes = dict(self.routes)
        for name, agent_type in (routes or {}).items():
            merged_routes[name.lower()] = agent_type
        keywords = list(self.tester_keywords)
        for keyword in tester_keywords or ():
            if keyword.lower() not in keywords:
                keywords.append(keyword.lower())
        return ToolRouter(merged_routes, keywords)

    def route(self, tool_name: str, content: str) -> AgentType:
        tool = tool_name.strip().lower()
        if tool == BASH_TOOL:
            lowered = content.lower()
            if any(keyword in lowered for keyword in self.tester_keywords):
                return AgentType.TESTER
            return AgentType.RUNNER
        return self.routes.get(tool, DEFAULT_AGENT_TYPE)


DEFAULT_ROUTER = ToolRouter()


def category_for(entry: LogEntry, router: ToolRouter = DEFAULT_ROUTER) -> AgentType:
    """Pick the agent type responsible for an entry.

    Args:
        entry: Parsed log entry.
        router: Tool routing table to use.

    Returns:
        Exactly one AgentType; unknown tools and tool-less entries fall back
        to the editor, tool-less errors go to support.
    """
    if entry.tool_name:
        return router.route(entry.tool_name, entry.content)
    if entry.entry_type is EntryType.ERROR:
        return AgentType.SUPPORT
    return DEFAULT_AGENT_TYPE


def status_for(entry: LogEntry) -> AgentStatus:
    """Map an entry type to the status shown at the desk."""
    return STATUS_BY_ENTRY_TYPE.get(entry.entry_type, AgentStatus.IDLE)


def summarize_task(entry: LogEntry) -> str:
    """Short human-readable description of an entry for ``current_task``.

    Message content is returned whole; the length cap is applied by :func:`classify`.
    """
    if entry.entry_type is EntryType.TOOL_CALL:
        return f"Tool call: {entry.tool_name}" if entry.tool_name else "Tool call"
    if entry.entry_type is EntryType.TOOL_RESULT:
        return f"Tool result: {entry.tool_name}" if entry.tool_name else "Tool result"
    if entry.entry_type in TASK_LABELS:
        return TASK_LABELS[entry.entry_type]
    return entry.content


def classify(
    entry: LogEntry,
    router: ToolRouter = DEFAULT_ROUTER,
    max_task_length: int = MAX_TASK_LENGTH,
) -> Agent:
    """Build the agent snapshot implied by a single entry.

    ``current_task`` is cut to ``max_task_length`` characters.
    """
    return Agent.for_type(
        category_for(entry, router),
        status=status_for(entry),
        current_task=summarize_task(entry)[:max_task_length],
    )
