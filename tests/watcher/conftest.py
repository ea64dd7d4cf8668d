"""Shared fixtures for watcher tests."""

from pathlib import Path
from typing import Any

import pytest

from agents_office.watcher.aggregator import BatchAggregator
from agents_office.watcher.models import EntryType, LogEntry
from agents_office.watcher.tailer import FileTailer


class RecordingSink:
    """Event sink that keeps every emitted payload."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, topic: str, payload: dict[str, Any]) -> None:
        self.events.append((topic, payload))

    def payloads(self, event_type: str) -> list[dict[str, Any]]:
        return [p["payload"] for _, p in self.events if p["type"] == event_type]


@pytest.fixture
def claude_home(tmp_path: Path) -> Path:
    """Create a Claude home layout with debug and projects directories."""
    root = tmp_path / ".claude"
    (root / "debug").mkdir(parents=True)
    (root / "projects" / "my-project").mkdir(parents=True)
    return root


@pytest.fixture
def debug_log(claude_home: Path) -> Path:
    """Create an empty debug log file."""
    log_file = claude_home / "debug" / "session.txt"
    log_file.write_text("")
    return log_file


@pytest.fixture
def session_log(claude_home: Path) -> Path:
    """Create an empty JSONL session log file."""
    log_file = claude_home / "projects" / "my-project" / "session.jsonl"
    log_file.write_text("")
    return log_file


@pytest.fixture
def temp_log_file(tmp_path: Path) -> Path:
    """Create temporary log file with initial content."""
    log_file = tmp_path / "test.log"
    log_file.write_text("Line 1\nLine 2\nLine 3\n")
    return log_file


@pytest.fixture
def tailer() -> FileTailer:
    return FileTailer()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def aggregator(tailer: FileTailer, sink: RecordingSink) -> BatchAggregator:
    return BatchAggregator(tailer, sink)


@pytest.fixture
def make_entry():
    """Factory for LogEntry objects with defaults for irrelevant fields."""

    def _make_entry(
        entry_type: EntryType = EntryType.TOOL_CALL,
        tool_name: str | None = None,
        content: str = "",
    ) -> LogEntry:
        return LogEntry(
            timestamp="",
            entry_type=entry_type,
            content=content,
            agent_id=None,
            tool_name=tool_name,
        )

    return _make_entry
