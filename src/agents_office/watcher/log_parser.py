"""Parsing of raw log lines into LogEntry objects.

Two dialects are supported:
    - Debug logs (``*.txt``): free text, optionally prefixed by a timestamp.
    - Session logs (``*.jsonl`` / ``*.json``): one JSON object per line.

Session lines that are not valid JSON objects are parsed as debug lines, so a
corrupted record still shows up as a message instead of being dropped.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from .models import EntryType, LogEntry

logger = logging.getLogger(__name__)

TIMESTAMP_LENGTH = 19

DEBUG_EXTENSIONS = frozenset({".txt"})
SESSION_EXTENSIONS = frozenset({".jsonl", ".json"})
LOG_EXTENSIONS = DEBUG_EXTENSIONS | SESSION_EXTENSIONS

TOOL_CALL_PREFIX = "Tool call: "
TOOL_RESULT_PREFIX = "Tool result: "

# Checked in order, first match wins
KNOWN_TOOLS = (
    "Read",
    "Write",
    "Edit",
    "Glob",
    "Grep",
    "Bash",
    "WebSearch",
    "WebFetch",
    "Task",
    "TodoWrite",
)

TODO_MARKERS = ("TodoWrite", "Task:", "todo", "TODO")

ERROR_PATTERN = re.compile(r"\[error\]|error:", re.IGNORECASE)

SESSION_TYPES = {
    "tool_use": EntryType.TOOL_CALL,
    "tool_result": EntryType.TOOL_RESULT,
    "message": EntryType.MESSAGE,
    "error": EntryType.ERROR,
}

AGENT_ID_FIELDS = ("agent_id", "agentId", "session_id", "sessionId")


def parse_debug_line(line: str) -> LogEntry | None:
    """Parse a line from a free text debug log.

    Args:
        line: Raw line without its terminator.

    Returns:
        LogEntry, or None for blank lines.
    """
    line = line.strip()
    if not line:
        return None

    timestamp, content = extract_timestamp(line)
    entry_type, tool_name = determine_entry_type(content)

    return LogEntry(
        timestamp=timestamp,
        entry_type=entry_type,
        content=content,
        agent_id=None,
        tool_name=tool_name,
    )


def parse_session_line(line: str) -> LogEntry | None:
    """Parse a line from a JSONL session log.

    Lines that fail to decode, or decode to something other than an object,
    fall back to :func:`parse_debug_line`.

    Args:
        line: Raw line without its terminator.

    Returns:
        LogEntry, or None for blank lines.
    """
    line = line.strip()
    if not line:
        return None

    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        logger.debug("Session line is not valid JSON, parsing as text", extra={"line": line[:80]})
        return parse_debug_line(line)

    if not isinstance(record, dict):
        return parse_debug_line(line)

    entry_type = SESSION_TYPES.get(_string_field(record, "type") or "", EntryType.MESSAGE)

    return LogEntry(
        timestamp=_string_field(record, "timestamp") or "",
        entry_type=entry_type,
        content=_string_field(record, "content", "message") or "",
        agent_id=_string_field(record, *AGENT_ID_FIELDS),
        tool_name=_string_field(record, "name", "tool"),
    )


def parse_line(line: str, path: str | Path) -> LogEntry | None:
    """Parse a line using the dialect implied by the file extension."""
    if Path(path).suffix.lower() in SESSION_EXTENSIONS:
        return parse_session_line(line)
    return parse_debug_line(line)


def extract_timestamp(line: str) -> tuple[str, str]:
    """Split a leading ``YYYY-MM-DD HH:MM:SS``-shaped timestamp off a line.

    Returns:
        Tuple of (timestamp, content); timestamp is empty when none is found.
    """
    if len(line) >= TIMESTAMP_LENGTH and line[:4].isascii() and line[:4].isdigit():
        candidate = line[:TIMESTAMP_LENGTH]
        if "-" in candidate and (":" in candidate or "T" in candidate):
            return candidate, line[TIMESTAMP_LENGTH + 1 :].strip()
    return "", line


def determine_entry_type(content: str) -> tuple[EntryType, str | None]:
    """Classify free text content into an entry type and optional tool name."""
    if content.startswith(TOOL_CALL_PREFIX):
        return EntryType.TOOL_CALL, _first_token(content[len(TOOL_CALL_PREFIX) :])
    if content.startswith(TOOL_RESULT_PREFIX):
        return EntryType.TOOL_RESULT, _first_token(content[len(TOOL_RESULT_PREFIX) :])

    if ERROR_PATTERN.search(content):
        return EntryType.ERROR, None

    if any(marker in content for marker in TODO_MARKERS):
        return EntryType.TODO_UPDATE, "TodoWrite"

    for tool in KNOWN_TOOLS:
        if tool in content:
            return EntryType.TOOL_CALL, tool

    return EntryType.MESSAGE, None


def _first_token(text: str) -> str | None:
    parts = text.split()
    return parts[0] if parts else None


def _string_field(record: dict[str, Any], *keys: str) -> str | None:
    """Return the first present string value among ``keys``.

    Non-string values count as absent, so a structured ``content`` block does
    not shadow a plain ``message`` fallback.
    """
    for key in keys:
        value = record.get(key)
        if isinstance(value, str):
            return value
    return None
