"""Log watching pipeline for Claude Code activity.

This package tails the Claude Code debug and session logs, parses each new
line into a LogEntry, routes it to one of the office roles and emits batched
updates through an event sink.

Key Components:
    - models: Log entries, agent taxonomy and tailing state
    - log_parser: Free text and JSONL line parsing
    - classifier: Tool routing and status mapping
    - tailer: Incremental reading with truncation/rotation detection
    - aggregator: Per-notification batch assembly
    - log_watcher: Debounced directory watching on a background thread

Example:
    >>> from agents_office.events import EventBus
    >>> from agents_office.watcher import LogWatcher
    >>> bus = EventBus()
    >>> watcher = LogWatcher(Path.home() / ".claude", bus)
    >>> watcher.start()
"""

from __future__ import annotations

from .aggregator import BatchAggregator
from .classifier import ToolRouter, category_for, classify, status_for, summarize_task
from .log_parser import parse_debug_line, parse_line, parse_session_line
from .log_watcher import DirectoryWatcher, LogWatcher
from .models import Agent, AgentStatus, AgentType, Batch, EntryType, LogEntry, TailerState
from .tailer import FileTailer

__all__ = [
    "Agent",
    "AgentStatus",
    "AgentType",
    "Batch",
    "BatchAggregator",
    "DirectoryWatcher",
    "EntryType",
    "FileTailer",
    "LogEntry",
    "LogWatcher",
    "TailerState",
    "ToolRouter",
    "category_for",
    "classify",
    "parse_debug_line",
    "parse_line",
    "parse_session_line",
    "status_for",
    "summarize_task",
]
