"""Location of the Claude Code home directory."""

from __future__ import annotations

from pathlib import Path

from .exceptions import ClaudeHomeNotFoundError

CLAUDE_DIR_NAME = ".claude"


def resolve_claude_home(override: str | Path | None = None) -> Path:
    """Return the root directory the watcher observes.

    Args:
        override: Explicit root; ``~/.claude`` is used when empty.

    Raises:
        ClaudeHomeNotFoundError: If no home directory can be determined.
    """
    if override:
        return Path(override).expanduser()
    try:
        home = Path.home()
    except (KeyError, RuntimeError) as e:
        raise ClaudeHomeNotFoundError("Could not find home directory") from e
    return home / CLAUDE_DIR_NAME
