"""agents-office: watches Claude Code logs and turns them into office activity."""

from .config import OfficeConfig, load_config
from .exceptions import AgentsOfficeError, ClaudeHomeNotFoundError, WatcherError

__all__ = [
    "AgentsOfficeError",
    "ClaudeHomeNotFoundError",
    "OfficeConfig",
    "WatcherError",
    "load_config",
]

__version__ = "0.1.0"
