"""Exception types for agents-office."""


class AgentsOfficeError(Exception):
    """Base class for agents-office errors."""


class ClaudeHomeNotFoundError(AgentsOfficeError):
    """Raised when the Claude home directory cannot be resolved."""


class WatcherError(AgentsOfficeError):
    """Raised when the filesystem notification source fails."""
