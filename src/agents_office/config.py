"""Configuration for agents-office.

Settings come from ``AGENTS_OFFICE_*`` environment variables, optionally
overlaid with a YAML file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .watcher.classifier import DEFAULT_ROUTER, ToolRouter
from .watcher.models import MAX_TASK_LENGTH, AgentType

logger = logging.getLogger(__name__)

ENV_PREFIX = "AGENTS_OFFICE_"


@dataclass
class OfficeConfig:
    """Configuration for the watcher and the presentation server.

    Attributes:
        claude_home: Root directory to watch; None resolves to ``~/.claude``.
        debug_subdir: Subdirectory holding free text ``*.txt`` debug logs.
        projects_subdir: Subdirectory holding ``*.jsonl`` session logs.
        debounce_ms: Window in milliseconds used to coalesce filesystem events.
        step_ms: Poll step of the notification backend in milliseconds.
        root_poll_interval: Seconds between checks while the root does not exist.
        max_task_length: Cap for an agent's ``current_task``.
        server_host: Host the server binds to.
        server_port: Port the server listens on.
        log_dir: Directory for the service's own log files.
        log_level: Console log level.
        extra_tool_routes: Additional tool name to agent type id routes.
        extra_tester_keywords: Additional keywords routing Bash to the tester.
    """

    claude_home: str | None = None
    debug_subdir: str = "debug"
    projects_subdir: str = "projects"
    debounce_ms: int = 200
    step_ms: int = 50
    root_poll_interval: float = 2.0
    max_task_length: int = MAX_TASK_LENGTH
    server_host: str = "localhost"
    server_port: int = 8765
    log_dir: str = "/tmp/agents_office_logs"
    log_level: str = "INFO"
    extra_tool_routes: dict[str, str] = field(default_factory=dict)
    extra_tester_keywords: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> OfficeConfig:
        """Build a config from ``AGENTS_OFFICE_*`` environment variables.

        Only scalar settings are read from the environment; routing
        extensions come from the YAML file.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or f.name in ("extra_tool_routes", "extra_tester_keywords"):
                continue
            values[f.name] = _coerce(f.name, raw, cls)
        return cls(**values)

    def build_router(self) -> ToolRouter:
        """Return the default tool router extended with configured routes.

        Raises:
            ValueError: If a configured route names an unknown agent type.
        """
        routes: dict[str, AgentType] = {}
        for tool, agent_type in self.extra_tool_routes.items():
            try:
                routes[tool] = AgentType(agent_type)
            except ValueError:
                valid = ", ".join(t.value for t in AgentType)
                raise ValueError(
                    f"Unknown agent type '{agent_type}' for tool '{tool}'. Valid types: {valid}"
                ) from None
        if not routes and not self.extra_tester_keywords:
            return DEFAULT_ROUTER
        return DEFAULT_ROUTER.extended(routes, self.extra_tester_keywords)


def load_config(path: str | Path | None = None, environ: dict[str, str] | None = None) -> OfficeConfig:
    """Load configuration from the environment and an optional YAML file.

    Keys in the YAML file override environment values.

    Args:
        path: YAML file; defaults to ``AGENTS_OFFICE_CONFIG`` when set.
        environ: Environment mapping, ``os.environ`` when None.

    Returns:
        OfficeConfig

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValueError: If the YAML is malformed, names unknown settings or holds
            values of the wrong type
    """
    env = os.environ if environ is None else environ
    config = OfficeConfig.from_env(env)

    if path is None:
        path = env.get(ENV_PREFIX + "CONFIG")
    if path is None:
        return config

    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse configuration YAML: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping")

    known = {f.name for f in fields(OfficeConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

    for key, value in data.items():
        setattr(config, key, _validate(key, value))

    # Fail at startup rather than on the first routed entry
    config.build_router()

    logger.debug(f"Loaded configuration from {config_path}")
    return config


def _coerce(name: str, raw: str, cls: type[OfficeConfig]) -> Any:
    default = cls.__dataclass_fields__[name].default
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def _validate(name: str, value: Any) -> Any:
    """Check a YAML value against the type of the setting it overrides.

    Raises:
        ValueError: If the value has the wrong type
    """
    if name == "extra_tool_routes":
        if not isinstance(value, dict) or not all(
            isinstance(tool, str) and isinstance(agent_type, str)
            for tool, agent_type in value.items()
        ):
            raise ValueError(f"'{name}' must map tool names to agent type names, got {value!r}")
        return value

    if name == "extra_tester_keywords":
        if not isinstance(value, list) or not all(isinstance(k, str) for k in value):
            raise ValueError(f"'{name}' must be a list of strings, got {value!r}")
        return value

    default = OfficeConfig.__dataclass_fields__[name].default
    # bool is an int subclass
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"'{name}' must be a number, got {value!r}")
        return float(value)
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"'{name}' must be an integer, got {value!r}")
        return value
    if default is None and value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{name}' must be a string, got {value!r}")
    return value
