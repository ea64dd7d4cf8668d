"""Logging setup for agents-office.

Configures the ``agents_office`` logger namespace with a human-readable
console handler and a rotating JSON-lines file handler.
"""

import json
import logging
import logging.handlers
from pathlib import Path

LOGGER_NAME = "agents_office"

# Attributes every LogRecord carries; anything else was passed via ``extra``
_RESERVED_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "asctime",
        "taskName",
        "extras",
    ]
)


def collect_extras(record: logging.LogRecord) -> dict:
    """Return the ``extra`` fields attached to a record, JSON-safe."""
    extras = {}
    for key, value in record.__dict__.items():
        if key in _RESERVED_ATTRS:
            continue
        try:
            json.dumps(value)  # Ensure serializable
            extras[key] = value
        except (TypeError, ValueError):
            extras[key] = str(value)
    return extras


class ConsoleExtraFilter(logging.Filter):
    """Renders ``extra`` fields as ``key=value`` pairs for the console."""

    def filter(self, record):
        extras = collect_extras(record)
        record.extras = (" " + " ".join(f"{k}={v}" for k, v in extras.items())) if extras else ""
        return True


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line, with ``extra`` fields merged in."""

    def format(self, record):
        log_obj = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_obj.update(collect_extras(record))
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj)


class LoggingManager:
    """Manages logging for the watcher and the server."""

    def __init__(self, log_dir: str | Path = "/tmp/agents_office_logs", log_level: str = "INFO"):
        """Initialize logging manager.

        Args:
            log_dir: Directory for the rotating log file
            log_level: Console log level
        """
        self.log_dir = Path(log_dir)
        self.log_level = getattr(logging, log_level.upper())
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / "agents_office.log"

        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup the package logger with console and file handlers."""
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.DEBUG)  # Handlers do the filtering
        logger.propagate = False

        # Remove existing handlers
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

        # Console handler - human readable
        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.log_level)
        console_handler.addFilter(ConsoleExtraFilter())
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s%(extras)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(console_handler)

        # File handler - structured JSON
        file_handler = logging.handlers.RotatingFileHandler(
            self.log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(logging.DEBUG)  # Capture everything to file
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

        return logger

    def close(self) -> None:
        """Detach and close all handlers installed by this manager."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
