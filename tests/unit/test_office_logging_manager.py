"""Unit tests for logging_manager module."""

import json
import logging
import logging.handlers
import sys

import pytest

from agents_office.logging_manager import (
    LOGGER_NAME,
    ConsoleExtraFilter,
    JsonLineFormatter,
    LoggingManager,
    collect_extras,
)


@pytest.fixture
def logging_manager(tmp_path):
    """Create a LoggingManager and restore the package logger afterwards."""
    logger = logging.getLogger(LOGGER_NAME)
    saved = (logger.level, logger.propagate, list(logger.handlers))

    manager = LoggingManager(log_dir=tmp_path / "logs", log_level="WARNING")
    yield manager

    manager.close()
    logger.setLevel(saved[0])
    logger.propagate = saved[1]
    for handler in saved[2]:
        logger.addHandler(handler)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="agents_office.watcher.tailer",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Read %d lines",
        args=(3,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCollectExtras:
    """Test extraction of ``extra`` fields."""

    def test_standard_attributes_are_skipped(self):
        assert collect_extras(_record()) == {}

    def test_extra_fields_are_collected(self):
        extras = collect_extras(_record(path="/tmp/a.txt", log_count=2))
        assert extras == {"path": "/tmp/a.txt", "log_count": 2}

    def test_unserializable_values_become_strings(self):
        extras = collect_extras(_record(obj=object()))
        assert extras["obj"].startswith("<object object")


class TestFormatters:
    """Test console filter and JSON formatter."""

    def test_console_filter_renders_key_value_pairs(self):
        record = _record(path="/tmp/a.txt")

        assert ConsoleExtraFilter().filter(record)
        assert record.extras == " path=/tmp/a.txt"

    def test_console_filter_without_extras(self):
        record = _record()
        ConsoleExtraFilter().filter(record)
        assert record.extras == ""

    def test_json_formatter(self):
        line = JsonLineFormatter().format(_record(path="/tmp/a.txt"))

        data = json.loads(line)
        assert data["level"] == "INFO"
        assert data["logger"] == "agents_office.watcher.tailer"
        assert data["message"] == "Read 3 lines"
        assert data["path"] == "/tmp/a.txt"

    def test_json_formatter_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        data = json.loads(JsonLineFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


class TestLoggingManager:
    """Test LoggingManager setup."""

    def test_creates_log_directory(self, logging_manager, tmp_path):
        assert (tmp_path / "logs").is_dir()
        assert logging_manager.log_file == tmp_path / "logs" / "agents_office.log"

    def test_installs_console_and_file_handlers(self, logging_manager):
        handlers = logging_manager.logger.handlers

        assert len(handlers) == 2
        console, file_handler = handlers
        assert console.level == logging.WARNING
        assert file_handler.level == logging.DEBUG
        assert isinstance(file_handler, logging.handlers.RotatingFileHandler)
        assert logging_manager.logger.propagate is False

    def test_child_loggers_write_json_lines(self, logging_manager):
        child = logging.getLogger("agents_office.watcher.aggregator")
        child.debug("Emitting batch", extra={"log_count": 4})

        for handler in logging_manager.logger.handlers:
            handler.flush()

        lines = logging_manager.log_file.read_text().splitlines()
        data = json.loads(lines[-1])
        assert data["message"] == "Emitting batch"
        assert data["log_count"] == 4

    def test_reinitialising_replaces_handlers(self, logging_manager, tmp_path):
        LoggingManager(log_dir=tmp_path / "other", log_level="INFO")

        assert len(logging.getLogger(LOGGER_NAME).handlers) == 2

    def test_close_removes_handlers(self, logging_manager):
        logging_manager.close()
        assert logging_manager.logger.handlers == []

    def test_invalid_level_raises(self, tmp_path):
        with pytest.raises(AttributeError):
            LoggingManager(log_dir=tmp_path, log_level="LOUD")
