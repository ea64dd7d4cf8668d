"""Unit tests for the command line entry point."""

from unittest.mock import AsyncMock, patch

import pytest

from agents_office import __main__ as entry
from agents_office.config import OfficeConfig
from agents_office.exceptions import ClaudeHomeNotFoundError


def test_main_serves_until_done(tmp_path):
    config = OfficeConfig(claude_home=str(tmp_path), log_dir=str(tmp_path / "logs"))

    with (
        patch.object(entry, "load_config", return_value=config),
        patch.object(entry, "LoggingManager") as mock_logging,
        patch.object(entry, "run", new=AsyncMock()) as mock_run,
    ):
        assert entry.main() == 0

    mock_logging.assert_called_once_with(log_dir=config.log_dir, log_level=config.log_level)
    mock_run.assert_awaited_once_with(config)


def test_main_fails_without_home(tmp_path):
    config = OfficeConfig(log_dir=str(tmp_path / "logs"))

    with (
        patch.object(entry, "load_config", return_value=config),
        patch.object(entry, "LoggingManager"),
        patch.object(
            entry,
            "resolve_claude_home",
            side_effect=ClaudeHomeNotFoundError("Could not find home directory"),
        ),
        patch.object(entry, "run", new=AsyncMock()) as mock_run,
    ):
        assert entry.main() == 1

    mock_run.assert_not_called()


@pytest.mark.asyncio
async def test_run_serves_office_server():
    config = OfficeConfig()

    with patch.object(entry, "OfficeServer") as mock_server_cls:
        mock_server_cls.return_value.start_server = AsyncMock()
        await entry.run(config)

    mock_server_cls.assert_called_once_with(config)
    mock_server_cls.return_value.start_server.assert_awaited_once()
