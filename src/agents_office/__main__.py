"""Entry point: ``agents-office`` / ``python -m agents_office``."""

import asyncio
import logging
import sys

from .config import OfficeConfig, load_config
from .exceptions import ClaudeHomeNotFoundError
from .logging_manager import LoggingManager
from .paths import resolve_claude_home
from .server import OfficeServer

logger = logging.getLogger(__name__)


async def run(config: OfficeConfig) -> None:
    server = OfficeServer(config)
    await server.start_server()


def main() -> int:
    """Load configuration, set up logging and serve until interrupted."""
    config = load_config()
    LoggingManager(log_dir=config.log_dir, log_level=config.log_level)

    try:
        root = resolve_claude_home(config.claude_home)
    except ClaudeHomeNotFoundError as e:
        logger.critical(f"Cannot start log watcher: {e}")
        return 1

    logger.info(f"Agents Office watching {root}")
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
