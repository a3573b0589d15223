"""
Server runner for Tally.

This module handles configuration loading and MCP server startup.
"""

import logging
import sys

from tally import config
from tally.config import (
    LOG_FILE,
    LOG_FORMAT,
    ensure_directories,
    get_log_level,
)
from tally.db import LedgerRepository
from tally.errors import StoreError

from .server import create_server

logger = logging.getLogger(__name__)


def configure_logging():
    """Configure logging to the log file and stderr (stdout carries stdio transport)."""
    ensure_directories()
    logging.basicConfig(
        level=get_log_level(),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(sys.stderr),
        ],
    )


def run():
    """Run the MCP server with comprehensive error handling."""
    configure_logging()

    transport = config.TRANSPORT
    if transport not in config.TRANSPORTS:
        logger.error(
            f"Unknown transport '{transport}' (expected one of {config.TRANSPORTS})"
        )
        sys.exit(1)

    try:
        repository = LedgerRepository(config.DEFAULT_DB_PATH)
    except StoreError as e:
        logger.critical(f"Failed to initialize ledger store: {e}", exc_info=True)
        sys.exit(1)

    server = create_server(repository)

    try:
        if transport == "stdio":
            logger.info("Starting Tally MCP server on stdio")
            server.run(transport="stdio")
        else:
            logger.info(
                f"Tally MCP server running on "
                f"http://{config.HOST}:{config.PORT}{config.MCP_PATH}"
            )
            server.run(
                transport="http",
                host=config.HOST,
                port=config.PORT,
                path=config.MCP_PATH,
            )
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.critical(f"Server error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
