"""
Configuration module for Tally.

Contains constants, settings, and configuration values used throughout the application.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Version
VERSION = "0.1.0"

# Load .env from the working directory before reading environment settings
load_dotenv(Path.cwd() / ".env")


def get_project_root() -> Path:
    """Directory holding data/ and logs/: $TALLY_HOME, else the working directory."""
    home = os.getenv("TALLY_HOME")
    return Path(home).expanduser() if home else Path.cwd()


# Application paths
PROJECT_ROOT = get_project_root()
DATA_DIR = PROJECT_ROOT / "data"
LOG_DIR = PROJECT_ROOT / "logs"
EXPORT_DIR = DATA_DIR / "exports"

# Database configuration
DEFAULT_DB_PATH = Path(os.getenv("TALLY_DB_PATH", str(DATA_DIR / "transactions.db")))
DB_TIMEOUT = 10.0  # seconds

# MCP server configuration
SERVER_NAME = "tally"
SERVER_INSTRUCTIONS = (
    "Personal finance ledger. Record income and expenses, list and summarize "
    "them, visualize them as charts, and delete them (bulk deletions must be "
    "confirmed with confirmBulk=true after reviewing the preview)."
)
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
TRANSPORT = os.getenv("TALLY_TRANSPORT", "http")
MCP_PATH = "/mcp"
TRANSPORTS = ["stdio", "http"]

# Deletion workflow
DELETE_PREVIEW_LIMIT = 5
DELETE_RESULT_LIMIT = 10

# Validation constraints
MAX_CATEGORY_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

# Export configuration
MAX_EXPORT_ENTRIES = 10000

# Chart generation
CHART_DPI = 150
CHART_FORMAT = "png"
CHART_WIDTH = 10
CHART_HEIGHT = 5

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = LOG_DIR / "tally.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Error messages
ERROR_MESSAGES = {
    "database_error": "Database error occurred. Please try again later.",
    "missing_criteria": (
        "You must specify at least one deletion criterion "
        "(id, ids, category, type, date range, or olderThan)."
    ),
    "internal_error": "An internal error occurred. Please try again.",
}


def ensure_directories():
    """Ensure required directories exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    EXPORT_DIR.mkdir(parents=True, exist_ok=True)


def get_log_level():
    """Get the configured log level."""
    import logging

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(LOG_LEVEL.upper(), logging.INFO)
