"""
Tally - Personal finance ledger MCP server

Records income and expense transactions in SQLite and exposes them to MCP
clients as tools for adding, listing, summarizing, deleting, visualizing,
and exporting.
"""

from .config import VERSION
from .db import Entry, LedgerRepository, LedgerSummary, TransactionFilter
from .errors import NotFoundError, StoreError, TallyError, ValidationError
from .models import ChartType, GroupBy, TransactionDraft, TransactionKind
from .server import create_server

__version__ = VERSION

__all__ = [
    "ChartType",
    "Entry",
    "GroupBy",
    "LedgerRepository",
    "LedgerSummary",
    "NotFoundError",
    "StoreError",
    "TallyError",
    "TransactionDraft",
    "TransactionFilter",
    "TransactionKind",
    "ValidationError",
    "create_server",
]
