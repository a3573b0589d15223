"""
Database module for the Tally ledger.

Structure:
- base.py: Base repository with connection management and schema
- models.py: Data models (Entry, LedgerSummary)
- filters.py: Optional predicates compiled to parameter-bound SQL
- transactions.py: Insert, read, and delete operations
- queries.py: Totals computed in SQL
- repository.py: Main facade that composes all sub-repositories
"""

from .base import BaseRepository
from .filters import TransactionFilter
from .models import Entry, LedgerSummary
from .queries import QueryRepository
from .repository import LedgerRepository
from .transactions import TransactionRepository

__all__ = [
    # Base
    "BaseRepository",
    # Models
    "Entry",
    "LedgerSummary",
    "TransactionFilter",
    # Repositories
    "LedgerRepository",
    "QueryRepository",
    "TransactionRepository",
]
