"""
Main repository facade for the Tally ledger.

Composes the specialized repositories behind a single object that is
constructed once and injected wherever the ledger is needed.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from tally.models import TransactionDraft

from .base import BaseRepository
from .filters import TransactionFilter
from .models import Entry, LedgerSummary
from .queries import QueryRepository
from .transactions import TransactionRepository

logger = logging.getLogger(__name__)


class LedgerRepository(BaseRepository):
    """
    Facade over the transaction and query repositories.

    All repositories share the same database file; the schema is created
    once by this facade.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """
        Initialize the ledger repository and its schema.

        Args:
            db_path: Path to the SQLite database file. Defaults to data/transactions.db
        """
        super().__init__(db_path, init_schema=True)

        self._transactions = TransactionRepository(self.db_path)
        self._queries = QueryRepository(self.db_path)

        logger.info(f"LedgerRepository initialized with db_path: {self.db_path}")

    # Transactions

    def insert(self, draft: TransactionDraft) -> Entry:
        return self._transactions.insert(draft)

    def get_by_id(self, entry_id: int) -> Optional[Entry]:
        return self._transactions.get_by_id(entry_id)

    def list_entries(
        self,
        entry_filter: Optional[TransactionFilter] = None,
        limit: Optional[int] = None,
        ascending: bool = False,
    ) -> list[Entry]:
        return self._transactions.list_entries(entry_filter, limit, ascending)

    def count_entries(self, entry_filter: Optional[TransactionFilter] = None) -> int:
        return self._transactions.count_entries(entry_filter)

    def delete_by_id(self, entry_id: int) -> bool:
        return self._transactions.delete_by_id(entry_id)

    def delete_matching(self, entry_filter: TransactionFilter) -> list[Entry]:
        return self._transactions.delete_matching(entry_filter)

    # Queries

    def get_summary(
        self, entry_filter: Optional[TransactionFilter] = None
    ) -> LedgerSummary:
        return self._queries.get_summary(entry_filter)
