"""
Queries repository module for ledger totals.

Handles read-only aggregate queries computed inside SQLite.
"""

import logging
from typing import Optional

from .base import BaseRepository
from .filters import TransactionFilter
from .models import LedgerSummary

logger = logging.getLogger(__name__)


class QueryRepository(BaseRepository):
    """
    Repository for totals and summary queries.

    Provides read-only query operations for analyzing ledger data.
    """

    def __init__(self, db_path=None, init_schema: bool = False):
        """
        Initialize the query repository.

        Args:
            db_path: Path to the SQLite database file
            init_schema: Whether to initialize schema
        """
        super().__init__(db_path, init_schema=init_schema)

    def get_summary(
        self, entry_filter: Optional[TransactionFilter] = None
    ) -> LedgerSummary:
        """
        Get total income, total expense, and balance.

        Args:
            entry_filter: Optional predicates; None covers the whole ledger

        Returns:
            LedgerSummary (all zeros for an empty ledger)
        """
        where, params = (entry_filter or TransactionFilter()).to_sql()

        with self._get_connection() as conn:
            row = conn.execute(
                f"""
                SELECT
                    COALESCE(SUM(
                        CASE WHEN kind = 'income' THEN amount ELSE 0 END
                    ), 0) AS total_income,
                    COALESCE(SUM(
                        CASE WHEN kind = 'expense' THEN amount ELSE 0 END
                    ), 0) AS total_expense,
                    COUNT(*) AS total_count
                FROM transactions{where}
                """,
                params,
            ).fetchone()

        summary = LedgerSummary(
            total_income=float(row["total_income"]),
            total_expense=float(row["total_expense"]),
            count=row["total_count"],
        )
        logger.debug(
            f"Summary over {summary.count} entries: "
            f"income={summary.total_income} expense={summary.total_expense}"
        )
        return summary
