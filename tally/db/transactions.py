"""
Transactions repository module for transaction CRUD operations.

Handles all transaction-related database operations including:
- Creating transactions (insert)
- Reading transactions by ID or by filter
- Deleting transactions by ID or by filter

Entries are never updated in place.
"""

import logging
from typing import Optional

from tally.errors import ValidationError
from tally.models import TransactionDraft, format_timestamp

from .base import ENTRY_COLUMNS, BaseRepository
from .filters import TransactionFilter
from .models import Entry

logger = logging.getLogger(__name__)


class TransactionRepository(BaseRepository):
    """
    Repository for managing ledger entries.

    Handles insert, read, and delete operations on the transactions table.
    """

    def __init__(self, db_path=None, init_schema: bool = False):
        """
        Initialize the transaction repository.

        Args:
            db_path: Path to the SQLite database file
            init_schema: Whether to initialize schema
        """
        super().__init__(db_path, init_schema=init_schema)

    # =========================================================================
    # Create Operations
    # =========================================================================

    def insert(self, draft: TransactionDraft) -> Entry:
        """
        Insert a new ledger entry.

        Args:
            draft: Validated transaction data

        Returns:
            The stored Entry with its assigned ID
        """
        occurred_at = format_timestamp(draft.occurred_at)

        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO transactions (
                    kind, amount, category, description, occurred_at
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    draft.kind.value,
                    draft.amount,
                    draft.category,
                    draft.description,
                    occurred_at,
                ),
            )
            entry_id = cursor.lastrowid

        logger.info(
            f"Inserted transaction {entry_id}: {draft.kind.value} "
            f"{draft.amount} ({draft.category}) at {occurred_at}"
        )
        return Entry(
            id=entry_id,
            kind=draft.kind,
            amount=draft.amount,
            category=draft.category,
            description=draft.description,
            occurred_at=draft.occurred_at,
        )

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_by_id(self, entry_id: int) -> Optional[Entry]:
        """
        Get a ledger entry by ID.

        Args:
            entry_id: Entry ID

        Returns:
            Entry or None if not found
        """
        if entry_id <= 0:
            raise ValidationError(f"Invalid transaction ID: {entry_id}")

        with self._get_connection() as conn:
            cursor = conn.execute(
                f"SELECT {ENTRY_COLUMNS} FROM transactions WHERE id = ?",
                (entry_id,),
            )
            row = cursor.fetchone()

        return Entry.from_row(tuple(row)) if row else None

    def list_entries(
        self,
        entry_filter: Optional[TransactionFilter] = None,
        limit: Optional[int] = None,
        ascending: bool = False,
    ) -> list[Entry]:
        """
        Get ledger entries matching a filter.

        Args:
            entry_filter: Predicates to apply; None or empty matches everything
            limit: Maximum number of entries to return
            ascending: Oldest first when True, newest first otherwise

        Returns:
            List of Entry objects ordered by occurrence time
        """
        if limit is not None and limit <= 0:
            raise ValidationError(f"Limit must be positive, got {limit}")

        where, params = (entry_filter or TransactionFilter()).to_sql()
        order = "ASC" if ascending else "DESC"
        query = (
            f"SELECT {ENTRY_COLUMNS} FROM transactions{where} "
            f"ORDER BY occurred_at {order}, id {order}"
        )
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()

        entries = [Entry.from_row(tuple(row)) for row in rows]
        logger.debug(f"Retrieved {len(entries)} entries")
        return entries

    def count_entries(self, entry_filter: Optional[TransactionFilter] = None) -> int:
        """Count entries matching a filter."""
        where, params = (entry_filter or TransactionFilter()).to_sql()

        with self._get_connection() as conn:
            cursor = conn.execute(f"SELECT COUNT(*) FROM transactions{where}", params)
            return cursor.fetchone()[0]

    # =========================================================================
    # Delete Operations
    # =========================================================================

    def delete_by_id(self, entry_id: int) -> bool:
        """
        Delete a single ledger entry.

        Args:
            entry_id: Entry ID to delete

        Returns:
            True if deleted, False if not found
        """
        if entry_id <= 0:
            raise ValidationError(f"Invalid transaction ID: {entry_id}")

        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (entry_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted transaction {entry_id}")
        return deleted

    def delete_matching(self, entry_filter: TransactionFilter) -> list[Entry]:
        """
        Delete every entry matching the filter in a single statement.

        The predicate is evaluated at execution time, so the result reflects
        the live table rather than any earlier preview.

        Args:
            entry_filter: Non-empty predicates selecting the rows to delete

        Returns:
            The deleted entries, oldest first

        Raises:
            ValidationError: If the filter is empty
        """
        if entry_filter.is_empty():
            raise ValidationError("Refusing to delete without criteria")

        where, params = entry_filter.to_sql()

        with self._get_connection() as conn:
            rows = conn.execute(
                f"DELETE FROM transactions{where} RETURNING {ENTRY_COLUMNS}",
                params,
            ).fetchall()

        deleted = sorted(
            (Entry.from_row(tuple(row)) for row in rows),
            key=lambda e: (e.occurred_at, e.id),
        )
        logger.info(
            f"Bulk deleted {len(deleted)} transactions "
            f"matching [{'; '.join(entry_filter.describe())}]"
        )
        return deleted
