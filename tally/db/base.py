"""
Base repository module with connection management and schema initialization.

Provides the foundation for all database operations in the Tally ledger.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from tally.config import DB_TIMEOUT, DEFAULT_DB_PATH
from tally.errors import StoreError

logger = logging.getLogger(__name__)

# Column order shared by every SELECT and Entry.from_row
ENTRY_COLUMNS = "id, kind, amount, category, description, occurred_at"


class BaseRepository:
    """
    Base repository class with SQLite connection management.

    Each operation opens its own short-lived connection; every write is a
    single statement, so no transaction spans more than one call.
    """

    def __init__(
        self, db_path: Optional[Union[str, Path]] = None, init_schema: bool = True
    ):
        """
        Initialize the base repository.

        Args:
            db_path: Path to the SQLite database file. Defaults to data/transactions.db
            init_schema: Whether to initialize the schema on startup

        Raises:
            StoreError: If the database cannot be created or initialized
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self._ensure_db_directory()
        if init_schema:
            self._init_schema()

    def _ensure_db_directory(self):
        """Ensure the database directory exists."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Database directory ensured: {self.db_path.parent}")
        except OSError as e:
            logger.error(f"Failed to create database directory: {e}", exc_info=True)
            raise StoreError(f"Cannot create database directory: {e}") from e

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=DB_TIMEOUT)
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()
        except sqlite3.OperationalError as e:
            logger.error(f"Database locked or operational error: {e}", exc_info=True)
            if conn:
                conn.rollback()
            raise StoreError(str(e)) from e
        except sqlite3.Error as e:
            logger.error(f"Database error: {e}", exc_info=True)
            if conn:
                conn.rollback()
            raise StoreError(str(e)) from e
        except Exception:
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                conn.close()

    def _init_schema(self):
        """Initialize the ledger schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    kind TEXT NOT NULL CHECK(kind IN ('income', 'expense')),
                    amount REAL NOT NULL CHECK(amount > 0),
                    category TEXT NOT NULL CHECK(length(category) > 0),
                    description TEXT,
                    occurred_at TEXT NOT NULL
                )
            """)

            self._create_indexes(conn)

            logger.debug("Ledger schema initialized successfully")

    def _create_indexes(self, conn):
        """Create database indexes for query performance."""
        indexes = [
            ("idx_transactions_occurred_at", "transactions", "occurred_at"),
            ("idx_transactions_category", "transactions", "category"),
            ("idx_transactions_kind", "transactions", "kind"),
        ]

        for index_name, table, columns in indexes:
            conn.execute(f"""
                CREATE INDEX IF NOT EXISTS {index_name}
                ON {table}({columns})
            """)
