"""
Database models for the Tally ledger.

Defines the row shape of the single ``transactions`` table.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from tally.models import TransactionKind, format_timestamp, parse_timestamp


@dataclass
class Entry:
    """
    A single income or expense event in the ledger.

    Entries are only ever inserted or deleted; there is no update path.
    """

    id: int
    kind: TransactionKind
    amount: float
    category: str
    description: Optional[str]
    occurred_at: datetime  # Aware UTC, millisecond precision

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    @property
    def timestamp(self) -> str:
        """Canonical stored form of ``occurred_at``."""
        return format_timestamp(self.occurred_at)

    def to_dict(self) -> dict:
        """Convert to dictionary representation (wire field names)."""
        return {
            "id": self.id,
            "type": self.kind.value,
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "date": self.timestamp,
        }

    @classmethod
    def from_row(cls, row: tuple) -> "Entry":
        """Create an Entry from a database row."""
        return cls(
            id=row[0],
            kind=TransactionKind(row[1]),
            amount=row[2],
            category=row[3],
            description=row[4],
            occurred_at=parse_timestamp(row[5]),
        )


@dataclass
class LedgerSummary:
    """Total income and expense over a set of entries."""

    total_income: float = 0.0
    total_expense: float = 0.0
    count: int = 0

    @property
    def balance(self) -> float:
        return self.total_income - self.total_expense

    def to_dict(self) -> dict:
        """Convert to dictionary representation (wire field names)."""
        return {
            "totalIncome": self.total_income,
            "totalExpense": self.total_expense,
            "balance": self.balance,
        }
