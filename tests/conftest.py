"""Shared fixtures: isolated ledgers on temporary databases."""

import pytest

from tally.db import LedgerRepository
from tally.models import TransactionDraft


def make_draft(kind, amount, category, date, description=None) -> TransactionDraft:
    return TransactionDraft.create(
        kind=kind,
        amount=amount,
        category=category,
        occurred_at=date,
        description=description,
    )


@pytest.fixture
def repository(tmp_path) -> LedgerRepository:
    """Empty ledger backed by a fresh database file."""
    return LedgerRepository(tmp_path / "test_transactions.db")


@pytest.fixture
def seeded_repository(repository: LedgerRepository) -> LedgerRepository:
    """Ledger with one salary income and one food expense in January 2024."""
    repository.insert(make_draft("income", 100, "salary", "2024-01-05", "January pay"))
    repository.insert(make_draft("expense", 40, "food", "2024-01-10"))
    return repository


@pytest.fixture
def mixed_repository(repository: LedgerRepository) -> LedgerRepository:
    """Ledger spanning several days, weeks, months, and categories."""
    rows = [
        ("income", 1000, "salary", "2024-01-01T09:00:00Z"),
        ("expense", 12.5, "food", "2024-01-01T12:30:00Z"),
        ("expense", 30, "transport", "2024-01-06T08:00:00Z"),
        ("expense", 20, "food", "2024-01-07T19:00:00Z"),
        ("income", 50, "gift", "2024-01-15T10:00:00Z"),
        ("expense", 200, "rent", "2024-01-31T23:00:00Z"),
        ("income", 1000, "salary", "2024-02-01T09:00:00Z"),
        ("expense", 15, "food", "2024-02-03T13:00:00Z"),
    ]
    for kind, amount, category, date in rows:
        repository.insert(make_draft(kind, amount, category, date))
    return repository
