"""
Two-phase deletion workflow.

Single-ID deletions run immediately. Every other deletion (an explicit ID
set or a predicate) first produces a side-effect-free ``Preview``; only a
call with ``confirm_bulk`` set reaches ``Committed``, and that call
re-evaluates the predicate against the live table in a single DELETE.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from tally.config import DELETE_PREVIEW_LIMIT, DELETE_RESULT_LIMIT, ERROR_MESSAGES
from tally.db import Entry, LedgerRepository, TransactionFilter
from tally.errors import NotFoundError, ValidationError

from .formatting import format_amount, format_entries

logger = logging.getLogger(__name__)


class DeletionState(str, Enum):
    PREVIEW = "preview"
    COMMITTED = "committed"


@dataclass
class Deleted:
    """A single entry deleted by ID without confirmation."""

    entry: Entry

    def to_message(self) -> str:
        entry = self.entry
        return (
            f"✅ Successfully deleted transaction #{entry.id} "
            f"({entry.kind.value}, {format_amount(entry.amount)}, {entry.category})"
        )


@dataclass
class NoMatch:
    """Nothing matched the criteria; nothing to confirm."""

    entry_filter: TransactionFilter

    def to_message(self) -> str:
        return "❌ No transactions match the specified criteria."


@dataclass
class Preview:
    """Entries a bulk deletion would remove. Nothing has been deleted."""

    state: ClassVar[DeletionState] = DeletionState.PREVIEW

    entry_filter: TransactionFilter
    matches: list[Entry] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def income_count(self) -> int:
        return sum(1 for e in self.matches if e.is_income)

    @property
    def expense_count(self) -> int:
        return self.count - self.income_count

    @property
    def total_amount(self) -> float:
        return sum(e.amount for e in self.matches)

    def to_message(self) -> str:
        lines = [
            "⚠️ **Bulk Deletion Confirmation Required**",
            "",
            f"Matching transactions: **{self.count}**",
            f"- Income: {self.income_count}",
            f"- Expense: {self.expense_count}",
            f"- Total amount: {format_amount(self.total_amount)}",
            "No transactions have been deleted yet.",
            "",
            "**Criteria:**",
        ]
        lines.extend(f"- {c}" for c in self.entry_filter.describe())
        lines.append("")
        lines.append(f"**Preview (first {DELETE_PREVIEW_LIMIT}):**")
        lines.append(format_entries(self.matches, DELETE_PREVIEW_LIMIT, with_date=True))
        lines.append("")
        lines.append('🔴 **To confirm deletion, set "confirmBulk": true**')
        return "\n".join(lines)


@dataclass
class Committed:
    """Result of a confirmed bulk deletion."""

    state: ClassVar[DeletionState] = DeletionState.COMMITTED

    entry_filter: TransactionFilter
    deleted: list[Entry] = field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    @property
    def ids(self) -> list[int]:
        return [e.id for e in self.deleted]

    def to_message(self) -> str:
        return (
            f"✅ Successfully deleted {self.deleted_count} transaction(s)\n\n"
            f"**Deleted transactions:**\n"
            f"{format_entries(self.deleted, DELETE_RESULT_LIMIT)}"
        )


DeletionResult = Union[Deleted, NoMatch, Preview, Committed]


class DeletionWorkflow:
    """Runs deletions against a ledger, gating bulk deletes behind a preview."""

    def __init__(self, repository: LedgerRepository):
        """
        Initialize the workflow.

        Args:
            repository: Ledger to delete from
        """
        self.repository = repository

    def run(self, entry_filter: TransactionFilter, confirm_bulk: bool = False) -> DeletionResult:
        """
        Delete by ID, or preview/commit a bulk deletion.

        Args:
            entry_filter: Deletion criteria; must not be empty
            confirm_bulk: Commit a bulk deletion instead of previewing it

        Returns:
            Deleted, NoMatch, Preview, or Committed

        Raises:
            ValidationError: If no criteria were given
            NotFoundError: If a single-ID target does not exist
        """
        if entry_filter.is_empty():
            raise ValidationError(ERROR_MESSAGES["missing_criteria"])

        if entry_filter.is_single_id():
            return self.delete_single(entry_filter.id)

        if confirm_bulk:
            return self.commit(entry_filter)
        return self.preview(entry_filter)

    def delete_single(self, entry_id: int) -> Deleted:
        """Delete one entry by ID without confirmation."""
        entry = self.repository.get_by_id(entry_id)
        if entry is None or not self.repository.delete_by_id(entry_id):
            logger.debug(f"Transaction {entry_id} not found for deletion")
            raise NotFoundError(entry_id)
        return Deleted(entry=entry)

    def preview(self, entry_filter: TransactionFilter) -> Union[Preview, NoMatch]:
        """List what a bulk deletion would remove without deleting anything."""
        matches = self.repository.list_entries(entry_filter)
        if not matches:
            return NoMatch(entry_filter=entry_filter)

        logger.info(f"Bulk deletion preview: {len(matches)} matching transactions")
        return Preview(entry_filter=entry_filter, matches=matches)

    def commit(self, entry_filter: TransactionFilter) -> Union[Committed, NoMatch]:
        """Delete everything the predicate matches right now."""
        deleted = self.repository.delete_matching(entry_filter)
        if not deleted:
            return NoMatch(entry_filter=entry_filter)
        return Committed(entry_filter=entry_filter, deleted=deleted)
