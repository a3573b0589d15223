"""Tests for the two-phase deletion workflow."""

import pytest

from tally.db import TransactionFilter
from tally.errors import NotFoundError, ValidationError
from tally.services import (
    Committed,
    Deleted,
    DeletionState,
    DeletionWorkflow,
    NoMatch,
    Preview,
)

from .conftest import make_draft


@pytest.fixture
def workflow(seeded_repository) -> DeletionWorkflow:
    return DeletionWorkflow(seeded_repository)


class TestSingleDeletion:
    def test_deletes_immediately(self, workflow, seeded_repository):
        target = seeded_repository.list_entries(TransactionFilter.create(category="food"))[0]

        result = workflow.run(TransactionFilter.create(id=target.id))

        assert isinstance(result, Deleted)
        assert result.entry == target
        assert seeded_repository.get_by_id(target.id) is None
        assert result.to_message() == (
            f"✅ Successfully deleted transaction #{target.id} (expense, $40.00, food)"
        )

    def test_missing_id(self, workflow, seeded_repository):
        with pytest.raises(NotFoundError, match="Transaction with ID 999 not found."):
            workflow.run(TransactionFilter.create(id=999))
        assert seeded_repository.count_entries() == 2

    def test_confirm_flag_is_irrelevant_for_single_id(self, workflow, seeded_repository):
        target = seeded_repository.list_entries()[0]
        result = workflow.run(TransactionFilter.create(id=target.id), confirm_bulk=True)
        assert isinstance(result, Deleted)


class TestBulkDeletion:
    def test_no_criteria(self, workflow):
        with pytest.raises(ValidationError, match="at least one deletion criterion"):
            workflow.run(TransactionFilter.create())

    def test_preview_is_side_effect_free(self, workflow, seeded_repository):
        food = TransactionFilter.create(category="food")

        first = workflow.run(food)
        second = workflow.run(food)

        assert isinstance(first, Preview)
        assert first.state is DeletionState.PREVIEW
        assert first == second
        assert seeded_repository.count_entries() == 2

    def test_preview_counts_and_message(self, workflow):
        result = workflow.run(TransactionFilter.create(category="food"))

        assert result.count == 1
        assert result.income_count == 0
        assert result.expense_count == 1
        assert result.total_amount == 40.0

        message = result.to_message()
        assert "Bulk Deletion Confirmation Required" in message
        assert "Matching transactions: **1**" in message
        assert "No transactions have been deleted yet." in message
        assert "- Category: food" in message
        assert "(food) - 2024-01-10" in message
        assert '"confirmBulk": true' in message

    def test_preview_truncates_long_lists(self, repository):
        for day in range(1, 9):
            repository.insert(make_draft("expense", day, "food", f"2024-01-0{day}"))

        message = DeletionWorkflow(repository).run(
            TransactionFilter.create(category="food")
        ).to_message()

        assert "Matching transactions: **8**" in message
        assert "... and 3 more" in message

    def test_commit(self, workflow, seeded_repository):
        result = workflow.run(TransactionFilter.create(category="food"), confirm_bulk=True)

        assert isinstance(result, Committed)
        assert result.state is DeletionState.COMMITTED
        assert result.deleted_count == 1
        assert result.to_message().startswith("✅ Successfully deleted 1 transaction(s)")

        summary = seeded_repository.get_summary()
        assert summary.total_income == 100.0
        assert summary.total_expense == 0.0
        assert summary.balance == 100.0

    def test_commit_uses_live_predicate(self, workflow, seeded_repository):
        food = TransactionFilter.create(category="food")
        preview = workflow.run(food)
        seeded_repository.insert(make_draft("expense", 5, "food", "2024-01-11"))

        result = workflow.run(food, confirm_bulk=True)

        assert preview.count == 1
        assert result.deleted_count == 2
        assert seeded_repository.count_entries(food) == 0

    def test_id_set_requires_confirmation(self, workflow, seeded_repository):
        ids = [e.id for e in seeded_repository.list_entries()]
        id_set = TransactionFilter.create(ids=ids)

        assert isinstance(workflow.run(id_set), Preview)
        assert seeded_repository.count_entries() == 2

        result = workflow.run(id_set, confirm_bulk=True)

        assert sorted(result.ids) == sorted(ids)
        assert seeded_repository.count_entries() == 0

    def test_id_set_with_unknown_ids_only(self, workflow):
        result = workflow.run(TransactionFilter.create(ids=[500, 501]))
        assert isinstance(result, NoMatch)

    def test_no_match(self, workflow, seeded_repository):
        nothing = TransactionFilter.create(category="travel")

        preview = workflow.run(nothing)
        committed = workflow.run(nothing, confirm_bulk=True)

        assert isinstance(preview, NoMatch)
        assert isinstance(committed, NoMatch)
        assert preview.to_message() == "❌ No transactions match the specified criteria."
        assert seeded_repository.count_entries() == 2

    def test_older_than(self, workflow, seeded_repository):
        result = workflow.run(
            TransactionFilter.create(older_than="2024-01-06"), confirm_bulk=True
        )

        assert result.deleted_count == 1
        assert result.deleted[0].category == "salary"
