"""Tests for the WHERE-clause builder."""

import pytest

from tally.db import TransactionFilter
from tally.errors import ValidationError
from tally.models import TransactionKind


class TestTransactionFilterCreate:
    def test_empty_filter(self):
        entry_filter = TransactionFilter.create()

        assert entry_filter.is_empty()
        assert entry_filter.to_sql() == ("", [])
        assert entry_filter.describe() == []

    def test_blank_values_count_as_absent(self):
        entry_filter = TransactionFilter.create(category="  ", ids=[], kind="")
        assert entry_filter.is_empty()

    def test_normalizes_values(self):
        entry_filter = TransactionFilter.create(
            kind="expense", category=" food ", date_from="2024-01-01"
        )

        assert entry_filter.kind is TransactionKind.EXPENSE
        assert entry_filter.category == "food"
        assert entry_filter.date_from == "2024-01-01T00:00:00.000Z"

    def test_ids_are_deduplicated_in_order(self):
        entry_filter = TransactionFilter.create(ids=[3, 1, 3, 2, 1])
        assert entry_filter.ids == (3, 1, 2)

    @pytest.mark.parametrize("bad", [0, -4, True, "7"])
    def test_rejects_invalid_ids(self, bad):
        with pytest.raises(ValidationError):
            TransactionFilter.create(ids=[1, bad])
        with pytest.raises(ValidationError):
            TransactionFilter.create(id=bad)

    def test_rejects_invalid_kind_and_date(self):
        with pytest.raises(ValidationError):
            TransactionFilter.create(kind="transfer")
        with pytest.raises(ValidationError):
            TransactionFilter.create(older_than="last week")


class TestTransactionFilterSql:
    def test_predicates_are_anded_in_order(self):
        entry_filter = TransactionFilter.create(
            kind="expense",
            category="food",
            date_from="2024-01-01",
            date_to="2024-01-31",
            older_than="2024-02-01",
        )

        where, params = entry_filter.to_sql()

        assert where == (
            " WHERE kind = ? AND category = ? AND occurred_at >= ? "
            "AND occurred_at <= ? AND occurred_at < ?"
        )
        assert params == [
            "expense",
            "food",
            "2024-01-01T00:00:00.000Z",
            "2024-01-31T00:00:00.000Z",
            "2024-02-01T00:00:00.000Z",
        ]

    def test_id_set_replaces_other_predicates(self):
        entry_filter = TransactionFilter.create(
            ids=[1, 2], category="food", kind="income"
        )

        assert entry_filter.to_sql() == (" WHERE id IN (?, ?)", [1, 2])
        assert entry_filter.describe() == ["IDs: 1, 2"]

    def test_single_id_combined_with_other_criteria(self):
        entry_filter = TransactionFilter.create(id=5, category="food")

        assert not entry_filter.is_single_id()
        assert entry_filter.to_sql() == (" WHERE id = ? AND category = ?", [5, "food"])

    def test_is_single_id(self):
        assert TransactionFilter.create(id=5).is_single_id()
        assert not TransactionFilter.create(ids=[5]).is_single_id()
        assert not TransactionFilter.create(category="food").is_single_id()

    def test_describe_lists_active_criteria(self):
        entry_filter = TransactionFilter.create(
            category="food", kind="expense", older_than="2024-02-01"
        )

        assert entry_filter.describe() == [
            "Category: food",
            "Type: expense",
            "Older Than: 2024-02-01T00:00:00.000Z",
        ]
