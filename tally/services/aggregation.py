"""
Aggregation of ledger entries into chart buckets and summaries.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Union

from tally.db.models import Entry, LedgerSummary
from tally.errors import ValidationError
from tally.models import GroupBy

logger = logging.getLogger(__name__)


@dataclass
class ChartSeries:
    """Bucket labels with parallel income and expense sums."""

    group_by: GroupBy
    labels: list[str] = field(default_factory=list)
    income: list[float] = field(default_factory=list)
    expense: list[float] = field(default_factory=list)

    @property
    def total_income(self) -> float:
        return sum(self.income)

    @property
    def total_expense(self) -> float:
        return sum(self.expense)

    @property
    def balance(self) -> float:
        return self.total_income - self.total_expense

    def is_empty(self) -> bool:
        return not self.labels

    def to_dict(self) -> dict:
        """Convert to dictionary representation (wire field names)."""
        return {
            "groupBy": self.group_by.value,
            "labels": self.labels,
            "incomeData": self.income,
            "expenseData": self.expense,
            "totalIncome": self.total_income,
            "totalExpense": self.total_expense,
            "balance": self.balance,
        }


def parse_group_by(value: Union[str, GroupBy]) -> GroupBy:
    try:
        return GroupBy(value)
    except ValueError:
        choices = ", ".join(g.value for g in GroupBy)
        raise ValidationError(
            f"Invalid groupBy: {value!r} (expected one of {choices})"
        ) from None


def bucket_key(entry: Entry, group_by: GroupBy) -> str:
    """
    Bucket key of an entry for the given grouping.

    Time keys use the UTC calendar fields of the stored timestamp:
    ``YYYY-MM-DD`` (day), ``YYYY-MM-W{n}`` (week), ``YYYY-MM`` (month).
    The week index is ``day // 7 + 1`` and restarts every month; it is not
    an ISO week number.
    """
    if group_by == GroupBy.CATEGORY:
        return entry.category

    occurred = entry.occurred_at
    if group_by == GroupBy.DAY:
        return occurred.strftime("%Y-%m-%d")
    if group_by == GroupBy.WEEK:
        return f"{occurred:%Y-%m}-W{occurred.day // 7 + 1}"
    return occurred.strftime("%Y-%m")


def aggregate(entries: Iterable[Entry], group_by: Union[str, GroupBy]) -> ChartSeries:
    """
    Sum income and expense per bucket.

    Category buckets keep first-seen order of the scan; time buckets are
    sorted ascending. Buckets without entries of a kind report 0.0.

    Args:
        entries: Entries to aggregate (time-ordered for time groupings)
        group_by: Grouping mode

    Returns:
        ChartSeries with one label per bucket
    """
    group_by = parse_group_by(group_by)
    buckets: dict[str, list[float]] = {}

    for entry in entries:
        totals = buckets.setdefault(bucket_key(entry, group_by), [0.0, 0.0])
        if entry.is_income:
            totals[0] += entry.amount
        else:
            totals[1] += entry.amount

    labels = list(buckets)
    if group_by != GroupBy.CATEGORY:
        labels.sort()

    series = ChartSeries(
        group_by=group_by,
        labels=labels,
        income=[buckets[label][0] for label in labels],
        expense=[buckets[label][1] for label in labels],
    )
    logger.debug(f"Aggregated into {len(labels)} {group_by.value} buckets")
    return series


def summarize(entries: Iterable[Entry]) -> LedgerSummary:
    """Total income and expense over the given entries."""
    summary = LedgerSummary()
    for entry in entries:
        summary.count += 1
        if entry.is_income:
            summary.total_income += entry.amount
        else:
            summary.total_expense += entry.amount
    return summary
