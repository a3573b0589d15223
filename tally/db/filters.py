"""
Filter builder for ledger queries.

Turns a sparse set of optional predicates into a conjunctive, parameter-bound
SQL ``WHERE`` clause against the ``transactions`` table.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from tally.errors import ValidationError
from tally.models import TimestampInput, TransactionKind, normalize_timestamp, parse_kind


@dataclass(frozen=True)
class TransactionFilter:
    """
    Optional predicates over ledger entries, combined with AND.

    Date bounds hold canonical timestamps: ``date_from``/``date_to`` are
    inclusive, ``older_than`` is strict. A non-empty ``ids`` replaces every
    other predicate with an IN-membership test.
    """

    kind: Optional[TransactionKind] = None
    category: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    older_than: Optional[str] = None
    ids: tuple[int, ...] = field(default_factory=tuple)
    id: Optional[int] = None

    @classmethod
    def create(
        cls,
        kind: Union[str, TransactionKind, None] = None,
        category: Optional[str] = None,
        date_from: Optional[TimestampInput] = None,
        date_to: Optional[TimestampInput] = None,
        older_than: Optional[TimestampInput] = None,
        ids: Optional[Iterable[int]] = None,
        id: Optional[int] = None,
    ) -> "TransactionFilter":
        """
        Validate and normalize raw filter values.

        Empty strings and empty id lists count as absent.

        Raises:
            ValidationError: If a value is malformed
        """
        if id is not None:
            _check_id(id)

        id_set: list[int] = []
        for value in ids or ():
            _check_id(value)
            if value not in id_set:
                id_set.append(value)

        return cls(
            kind=parse_kind(kind) if kind else None,
            category=category.strip() if category and category.strip() else None,
            date_from=normalize_timestamp(date_from) if date_from else None,
            date_to=normalize_timestamp(date_to) if date_to else None,
            older_than=normalize_timestamp(older_than) if older_than else None,
            ids=tuple(id_set),
            id=id,
        )

    def is_empty(self) -> bool:
        """True when no predicate is present (matches every entry)."""
        return not self.ids and not self._clauses()

    def is_single_id(self) -> bool:
        """True when the filter addresses exactly one entry by ID and nothing else."""
        return (
            self.id is not None
            and not self.ids
            and self.kind is None
            and self.category is None
            and self.date_from is None
            and self.date_to is None
            and self.older_than is None
        )

    def _clauses(self) -> list[tuple[str, Any]]:
        clauses: list[tuple[str, Any]] = []
        if self.id is not None:
            clauses.append(("id = ?", self.id))
        if self.kind is not None:
            clauses.append(("kind = ?", self.kind.value))
        if self.category is not None:
            clauses.append(("category = ?", self.category))
        if self.date_from is not None:
            clauses.append(("occurred_at >= ?", self.date_from))
        if self.date_to is not None:
            clauses.append(("occurred_at <= ?", self.date_to))
        if self.older_than is not None:
            clauses.append(("occurred_at < ?", self.older_than))
        return clauses

    def to_sql(self) -> tuple[str, list[Any]]:
        """
        Build the WHERE clause and its bound parameters.

        Returns:
            Tuple of (clause, params); the clause is empty when no predicate
            is present, otherwise it starts with " WHERE ".
        """
        if self.ids:
            placeholders = ", ".join("?" for _ in self.ids)
            return f" WHERE id IN ({placeholders})", list(self.ids)

        clauses = self._clauses()
        if not clauses:
            return "", []

        where = " AND ".join(sql for sql, _ in clauses)
        return f" WHERE {where}", [param for _, param in clauses]

    def describe(self) -> list[str]:
        """Human-readable list of the active criteria."""
        if self.ids:
            return [f"IDs: {', '.join(str(i) for i in self.ids)}"]

        lines = []
        if self.id is not None:
            lines.append(f"ID: {self.id}")
        if self.category is not None:
            lines.append(f"Category: {self.category}")
        if self.kind is not None:
            lines.append(f"Type: {self.kind.value}")
        if self.date_from is not None:
            lines.append(f"Start Date: {self.date_from}")
        if self.date_to is not None:
            lines.append(f"End Date: {self.date_to}")
        if self.older_than is not None:
            lines.append(f"Older Than: {self.older_than}")
        return lines


def _check_id(value: Any):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid transaction ID: {value!r}")
