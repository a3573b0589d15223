import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Union

from tally.config import MAX_CATEGORY_LENGTH, MAX_DESCRIPTION_LENGTH
from tally.errors import ValidationError

TimestampInput = Union[str, date, datetime]

# Seconds fraction of an ISO time, e.g. ".5" in "10:30:00.5"
FRACTION_PATTERN = re.compile(r"(?<=:\d\d)\.(\d+)")


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class ChartType(str, Enum):
    BAR = "bar"
    PIE = "pie"
    LINE = "line"


class GroupBy(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    CATEGORY = "category"


def parse_kind(value: Union[str, TransactionKind]) -> TransactionKind:
    """Coerce a raw kind value, rejecting anything but income/expense."""
    try:
        return TransactionKind(value)
    except ValueError:
        raise ValidationError(
            f"Invalid transaction type: {value!r} (expected 'income' or 'expense')"
        ) from None


def parse_timestamp(value: TimestampInput) -> datetime:
    """
    Parse a caller-supplied timestamp into an aware UTC datetime.

    Accepts ISO-8601 dates ("2024-01-05") and date-times with or without an
    offset ("2024-01-05T10:30:00", "2024-01-05T10:30:00+07:00", "...Z").
    Naive values are taken as UTC. Precision is truncated to milliseconds.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        # fromisoformat on 3.10 only takes 3 or 6 fraction digits
        text = FRACTION_PATTERN.sub(
            lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1
        )
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r} (use ISO format)") from None
    else:
        raise ValidationError(f"Invalid date: {value!r} (use ISO format)")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(microsecond=(parsed.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Format an aware datetime as the canonical ``YYYY-MM-DDTHH:MM:SS.mmmZ`` string."""
    value = value.astimezone(timezone.utc)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def normalize_timestamp(value: TimestampInput) -> str:
    """Normalize any accepted timestamp input to its canonical stored form."""
    return format_timestamp(parse_timestamp(value))


@dataclass
class TransactionDraft:
    """A validated, not yet stored transaction."""

    kind: TransactionKind
    amount: float
    category: str
    occurred_at: datetime
    description: Optional[str] = None

    @classmethod
    def create(
        cls,
        kind: Union[str, TransactionKind],
        amount: float,
        category: str,
        occurred_at: TimestampInput,
        description: Optional[str] = None,
    ) -> "TransactionDraft":
        """
        Validate raw inputs and build a draft.

        Raises:
            ValidationError: If any field is malformed
        """
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise ValidationError(f"Invalid amount: {amount!r} (must be a number)")
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError(f"Amount must be positive, got {amount}")

        if not isinstance(category, str) or not category.strip():
            raise ValidationError("Category is required")
        category = category.strip()
        if len(category) > MAX_CATEGORY_LENGTH:
            raise ValidationError(
                f"Category is too long (max {MAX_CATEGORY_LENGTH} characters)"
            )

        if description is not None:
            if not isinstance(description, str):
                raise ValidationError(f"Invalid description: {description!r}")
            description = description.strip() or None
        if description and len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description is too long (max {MAX_DESCRIPTION_LENGTH} characters)"
            )

        return cls(
            kind=parse_kind(kind),
            amount=float(amount),
            category=category,
            occurred_at=parse_timestamp(occurred_at),
            description=description,
        )
