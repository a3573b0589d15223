from .transaction import (
    ChartType,
    GroupBy,
    TimestampInput,
    TransactionDraft,
    TransactionKind,
    format_timestamp,
    normalize_timestamp,
    parse_kind,
    parse_timestamp,
)

__all__ = [
    "ChartType",
    "GroupBy",
    "TimestampInput",
    "TransactionDraft",
    "TransactionKind",
    "format_timestamp",
    "normalize_timestamp",
    "parse_kind",
    "parse_timestamp",
]
