"""Text formatting helpers shared by the tool responses."""

from tally.db.models import Entry


def format_amount(amount: float) -> str:
    """Format an amount as dollars, e.g. ``$1,234.56``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_signed_amount(entry: Entry) -> str:
    """Amount prefixed with + for income and - for expense."""
    return f"{'+' if entry.is_income else '-'}{format_amount(entry.amount)}"


def format_entry(entry: Entry, with_date: bool = False) -> str:
    """Format an entry as a one-line bullet."""
    line = (
        f"- #{entry.id}: {entry.kind.value} {format_amount(entry.amount)} "
        f"({entry.category})"
    )
    if with_date:
        line += f" - {entry.occurred_at:%Y-%m-%d}"
    return line


def format_entries(entries: list[Entry], limit: int, with_date: bool = False) -> str:
    """Format the first ``limit`` entries, noting how many were left out."""
    lines = [format_entry(e, with_date=with_date) for e in entries[:limit]]
    if len(entries) > limit:
        lines.append(f"... and {len(entries) - limit} more")
    return "\n".join(lines)
