"""
Exception hierarchy for Tally.

Validation and lookup failures are reported back to the caller as readable
messages; store failures are opaque and never retried.
"""


class TallyError(Exception):
    """Base class for all Tally errors."""


class ValidationError(TallyError, ValueError):
    """Malformed or missing input, rejected before any store access."""


class NotFoundError(TallyError, LookupError):
    """A transaction addressed by ID does not exist."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction with ID {transaction_id} not found.")


class StoreError(TallyError):
    """The underlying SQLite store failed (I/O, constraint violation, ...)."""
