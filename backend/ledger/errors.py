"""Errors raised by the transaction store.

Route handlers let these propagate; ``ledger.main`` maps them onto HTTP
responses with an ``{"error": ...}`` body.
"""


class LedgerError(Exception):
    """Base class for errors reported back to API callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Caller supplied data that failed a structural or semantic check."""


class NotFoundError(LedgerError):
    """The referenced transaction does not exist."""
