"""Convenience imports for all schema classes used by the API."""

from .transaction import (
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
    ErrorResponse,
)

__all__ = [
    "TransactionCreate",
    "TransactionRead",
    "TransactionUpdate",
    "ErrorResponse",
]
