"""Domain models used by the transaction ledger.

Records are SQLModel models without a backing table; the collection lives
in process memory (see ``ledger.store``).
"""

from typing import Optional, Union
from datetime import datetime
from sqlmodel import SQLModel


class Transaction(SQLModel):
    """A single ledger entry."""

    id: str  # UUID string supplied by the caller, never changes
    type_id: Union[int, float]
    amount: float
    created_at: datetime
    description: Optional[str] = None  # exposed as ``for`` on the wire
