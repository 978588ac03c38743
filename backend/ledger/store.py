"""In-memory storage for ledger transactions.

All reads and writes of the collection go through :class:`TransactionStore`.
Validation happens before the lock is taken so a rejected request never
touches stored state; the mutation itself runs under a single lock which
keeps concurrent requests sequentially consistent.
"""

import logging
import re
import threading
from datetime import datetime
from typing import Any, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ledger.errors import NotFoundError, ValidationError
from ledger.models import Transaction

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "typeId", "amount", "createdAt")

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-8][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

MSG_MISSING_FIELDS = "Missing required fields: id, typeId, amount, createdAt"
MSG_INVALID_TYPES = (
    "Invalid field types: id must be a string, typeId and amount must be numbers"
)
MSG_INVALID_UUID = "Invalid id: must be a valid UUID"
MSG_INVALID_DATE = "Invalid createdAt: must be a valid date-time string"
MSG_INVALID_FOR = "Invalid for: must be a string"
MSG_ID_IMMUTABLE = "id cannot be modified"

_datetime_adapter = TypeAdapter(datetime)


def is_number(value: Any) -> bool:
    """Return True for ints and floats; booleans do not count."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


def parse_timestamp(value: Any) -> datetime:
    """Parse a date-time string or raise :class:`ValidationError`."""
    if not isinstance(value, str):
        raise ValidationError(MSG_INVALID_DATE)
    try:
        return _datetime_adapter.validate_python(value.strip())
    except PydanticValidationError:
        raise ValidationError(MSG_INVALID_DATE) from None


class TransactionStore:
    """Ordered, id-keyed collection of :class:`Transaction` records."""

    def __init__(self):
        # dicts keep insertion order, which is the listing order
        self._records: dict[str, Transaction] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def list_all(self) -> list[Transaction]:
        """Return copies of every record in insertion order."""
        with self._lock:
            return [record.model_copy() for record in self._records.values()]

    def get(self, transaction_id: str) -> Transaction:
        with self._lock:
            record = self._records.get(transaction_id)
            if record is None:
                raise NotFoundError(f"Transaction {transaction_id} not found")
            return record.model_copy()

    def create(self, candidate: dict[str, Any]) -> Transaction:
        """Validate ``candidate`` and append it to the collection.

        Checks run in a fixed order and the first failure wins: required
        fields, field types, id format, then ``createdAt``. Falsy values
        count as missing, so an ``amount`` of 0 is rejected.
        """
        if any(not candidate.get(name) for name in REQUIRED_FIELDS):
            raise ValidationError(MSG_MISSING_FIELDS)
        tx_id = candidate["id"]
        if not (
            isinstance(tx_id, str)
            and is_number(candidate["typeId"])
            and is_number(candidate["amount"])
        ):
            raise ValidationError(MSG_INVALID_TYPES)
        if not is_valid_uuid(tx_id):
            raise ValidationError(MSG_INVALID_UUID)
        created_at = parse_timestamp(candidate["createdAt"])
        description = candidate.get("for")
        if description is not None and not isinstance(description, str):
            raise ValidationError(MSG_INVALID_FOR)

        record = Transaction(
            id=tx_id,
            type_id=candidate["typeId"],
            amount=candidate["amount"],
            created_at=created_at,
            description=description,
        )
        with self._lock:
            if tx_id in self._records:
                raise ValidationError(f"Transaction with id {tx_id} already exists")
            self._records[tx_id] = record
        logger.debug("Stored transaction %s", tx_id)
        return record.model_copy()

    def update(self, transaction_id: str, patch: dict[str, Any]) -> Transaction:
        """Overwrite only the fields present in ``patch``.

        There is no required-field check here. ``id`` is the lookup key and
        may not appear in the patch.
        """
        changes = self._validate_patch(patch)
        with self._lock:
            existing = self._records.get(transaction_id)
            if existing is None:
                raise NotFoundError(f"Transaction {transaction_id} not found")
            updated = existing.model_copy(update=changes)
            # reassigning an existing key keeps its position
            self._records[transaction_id] = updated
        return updated.model_copy()

    def delete(self, transaction_id: str) -> None:
        with self._lock:
            if transaction_id not in self._records:
                raise NotFoundError(f"Transaction {transaction_id} not found")
            del self._records[transaction_id]

    def clear(self) -> None:
        """Drop every record."""
        with self._lock:
            self._records.clear()

    @staticmethod
    def _validate_patch(patch: dict[str, Any]) -> dict[str, Any]:
        if "id" in patch:
            raise ValidationError(MSG_ID_IMMUTABLE)
        if "typeId" in patch and not is_number(patch["typeId"]):
            raise ValidationError("typeId must be a number")
        if "amount" in patch and not is_number(patch["amount"]):
            raise ValidationError("amount must be a number")

        changes: dict[str, Any] = {}
        if "createdAt" in patch:
            changes["created_at"] = parse_timestamp(patch["createdAt"])
        if "for" in patch:
            description: Optional[str] = patch["for"]
            if description is not None and not isinstance(description, str):
                raise ValidationError(MSG_INVALID_FOR)
            changes["description"] = description
        if "typeId" in patch:
            changes["type_id"] = patch["typeId"]
        if "amount" in patch:
            changes["amount"] = float(patch["amount"])
        return changes


# Process-wide collection shared by every request.
transaction_store = TransactionStore()


def get_store() -> TransactionStore:
    """FastAPI dependency returning the shared store."""
    return transaction_store
