"""
Ledger Serialization

The persisted form of the ledger is an ordered JSON list of records using
the stable field names below. Every backend goes through these helpers so
a ledger written by one backend can be read by any other.
"""

import json
from typing import Any, Sequence

from pydantic import TypeAdapter, ValidationError

from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.services.storage.interface import DeserializationError


# Stable field names, in column order for tabular backends
RECORD_FIELDS = [
    "id",
    "name",
    "type",
    "customTypeLabel",
    "amount",
    "reminderDate",
    "icon",
]

_LEDGER_ADAPTER = TypeAdapter(list[ExpenseRecord])


def record_to_dict(record: ExpenseRecord) -> dict[str, Any]:
    """Convert a record to its JSON-compatible stored form."""
    return record.model_dump(mode="json", by_alias=True)


def ledger_to_list(records: Sequence[ExpenseRecord]) -> list[dict[str, Any]]:
    return [record_to_dict(record) for record in records]


def ledger_from_list(data: Any) -> list[ExpenseRecord]:
    """
    Rebuild records from their stored form.

    Raises:
        DeserializationError: If `data` is not a list of valid records
    """
    try:
        return _LEDGER_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise DeserializationError(
            f"Stored ledger is invalid ({e.error_count()} errors)"
        ) from e


def encode_ledger(records: Sequence[ExpenseRecord]) -> str:
    """Serialize records to the JSON blob format."""
    return json.dumps(ledger_to_list(records))


def decode_ledger(blob: str) -> list[ExpenseRecord]:
    """
    Deserialize the JSON blob format.

    Raises:
        DeserializationError: If the blob is not valid JSON or not a valid ledger
    """
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise DeserializationError(f"Stored ledger is not valid JSON: {e}") from e
    return ledger_from_list(data)
