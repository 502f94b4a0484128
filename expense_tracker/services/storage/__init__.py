"""
Storage Services Package

Provides abstract interfaces and concrete implementations for persisting
the ledger and the monthly budget. The local JSON document is the default
backend; Google Sheets and in-memory storage are swappable alternatives.
"""

from expense_tracker.services.storage.interface import (
    BudgetConfigStorageInterface,
    ConnectionError,
    DeserializationError,
    LedgerStorageInterface,
    StorageError,
)
from expense_tracker.services.storage.serialization import (
    RECORD_FIELDS,
    decode_ledger,
    encode_ledger,
)
from expense_tracker.services.storage.local_json import JsonFileStorage
from expense_tracker.services.storage.memory import InMemoryStorage
from expense_tracker.services.storage.google_sheets import (
    GoogleSheetsBudgetStorage,
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
)

__all__ = [
    # Interfaces
    "BudgetConfigStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "ConnectionError",
    "DeserializationError",
    "StorageError",
    # Serialization
    "RECORD_FIELDS",
    "decode_ledger",
    "encode_ledger",
    # Implementations
    "GoogleSheetsBudgetStorage",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStorage",
    "InMemoryStorage",
    "JsonFileStorage",
]
