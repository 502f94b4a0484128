"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for the two things the
app persists: the ledger and the monthly budget figure.
This allows us to:
1. Swap the local JSON file for Google Sheets (or anything else)
2. Use in-memory storage for testing
3. Keep ledger and budget logic decoupled from storage implementation

Contract shared by every backend:
- load_* NEVER raises. Missing or unreadable data loads as empty / 0,
  and the failure is logged for diagnosis.
- save_* raises StorageError on failure. The owner of the data decides
  what to do with it (the Ledger logs and carries on).
"""

from abc import ABC, abstractmethod
from typing import Sequence

from expense_tracker.models.expense import ExpenseRecord


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    The ledger is stored as one ordered collection and rewritten as a
    whole on every save.
    """

    @abstractmethod
    def load_ledger(self) -> list[ExpenseRecord]:
        """
        Load the stored ledger.

        Returns:
            Records in stored order; an empty list if nothing is stored
            or the stored data cannot be deserialized
        """
        pass

    @abstractmethod
    def save_ledger(self, records: Sequence[ExpenseRecord]) -> bool:
        """
        Replace the stored ledger with `records`.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If the write fails
        """
        pass


class BudgetConfigStorageInterface(ABC):
    """Abstract interface for the persisted monthly budget figure."""

    @abstractmethod
    def load_total_budget(self) -> float:
        """
        Load the monthly budget.

        Returns:
            The stored budget, or 0.0 when unset or unreadable
        """
        pass

    @abstractmethod
    def save_total_budget(self, value: float) -> bool:
        """
        Store the monthly budget.

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DeserializationError(StorageError):
    """Stored data exists but cannot be turned back into models."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
