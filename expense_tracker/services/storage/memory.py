"""
In-Memory Storage

Used when no persistent backend is configured, and in tests. Records are
kept in their serialized form so a save/load cycle goes through the same
serialization as the real backends.
"""

from typing import Any, Optional, Sequence

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.services.storage.interface import (
    BudgetConfigStorageInterface,
    DeserializationError,
    LedgerStorageInterface,
)
from expense_tracker.services.storage.serialization import (
    ledger_from_list,
    ledger_to_list,
)


class InMemoryStorage(LedgerStorageInterface, BudgetConfigStorageInterface):
    """Process-local ledger and budget storage."""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._ledger: Optional[Any] = None
        self._total_budget = 0.0
        self._audit_logger = audit_logger or AuditLogger()
        self.save_count = 0

    def load_ledger(self) -> list[ExpenseRecord]:
        if self._ledger is None:
            return []
        try:
            return ledger_from_list(self._ledger)
        except DeserializationError as e:
            self._audit_logger.log_ledger_load_failed("memory", str(e))
            return []

    def save_ledger(self, records: Sequence[ExpenseRecord]) -> bool:
        self._ledger = ledger_to_list(records)
        self.save_count += 1
        return True

    def load_total_budget(self) -> float:
        return self._total_budget

    def save_total_budget(self, value: float) -> bool:
        self._total_budget = float(value)
        return True
