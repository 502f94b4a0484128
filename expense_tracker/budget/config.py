"""
Budget Configuration

Holds the user's monthly budget and persists it on every change.
"""

import math
from typing import Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.services.storage.interface import BudgetConfigStorageInterface


class BudgetConfig:
    """The monthly total budget. 0 means not set."""

    def __init__(
        self,
        storage: Optional[BudgetConfigStorageInterface] = None,
        total_budget: float = 0.0,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._total_budget = float(total_budget)
        self._audit_logger = audit_logger or AuditLogger()

    @classmethod
    def load(
        cls,
        storage: BudgetConfigStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "BudgetConfig":
        return cls(
            storage=storage,
            total_budget=storage.load_total_budget(),
            audit_logger=audit_logger,
        )

    @property
    def total_budget(self) -> float:
        return self._total_budget

    @property
    def is_set(self) -> bool:
        return self._total_budget > 0

    def set_total_budget(self, value: float) -> float:
        """
        Store a new monthly budget. Negative values become 0.

        Returns:
            The stored value

        Raises:
            ValueError: If `value` is infinite or NaN
        """
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Budget must be a finite number, got {value!r}")
        value = max(value, 0.0)

        old_value = self._total_budget
        self._total_budget = value
        self._audit_logger.log_budget_updated(old_value, value)

        if self._storage is not None:
            try:
                self._storage.save_total_budget(value)
            except Exception as e:
                self._audit_logger.log_budget_save_failed(value, str(e))
        return value
