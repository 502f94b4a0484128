"""
Local JSON Storage Implementation

DESIGN DECISION: The default backend is a single small JSON document on
the local disk, used as a key-value store:

    {"expenses": [...records...], "totalBudget": 1000.0}

Why:
1. No setup, works offline
2. The document is human-readable
3. Both keys live in one file, so a budget write never clobbers the ledger

Writes go to a temporary file that replaces the document in one step,
so a crash mid-write leaves the previous version intact.
"""

import json
import math
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Optional, Sequence, Union

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.services.storage.interface import (
    BudgetConfigStorageInterface,
    DeserializationError,
    LedgerStorageInterface,
    StorageError,
)
from expense_tracker.services.storage.serialization import (
    ledger_from_list,
    ledger_to_list,
)


EXPENSES_KEY = "expenses"
TOTAL_BUDGET_KEY = "totalBudget"


class JsonFileStorage(LedgerStorageInterface, BudgetConfigStorageInterface):
    """
    JSON document implementation of ledger and budget storage.

    One instance may be shared by the Ledger and the BudgetConfig.
    """

    def __init__(
        self,
        path: Union[Path, str],
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._path = Path(path).expanduser()
        self._audit_logger = audit_logger or AuditLogger()
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, Any]:
        """
        Read the whole document.

        Raises:
            DeserializationError: If the file exists but is not UTF-8 text
                holding a JSON object
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            raise DeserializationError(f"Cannot read {self._path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            document = json.loads(raw)
        except ValueError as e:
            raise DeserializationError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise DeserializationError(f"{self._path} does not hold a JSON object")
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def _update_key(self, key: str, value: Any) -> None:
        """Read-modify-write a single key of the document."""
        with self._lock:
            try:
                document = self._read_document()
            except DeserializationError:
                # The other key is unreadable anyway; start a fresh document
                document = {}
            document[key] = value
            self._write_document(document)

    def load_ledger(self) -> list[ExpenseRecord]:
        """Load the ledger, treating unreadable data as absent."""
        source = str(self._path)
        try:
            with self._lock:
                document = self._read_document()
            stored = document.get(EXPENSES_KEY)
            if stored is None:
                return []
            records = ledger_from_list(stored)
        except DeserializationError as e:
            self._audit_logger.log_ledger_load_failed(source, str(e))
            return []

        self._audit_logger.log_ledger_loaded(len(records), source)
        return records

    def save_ledger(self, records: Sequence[ExpenseRecord]) -> bool:
        self._update_key(EXPENSES_KEY, ledger_to_list(records))
        return True

    def load_total_budget(self) -> float:
        source = str(self._path)
        try:
            with self._lock:
                document = self._read_document()
        except DeserializationError as e:
            self._audit_logger.log_budget_load_failed(source, str(e))
            return 0.0

        stored = document.get(TOTAL_BUDGET_KEY)
        if stored is None:
            return 0.0

        try:
            # JSON true/false would otherwise read as 1.0/0.0
            if isinstance(stored, bool):
                raise TypeError(stored)
            value = float(stored)
        except (TypeError, ValueError):
            self._audit_logger.log_budget_load_failed(
                source, f"Budget value is not a number: {stored!r}"
            )
            return 0.0

        if not math.isfinite(value) or value < 0:
            self._audit_logger.log_budget_load_failed(
                source, f"Budget value out of range: {value!r}"
            )
            return 0.0
        return value

    def save_total_budget(self, value: float) -> bool:
        self._update_key(TOTAL_BUDGET_KEY, value)
        return True
