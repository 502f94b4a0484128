"""
Expense Ledger

The ledger is the single source of truth for recorded expenses: an
ordered collection of ExpenseRecords with add, remove and total.

RULES:
1. Insertion order is kept; removals close gaps without reordering
2. Every mutating call is followed by exactly one save, even when
   nothing was removed
3. A failed save is logged and swallowed; the in-memory ledger stays
   authoritative and the next mutation writes everything again
4. One re-entrant lock covers mutation, save and snapshot, so readers
   never see a half-applied change and saves never interleave
"""

from threading import RLock
from typing import Iterable, Iterator, Optional
from uuid import UUID

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import ExpenseRecord, total_amount
from expense_tracker.services.storage.interface import LedgerStorageInterface
from expense_tracker.validation import ensure_well_formed


class Ledger:
    """Ordered, persisted collection of expense records."""

    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        records: Optional[Iterable[ExpenseRecord]] = None,
    ):
        """
        Initialize ledger.

        Args:
            storage: Persistence backend. If None, nothing is persisted.
            audit_logger: Audit logger; a local-only one if None
            records: Initial records, taken as already persisted
        """
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._records: list[ExpenseRecord] = list(records or [])
        self._lock = RLock()

    @classmethod
    def load(
        cls,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "Ledger":
        """Build a ledger from what `storage` holds. Does not save."""
        return cls(
            storage=storage,
            audit_logger=audit_logger,
            records=storage.load_ledger(),
        )

    @property
    def storage(self) -> Optional[LedgerStorageInterface]:
        return self._storage

    def _persist(self) -> None:
        """Write the whole ledger. Caller holds the lock."""
        if self._storage is None:
            return
        try:
            self._storage.save_ledger(tuple(self._records))
        except Exception as e:
            self._audit_logger.log_ledger_save_failed(len(self._records), str(e))

    def add(
        self,
        record: ExpenseRecord,
        correlation_id: Optional[UUID] = None,
    ) -> ExpenseRecord:
        """
        Append a record.

        Duplicate ids are not checked.

        Raises:
            ValidationError: If the record is malformed
        """
        ensure_well_formed(record)
        with self._lock:
            self._records.append(record)
            self._persist()

        self._audit_logger.log_expense_added(
            record_id=record.id,
            name=record.name,
            category=record.category.value,
            amount=record.amount,
            correlation_id=correlation_id,
        )
        return record

    def remove_at(
        self,
        indices: Iterable[int],
        correlation_id: Optional[UUID] = None,
    ) -> list[ExpenseRecord]:
        """
        Remove the records at `indices`.

        Out-of-range positions (negative ones included) are ignored.

        Returns:
            The removed records, in ledger order
        """
        with self._lock:
            wanted = {i for i in indices if 0 <= i < len(self._records)}
            removed = [r for i, r in enumerate(self._records) if i in wanted]
            self._records = [
                r for i, r in enumerate(self._records) if i not in wanted
            ]
            self._persist()

        for record in removed:
            self._audit_logger.log_expense_removed(
                record.id, record.name, correlation_id
            )
        return removed

    def remove_by_id(
        self,
        record_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[ExpenseRecord]:
        """Remove the record with `record_id`, if any."""
        with self._lock:
            index = next(
                (i for i, r in enumerate(self._records) if r.id == record_id),
                None,
            )
            removed = self._records.pop(index) if index is not None else None
            self._persist()

        if removed is not None:
            self._audit_logger.log_expense_removed(
                removed.id, removed.name, correlation_id
            )
        return removed

    def reset(self, correlation_id: Optional[UUID] = None) -> list[ExpenseRecord]:
        """Remove every record. Returns what was removed."""
        with self._lock:
            removed = self._records
            self._records = []
            self._persist()

        self._audit_logger.log_ledger_reset(len(removed), correlation_id)
        return removed

    def total(self) -> float:
        """Sum of all amounts; 0 for an empty ledger, inf past the float range."""
        with self._lock:
            return total_amount(r.amount for r in self._records)

    def items(self) -> tuple[ExpenseRecord, ...]:
        """Read-only snapshot in ledger order."""
        with self._lock:
            return tuple(self._records)

    def get(self, record_id: UUID) -> Optional[ExpenseRecord]:
        with self._lock:
            for record in self._records:
                if record.id == record_id:
                    return record
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ExpenseRecord]:
        return iter(self.items())

    def __contains__(self, record_id: object) -> bool:
        return isinstance(record_id, UUID) and self.get(record_id) is not None
