"""
Audit Logger

DESIGN DECISION: Every change to the user's data is logged.
This provides:
1. Traceability of additions, removals and budget changes
2. A diagnostic trail when stored data is discarded as unreadable
3. Visibility of persistence and reminder failures that never reach the UI

The audit logger:
- Is synchronous, ledger mutations log inline
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.audit.storage import AuditStorageInterface
from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through the stdlib root logger at `level`.

    structlog renders the JSON line; the stdlib handler only prints it.
    """
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, when one is configured (recent activity view)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the audit trail.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("expense_tracker.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_expense_added(
        self,
        record_id: UUID,
        name: str,
        category: str,
        amount: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new ledger entry."""
        self.log(AuditEventBuilder.expense_added(
            record_id=record_id,
            name=name,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_expense_rejected(
        self,
        kinds: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_rejected(
            kinds=kinds,
            correlation_id=correlation_id,
        ))

    def log_expense_removed(
        self,
        record_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_removed(
            record_id=record_id,
            name=name,
            correlation_id=correlation_id,
        ))

    def log_ledger_reset(
        self,
        removed_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.ledger_reset(
            removed_count=removed_count,
            correlation_id=correlation_id,
        ))

    def log_ledger_loaded(self, record_count: int, source: str) -> None:
        self.log(AuditEventBuilder.ledger_loaded(
            record_count=record_count,
            source=source,
        ))

    def log_ledger_load_failed(self, source: str, error_message: str) -> None:
        """Log a stored ledger that had to be discarded."""
        self.log(AuditEventBuilder.ledger_load_failed(
            source=source,
            error_message=error_message,
        ))

    def log_ledger_save_failed(self, record_count: int, error_message: str) -> None:
        self.log(AuditEventBuilder.ledger_save_failed(
            record_count=record_count,
            error_message=error_message,
        ))

    def log_budget_updated(self, old_value: float, new_value: float) -> None:
        self.log(AuditEventBuilder.budget_updated(
            old_value=old_value,
            new_value=new_value,
        ))

    def log_budget_load_failed(self, source: str, error_message: str) -> None:
        self.log(AuditEventBuilder.budget_load_failed(
            source=source,
            error_message=error_message,
        ))

    def log_budget_save_failed(self, value: float, error_message: str) -> None:
        self.log(AuditEventBuilder.budget_save_failed(
            value=value,
            error_message=error_message,
        ))

    def log_reminder_scheduled(self, record_id, fires_at, correlation_id=None) -> None:
        self.log(AuditEventBuilder.reminder_scheduled(
            record_id=record_id,
            fires_at=fires_at,
            correlation_id=correlation_id,
        ))

    def log_reminder_suppressed(self, record_id, fires_at, correlation_id=None) -> None:
        self.log(AuditEventBuilder.reminder_suppressed(
            record_id=record_id,
            fires_at=fires_at,
            correlation_id=correlation_id,
        ))

    def log_reminder_cancelled(self, record_id, correlation_id=None) -> None:
        self.log(AuditEventBuilder.reminder_cancelled(
            record_id=record_id,
            correlation_id=correlation_id,
        ))

    def log_reminder_permission_denied(self, record_id, status, correlation_id=None) -> None:
        self.log(AuditEventBuilder.reminder_permission_denied(
            record_id=record_id,
            status=status,
            correlation_id=correlation_id,
        ))

    def log_reminder_delivered(self, record_id: UUID, title: str) -> None:
        self.log(AuditEventBuilder.reminder_delivered(
            record_id=record_id,
            title=title,
        ))

    def log_notification_error(
        self,
        operation: str,
        error_message: str,
        record_id: Optional[UUID] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.notification_error(
            operation=operation,
            error_message=error_message,
            record_id=record_id,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., adding an expense).
    Pass it through all subsequent operations.
    """
    return uuid4()
