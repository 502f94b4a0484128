"""
Audit Models for Expense Tracker

Every change to the ledger, the budget or a reminder is logged.
This provides:
1. Traceability of what happened to the user's data
2. Diagnostics when stored data had to be discarded
3. A visible trail when a write or a reminder failed silently

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REJECTED = "expense_rejected"
    EXPENSE_REMOVED = "expense_removed"
    LEDGER_RESET = "ledger_reset"
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_LOAD_FAILED = "ledger_load_failed"
    LEDGER_SAVE_FAILED = "ledger_save_failed"

    # Budget
    BUDGET_UPDATED = "budget_updated"
    BUDGET_LOAD_FAILED = "budget_load_failed"
    BUDGET_SAVE_FAILED = "budget_save_failed"

    # Reminders
    REMINDER_SCHEDULED = "reminder_scheduled"
    REMINDER_SUPPRESSED = "reminder_suppressed"
    REMINDER_CANCELLED = "reminder_cancelled"
    REMINDER_PERMISSION_DENIED = "reminder_permission_denied"
    REMINDER_DELIVERED = "reminder_delivered"
    NOTIFICATION_ERROR = "notification_error"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'ledger', 'budget')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., add expense + schedule reminder)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(record, correlation_id)
        event = AuditEventBuilder.ledger_save_failed(error, record_count)
    """

    @staticmethod
    def expense_added(
        record_id: UUID,
        name: str,
        category: str,
        amount: float,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Expense added: {name} ({category})",
            details={
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_rejected(
        kinds: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            correlation_id=correlation_id,
            description=f"Expense rejected with {len(kinds)} issues",
            details={
                "issues": kinds,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_removed(
        record_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVED,
            entity_type="expense",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Expense removed: {name}",
            is_user_action=True,
        )

    @staticmethod
    def ledger_reset(
        removed_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_RESET,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger reset, {removed_count} expenses removed",
            details={
                "removed_count": removed_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_loaded(
        record_count: int,
        source: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            description=f"Ledger loaded from {source} with {record_count} expenses",
            details={
                "record_count": record_count,
                "source": source,
            },
        )

    @staticmethod
    def ledger_load_failed(
        source: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description=f"Stored ledger in {source} could not be read and was ignored",
            error_message=error_message,
            details={
                "source": source,
            },
        )

    @staticmethod
    def ledger_save_failed(
        record_count: int,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Failed to persist ledger with {record_count} expenses",
            error_message=error_message,
            details={
                "record_count": record_count,
            },
        )

    @staticmethod
    def budget_updated(
        old_value: float,
        new_value: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="budget",
            description=f"Monthly budget set to {new_value:,.2f}",
            details={
                "old_value": old_value,
                "new_value": new_value,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_load_failed(
        source: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="budget",
            description=f"Stored budget in {source} could not be read, using 0",
            error_message=error_message,
            details={
                "source": source,
            },
        )

    @staticmethod
    def budget_save_failed(
        value: float,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="budget",
            description="Failed to persist monthly budget",
            error_message=error_message,
            details={
                "value": value,
            },
        )

    @staticmethod
    def reminder_scheduled(
        record_id: UUID,
        fires_at: datetime,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_SCHEDULED,
            entity_type="reminder",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Reminder scheduled for {fires_at.isoformat()}",
            details={
                "fires_at": fires_at.isoformat(),
            },
        )

    @staticmethod
    def reminder_suppressed(
        record_id: UUID,
        fires_at: datetime,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_SUPPRESSED,
            entity_type="reminder",
            entity_id=record_id,
            correlation_id=correlation_id,
            description="Reminder time already passed, not scheduled",
            details={
                "fires_at": fires_at.isoformat(),
            },
        )

    @staticmethod
    def reminder_cancelled(
        record_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_CANCELLED,
            entity_type="reminder",
            entity_id=record_id,
            correlation_id=correlation_id,
            description="Pending reminder cancelled with its expense",
        )

    @staticmethod
    def reminder_permission_denied(
        record_id: UUID,
        status: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_PERMISSION_DENIED,
            severity=AuditSeverity.WARNING,
            entity_type="reminder",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Notification permission not granted ({status})",
            details={
                "status": status,
            },
        )

    @staticmethod
    def reminder_delivered(
        record_id: UUID,
        title: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_DELIVERED,
            entity_type="reminder",
            entity_id=record_id,
            description=f"Reminder delivered: {title}",
        )

    @staticmethod
    def notification_error(
        operation: str,
        error_message: str,
        record_id: Optional[UUID] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="reminder",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Notification collaborator failed during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
