"""
Reminder Scheduling

Turns an expense's optional reminder timestamp into a scheduled
notification.

RULES:
1. No timestamp -> nothing to do
2. Timestamp not in the future -> suppressed silently
3. Ask for permission once; if the user has not answered yet, ask
   exactly one more time, never more
4. Failures are logged and reported as an outcome, never raised

A reminder is owned by its expense: the reminder id IS the record id,
so removing the expense can cancel it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.services.notifications.interface import (
    NotificationCenterInterface,
    NotificationError,
    PermissionStatus,
    is_due,
)


class ReminderOutcome(str, Enum):
    """What happened to a record's reminder."""
    SCHEDULED = "scheduled"
    NOT_REQUESTED = "not_requested"
    PAST_DUE = "past_due"
    PERMISSION_DENIED = "permission_denied"
    FAILED = "failed"


def reminder_title(record: ExpenseRecord) -> str:
    return f"Reminder: {record.name}"


def reminder_body(record: ExpenseRecord) -> str:
    return f"{record.display_type} expense of {record.amount:,.2f}"


class ReminderScheduler:
    """Schedules and cancels the reminders owned by expenses."""

    def __init__(
        self,
        center: NotificationCenterInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._center = center
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def center(self) -> NotificationCenterInterface:
        return self._center

    async def _request_permission(self) -> PermissionStatus:
        status = await self._center.request_permission()
        if status == PermissionStatus.PENDING:
            status = await self._center.request_permission()
        return status

    async def schedule_for(
        self,
        record: ExpenseRecord,
        now: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ReminderOutcome:
        """
        Schedule the record's reminder, if it has one.

        Args:
            record: The expense that owns the reminder
            now: Reference time; defaults to the current time
            correlation_id: Ties the audit events to the add action

        Returns:
            What happened; never raises for collaborator failures
        """
        fires_at = record.reminder_at
        if fires_at is None:
            return ReminderOutcome.NOT_REQUESTED

        if now is None:
            now = datetime.now(timezone.utc)

        if is_due(fires_at, now):
            self._audit_logger.log_reminder_suppressed(
                record.id, fires_at, correlation_id
            )
            return ReminderOutcome.PAST_DUE

        try:
            status = await self._request_permission()
            if status != PermissionStatus.GRANTED:
                self._audit_logger.log_reminder_permission_denied(
                    record.id, status.value, correlation_id
                )
                return ReminderOutcome.PERMISSION_DENIED

            await self._center.schedule_reminder(
                reminder_id=record.id,
                title=reminder_title(record),
                body=reminder_body(record),
                fires_at=fires_at,
            )
        except NotificationError as e:
            self._audit_logger.log_notification_error(
                "schedule", str(e), record.id, correlation_id
            )
            return ReminderOutcome.FAILED

        self._audit_logger.log_reminder_scheduled(
            record.id, fires_at, correlation_id
        )
        return ReminderOutcome.SCHEDULED

    async def cancel_for(
        self,
        record: ExpenseRecord,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Cancel the pending reminder owned by a removed record.

        Returns:
            True if a pending reminder was cancelled
        """
        if record.reminder_at is None:
            return False

        try:
            cancelled = await self._center.cancel_reminder(record.id)
        except NotificationError as e:
            self._audit_logger.log_notification_error(
                "cancel", str(e), record.id, correlation_id
            )
            return False

        if cancelled:
            self._audit_logger.log_reminder_cancelled(record.id, correlation_id)
        return cancelled
