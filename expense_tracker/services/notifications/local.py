"""
Local Notification Center

An in-process notification center. Reminders are held in memory until
they are due; the app polls pop_due() to deliver them.
"""

from datetime import datetime
from threading import Lock
from typing import Optional
from uuid import UUID

from expense_tracker.audit import AuditLogger
from expense_tracker.services.notifications.interface import (
    NotificationCenterInterface,
    NotificationError,
    PermissionStatus,
    ReminderRequest,
    is_due,
)


class LocalNotificationCenter(NotificationCenterInterface):
    """In-memory reminder scheduler."""

    def __init__(
        self,
        permission: PermissionStatus = PermissionStatus.GRANTED,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._permission = permission
        self._pending: dict[UUID, ReminderRequest] = {}
        self._lock = Lock()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def permission(self) -> PermissionStatus:
        return self._permission

    def set_permission(self, status: PermissionStatus) -> None:
        """Record the user's answer (from a settings toggle)."""
        self._permission = status

    async def request_permission(self) -> PermissionStatus:
        return self._permission

    async def schedule_reminder(
        self,
        reminder_id: UUID,
        title: str,
        body: str,
        fires_at: datetime,
    ) -> bool:
        if self._permission != PermissionStatus.GRANTED:
            raise NotificationError(
                f"Reminders are not allowed ({self._permission.value})"
            )

        request = ReminderRequest(
            reminder_id=reminder_id,
            title=title,
            body=body,
            fires_at=fires_at,
        )
        with self._lock:
            self._pending[reminder_id] = request
        return True

    async def cancel_reminder(self, reminder_id: UUID) -> bool:
        with self._lock:
            return self._pending.pop(reminder_id, None) is not None

    def pending_reminders(self) -> list[ReminderRequest]:
        """Pending reminders, soonest first."""
        with self._lock:
            return sorted(
                self._pending.values(), key=lambda r: r.fires_at.timestamp()
            )

    def pop_due(self, now: datetime) -> list[ReminderRequest]:
        """
        Remove and return every reminder due at `now`, soonest first.
        """
        with self._lock:
            due = [r for r in self._pending.values() if is_due(r.fires_at, now)]
            for request in due:
                del self._pending[request.reminder_id]

        due.sort(key=lambda r: r.fires_at.timestamp())
        for request in due:
            self._audit_logger.log_reminder_delivered(
                request.reminder_id, request.title
            )
        return due

    def __len__(self) -> int:
        return len(self._pending)
