"""
Abstract Notification Interface

DESIGN DECISION: Reminders are delegated to a notification center the
app does not own (an OS service, a push gateway, a local scheduler).
Every call may take a while, so the interface is async.

The permission state is tri-state: a user may not have answered yet.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PermissionStatus(str, Enum):
    """Has the user allowed reminders?"""
    GRANTED = "granted"
    DENIED = "denied"
    PENDING = "pending"


class ReminderRequest(BaseModel):
    """A reminder waiting to fire."""
    model_config = ConfigDict(frozen=True)

    reminder_id: UUID
    title: str
    body: str
    fires_at: datetime


def is_due(fires_at: datetime, now: datetime) -> bool:
    """Has `fires_at` been reached at `now`?"""
    # Mixed naive/aware timestamps are compared in local time
    if (fires_at.tzinfo is None) != (now.tzinfo is None):
        if now.tzinfo is None:
            now = now.astimezone()
        else:
            now = now.astimezone().replace(tzinfo=None)
    return fires_at <= now


class NotificationCenterInterface(ABC):
    """Abstract interface for scheduling reminders."""

    @abstractmethod
    async def request_permission(self) -> PermissionStatus:
        """Ask the user for permission to deliver reminders."""
        pass

    @abstractmethod
    async def schedule_reminder(
        self,
        reminder_id: UUID,
        title: str,
        body: str,
        fires_at: datetime,
    ) -> bool:
        """
        Schedule a one-shot reminder. Scheduling again with the same id
        replaces the earlier reminder.

        Raises:
            NotificationError: If the reminder cannot be scheduled
        """
        pass

    @abstractmethod
    async def cancel_reminder(self, reminder_id: UUID) -> bool:
        """
        Cancel a pending reminder.

        Returns:
            True if a pending reminder was removed
        """
        pass


class NotificationError(Exception):
    """The notification center refused or failed a request."""
    pass
