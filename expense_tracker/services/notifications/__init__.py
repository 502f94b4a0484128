"""
Notification Services Package

Reminder scheduling on top of a swappable notification center.
"""

from expense_tracker.services.notifications.interface import (
    NotificationCenterInterface,
    NotificationError,
    PermissionStatus,
    ReminderRequest,
    is_due,
)
from expense_tracker.services.notifications.local import LocalNotificationCenter
from expense_tracker.services.notifications.scheduler import (
    ReminderOutcome,
    ReminderScheduler,
)

__all__ = [
    "LocalNotificationCenter",
    "NotificationCenterInterface",
    "NotificationError",
    "PermissionStatus",
    "ReminderOutcome",
    "ReminderRequest",
    "ReminderScheduler",
    "is_due",
]
