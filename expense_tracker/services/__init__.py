"""Services package."""

from expense_tracker.services.notifications import (
    LocalNotificationCenter,
    NotificationCenterInterface,
    NotificationError,
    PermissionStatus,
    ReminderOutcome,
    ReminderScheduler,
)
from expense_tracker.services.storage import (
    BudgetConfigStorageInterface,
    ConnectionError,
    DeserializationError,
    GoogleSheetsBudgetStorage,
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
    InMemoryStorage,
    JsonFileStorage,
    LedgerStorageInterface,
    StorageError,
)

__all__ = [
    # Notification services
    "LocalNotificationCenter",
    "NotificationCenterInterface",
    "NotificationError",
    "PermissionStatus",
    "ReminderOutcome",
    "ReminderScheduler",
    # Storage services
    "BudgetConfigStorageInterface",
    "ConnectionError",
    "DeserializationError",
    "GoogleSheetsBudgetStorage",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "LedgerStorageInterface",
    "StorageError",
]
