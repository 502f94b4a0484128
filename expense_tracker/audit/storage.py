"""
Audit Trail Storage

Audit logs are append-only - we never delete or modify them.
The in-memory store keeps a bounded window of recent events for the
activity view and for tests; older events only live in the local log.
"""

from abc import ABC, abstractmethod
from collections import deque
from threading import Lock
from typing import Optional
from uuid import UUID

from expense_tracker.models.audit import AuditEvent


class AuditStorageInterface(ABC):
    """Abstract interface for audit log storage."""

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one add-expense action).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class InMemoryAuditStorage(AuditStorageInterface):
    """Bounded in-process audit trail."""

    def __init__(self, max_events: Optional[int] = 500):
        self._events: deque[AuditEvent] = deque(maxlen=max_events or None)
        self._lock = Lock()

    def append_event(self, event: AuditEvent) -> bool:
        with self._lock:
            self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        with self._lock:
            events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        with self._lock:
            events = list(self._events)
        events.reverse()
        return events[:limit]

    def __len__(self) -> int:
        return len(self._events)
