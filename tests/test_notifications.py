"""Tests for reminder scheduling."""

import pytest
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from expense_tracker.audit import AuditLogger, InMemoryAuditStorage
from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.expense import ExpenseCategory, ExpenseRecord
from expense_tracker.services.notifications import (
    LocalNotificationCenter,
    NotificationCenterInterface,
    NotificationError,
    PermissionStatus,
    ReminderOutcome,
    ReminderScheduler,
)


NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


class ScriptedCenter(NotificationCenterInterface):
    """Notification center that answers permission requests from a script."""

    def __init__(self, answers, fail_schedule=False):
        self.answers = list(answers)
        self.permission_requests = 0
        self.scheduled = {}
        self.fail_schedule = fail_schedule

    async def request_permission(self):
        self.permission_requests += 1
        return self.answers.pop(0)

    async def schedule_reminder(self, reminder_id, title, body, fires_at):
        if self.fail_schedule:
            raise NotificationError("service unavailable")
        self.scheduled[reminder_id] = fires_at
        return True

    async def cancel_reminder(self, reminder_id):
        return self.scheduled.pop(reminder_id, None) is not None


def make_record(reminder_at=None):
    return ExpenseRecord(
        name="Electric bill",
        category=ExpenseCategory.ELECTRICITY,
        amount=80,
        reminder_at=reminder_at,
    )


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


class TestReminderScheduler:
    """Tests for the scheduling rules."""

    @pytest.mark.asyncio
    async def test_no_reminder_requested(self):
        center = ScriptedCenter([])
        outcome = await ReminderScheduler(center).schedule_for(make_record(), now=NOW)

        assert outcome == ReminderOutcome.NOT_REQUESTED
        assert center.permission_requests == 0

    @pytest.mark.asyncio
    async def test_past_reminder_is_suppressed(self, audit_logger, audit_storage):
        """Test a past timestamp is silently skipped."""
        center = ScriptedCenter([])
        record = make_record(NOW - timedelta(minutes=1))

        outcome = await ReminderScheduler(center, audit_logger).schedule_for(record, now=NOW)

        assert outcome == ReminderOutcome.PAST_DUE
        assert center.permission_requests == 0
        assert center.scheduled == {}
        assert AuditEventType.REMINDER_SUPPRESSED in [
            e.event_type for e in audit_storage.get_recent_events()
        ]

    @pytest.mark.asyncio
    async def test_reminder_at_now_is_suppressed(self):
        center = ScriptedCenter([])
        outcome = await ReminderScheduler(center).schedule_for(make_record(NOW), now=NOW)
        assert outcome == ReminderOutcome.PAST_DUE

    @pytest.mark.asyncio
    async def test_granted(self):
        center = ScriptedCenter([PermissionStatus.GRANTED])
        record = make_record(NOW + timedelta(days=1))

        outcome = await ReminderScheduler(center).schedule_for(record, now=NOW)

        assert outcome == ReminderOutcome.SCHEDULED
        assert center.permission_requests == 1
        assert center.scheduled == {record.id: record.reminder_at}

    @pytest.mark.asyncio
    async def test_pending_then_granted(self):
        """Test an unanswered request is retried once."""
        center = ScriptedCenter([PermissionStatus.PENDING, PermissionStatus.GRANTED])
        record = make_record(NOW + timedelta(days=1))

        outcome = await ReminderScheduler(center).schedule_for(record, now=NOW)

        assert outcome == ReminderOutcome.SCHEDULED
        assert center.permission_requests == 2

    @pytest.mark.asyncio
    async def test_pending_twice_gives_up(self, audit_logger, audit_storage):
        """Test the retry happens exactly once."""
        center = ScriptedCenter([
            PermissionStatus.PENDING,
            PermissionStatus.PENDING,
            PermissionStatus.GRANTED,
        ])
        record = make_record(NOW + timedelta(days=1))

        outcome = await ReminderScheduler(center, audit_logger).schedule_for(record, now=NOW)

        assert outcome == ReminderOutcome.PERMISSION_DENIED
        assert center.permission_requests == 2
        assert center.scheduled == {}
        assert AuditEventType.REMINDER_PERMISSION_DENIED in [
            e.event_type for e in audit_storage.get_recent_events()
        ]

    @pytest.mark.asyncio
    async def test_denied_is_not_retried(self):
        center = ScriptedCenter([PermissionStatus.DENIED])
        record = make_record(NOW + timedelta(days=1))

        outcome = await ReminderScheduler(center).schedule_for(record, now=NOW)

        assert outcome == ReminderOutcome.PERMISSION_DENIED
        assert center.permission_requests == 1

    @pytest.mark.asyncio
    async def test_schedule_failure_is_reported(self, audit_logger, audit_storage):
        """Test collaborator errors become an outcome, not an exception."""
        center = ScriptedCenter([PermissionStatus.GRANTED], fail_schedule=True)
        record = make_record(NOW + timedelta(days=1))

        outcome = await ReminderScheduler(center, audit_logger).schedule_for(record, now=NOW)

        assert outcome == ReminderOutcome.FAILED
        assert AuditEventType.NOTIFICATION_ERROR in [
            e.event_type for e in audit_storage.get_recent_events()
        ]

    @pytest.mark.asyncio
    async def test_naive_timestamps(self):
        """Test naive reminders compare against a naive clock."""
        center = ScriptedCenter([PermissionStatus.GRANTED])
        now = datetime(2026, 6, 1, 12, 0)
        record = make_record(now + timedelta(hours=1))

        outcome = await ReminderScheduler(center).schedule_for(record, now=now)

        assert outcome == ReminderOutcome.SCHEDULED

    @pytest.mark.asyncio
    async def test_cancel_for(self, audit_logger, audit_storage):
        center = ScriptedCenter([PermissionStatus.GRANTED])
        scheduler = ReminderScheduler(center, audit_logger)
        record = make_record(NOW + timedelta(days=1))
        await scheduler.schedule_for(record, now=NOW)

        assert await scheduler.cancel_for(record) is True
        assert center.scheduled == {}
        assert AuditEventType.REMINDER_CANCELLED in [
            e.event_type for e in audit_storage.get_recent_events()
        ]

    @pytest.mark.asyncio
    async def test_cancel_without_reminder(self):
        center = ScriptedCenter([])
        assert await ReminderScheduler(center).cancel_for(make_record()) is False


class TestLocalNotificationCenter:
    """Tests for the in-process notification center."""

    @pytest.mark.asyncio
    async def test_schedule_and_pop_due(self, audit_logger, audit_storage):
        center = LocalNotificationCenter(audit_logger=audit_logger)
        soon, later = uuid4(), uuid4()
        await center.schedule_reminder(later, "Later", "", NOW + timedelta(days=2))
        await center.schedule_reminder(soon, "Soon", "", NOW + timedelta(hours=1))

        assert [r.reminder_id for r in center.pending_reminders()] == [soon, later]

        due = center.pop_due(NOW + timedelta(days=1))

        assert [r.reminder_id for r in due] == [soon]
        assert len(center) == 1
        assert AuditEventType.REMINDER_DELIVERED in [
            e.event_type for e in audit_storage.get_recent_events()
        ]

    @pytest.mark.asyncio
    async def test_reschedule_replaces(self):
        center = LocalNotificationCenter()
        reminder_id = uuid4()
        await center.schedule_reminder(reminder_id, "A", "", NOW)
        await center.schedule_reminder(reminder_id, "B", "", NOW)

        [pending] = center.pending_reminders()
        assert pending.title == "B"

    @pytest.mark.asyncio
    async def test_cancel(self):
        center = LocalNotificationCenter()
        reminder_id = uuid4()
        await center.schedule_reminder(reminder_id, "A", "", NOW)

        assert await center.cancel_reminder(reminder_id) is True
        assert await center.cancel_reminder(reminder_id) is False

    @pytest.mark.asyncio
    async def test_permission(self):
        """Test the center refuses to schedule without permission."""
        center = LocalNotificationCenter(permission=PermissionStatus.DENIED)

        assert await center.request_permission() == PermissionStatus.DENIED
        with pytest.raises(NotificationError):
            await center.schedule_reminder(uuid4(), "A", "", NOW)

        center.set_permission(PermissionStatus.GRANTED)
        assert await center.request_permission() == PermissionStatus.GRANTED

    @pytest.mark.asyncio
    async def test_pop_due_with_mixed_timezones(self):
        """Test a naive clock still finds aware reminders that are due."""
        center = LocalNotificationCenter()
        await center.schedule_reminder(uuid4(), "Past", "", datetime(2000, 1, 1, tzinfo=timezone.utc))

        assert len(center.pop_due(datetime.now())) == 1

    @pytest.mark.asyncio
    async def test_with_scheduler(self):
        """Test end to end with the local center."""
        center = LocalNotificationCenter()
        scheduler = ReminderScheduler(center)
        record = make_record(NOW + timedelta(hours=3))

        assert await scheduler.schedule_for(record, now=NOW) == ReminderOutcome.SCHEDULED

        [request] = center.pending_reminders()
        assert request.reminder_id == record.id
        assert "Electric bill" in request.title
        assert "Electricity" in request.body


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
