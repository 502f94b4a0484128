"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the
end-to-end flows for:
1. Expenses (form input -> validate -> append -> schedule reminder)
2. Budget (set monthly budget -> overview)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing enters the ledger unless the submit action would be enabled
- A removed expense takes its pending reminder with it
- Future reminders of loaded expenses are scheduled again at startup
- Every step is audited

The ledger and budget config persist themselves; the flows never talk
to storage directly.
"""

from datetime import date, datetime, timezone
from typing import Iterable, Optional
from uuid import UUID

from expense_tracker.audit import (
    AuditLogger,
    InMemoryAuditStorage,
    configure_logging,
    create_correlation_id,
)
from expense_tracker.budget import BudgetAggregator, BudgetConfig
from expense_tracker.config import get_settings
from expense_tracker.ledger import Ledger
from expense_tracker.models.budget import BudgetOverview, CategoryGrouping
from expense_tracker.models.expense import (
    ExpenseCandidate,
    ExpenseRecord,
    ValidationResult,
)
from expense_tracker.services.notifications import (
    LocalNotificationCenter,
    ReminderOutcome,
    ReminderScheduler,
    is_due,
)
from expense_tracker.services.storage import (
    GoogleSheetsBudgetStorage,
    GoogleSheetsClient,
    GoogleSheetsLedgerStorage,
    InMemoryStorage,
    JsonFileStorage,
)
from expense_tracker.validation import ExpenseValidator


class ExpenseFlow:
    """
    Orchestrates adding and removing expenses.

    Flow:
    1. Check -> Validate form input, report every issue
    2. Add -> Only when the submit action is enabled
    3. Remind -> Schedule the expense's reminder, if any
    4. Remove -> Cancel the reminder owned by each removed expense
    """

    def __init__(
        self,
        ledger: Ledger,
        validator: Optional[ExpenseValidator] = None,
        reminder_scheduler: Optional[ReminderScheduler] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._ledger = ledger
        self._validator = validator or ExpenseValidator()
        self._reminder_scheduler = reminder_scheduler
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def validator(self) -> ExpenseValidator:
        return self._validator

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def check_candidate(
        self,
        candidate: ExpenseCandidate,
    ) -> tuple[ValidationResult, str]:
        """
        Validate form input without adding anything.

        Returns:
            (result, message) where result.can_submit gates the form
        """
        result = self._validator.validate(candidate)
        return result, self._validator.get_user_friendly_summary(result)

    async def add_expense(
        self,
        candidate: ExpenseCandidate,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[ExpenseRecord], ReminderOutcome, str]:
        """
        Add an expense from form input.

        Returns:
            (record, reminder_outcome, message). record is None when the
            input was refused; nothing is persisted in that case.
        """
        correlation_id = correlation_id or create_correlation_id()

        result, message = self.check_candidate(candidate)
        if not result.can_submit:
            self._audit_logger.log_expense_rejected(
                kinds=[kind.value for kind in result.error_kinds],
                correlation_id=correlation_id,
            )
            return None, ReminderOutcome.NOT_REQUESTED, message

        record = self._ledger.add(result.record, correlation_id=correlation_id)

        outcome = ReminderOutcome.NOT_REQUESTED
        if self._reminder_scheduler is not None:
            outcome = await self._reminder_scheduler.schedule_for(
                record, correlation_id=correlation_id
            )

        message = f"Added {record.name} ({record.display_type}, {record.amount:,.2f})"
        if outcome == ReminderOutcome.SCHEDULED:
            message += " with a reminder"
        elif outcome == ReminderOutcome.PERMISSION_DENIED:
            message += "; reminders are turned off"

        return record, outcome, message

    async def _cancel_reminders(
        self,
        records: Iterable[ExpenseRecord],
        correlation_id: UUID,
    ) -> None:
        if self._reminder_scheduler is None:
            return
        for record in records:
            await self._reminder_scheduler.cancel_for(record, correlation_id)

    async def delete_expenses(
        self,
        indices: Iterable[int],
        correlation_id: Optional[UUID] = None,
    ) -> list[ExpenseRecord]:
        """Remove expenses by list position. Out-of-range positions are ignored."""
        correlation_id = correlation_id or create_correlation_id()
        removed = self._ledger.remove_at(indices, correlation_id=correlation_id)
        await self._cancel_reminders(removed, correlation_id)
        return removed

    async def delete_expense(
        self,
        record_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[ExpenseRecord]:
        correlation_id = correlation_id or create_correlation_id()
        removed = self._ledger.remove_by_id(record_id, correlation_id=correlation_id)
        if removed is not None:
            await self._cancel_reminders([removed], correlation_id)
        return removed

    async def reset(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> list[ExpenseRecord]:
        """Remove every expense and its pending reminder."""
        correlation_id = correlation_id or create_correlation_id()
        removed = self._ledger.reset(correlation_id=correlation_id)
        await self._cancel_reminders(removed, correlation_id)
        return removed

    async def restore_reminders(
        self,
        now: Optional[datetime] = None,
    ) -> dict[UUID, ReminderOutcome]:
        """
        Schedule again the reminders of expenses loaded from storage.

        Pending reminders live in the notification center, which may not
        outlive the process. Reminders already due are skipped quietly.

        Returns:
            Outcome per record id, for records with a future reminder
        """
        if self._reminder_scheduler is None:
            return {}

        now = now or datetime.now(timezone.utc)
        correlation_id = create_correlation_id()
        outcomes = {}
        for record in self._ledger.items():
            if record.reminder_at is None or is_due(record.reminder_at, now):
                continue
            outcomes[record.id] = await self._reminder_scheduler.schedule_for(
                record, now=now, correlation_id=correlation_id
            )
        return outcomes


class BudgetFlow:
    """Orchestrates the monthly budget and its overview."""

    def __init__(
        self,
        ledger: Ledger,
        budget_config: BudgetConfig,
        aggregator: Optional[BudgetAggregator] = None,
    ):
        self._ledger = ledger
        self._budget_config = budget_config
        self._aggregator = aggregator or BudgetAggregator(ledger, budget_config)

    @property
    def budget_config(self) -> BudgetConfig:
        return self._budget_config

    @property
    def aggregator(self) -> BudgetAggregator:
        return self._aggregator

    def set_total_budget(self, value: float) -> BudgetOverview:
        """
        Store a new monthly budget.

        Returns:
            The overview recomputed against the new budget

        Raises:
            ValueError: If `value` is infinite or NaN
        """
        self._budget_config.set_total_budget(value)
        return self.overview()

    def overview(self, today: Optional[date] = None) -> BudgetOverview:
        return self._aggregator.overview(today)


def _build_storage(backend: str, audit_logger: AuditLogger):
    """Return (ledger_storage, budget_storage) for the configured backend."""
    settings = get_settings()

    if backend == "google_sheets":
        client = GoogleSheetsClient()
        client.connect()
        return (
            GoogleSheetsLedgerStorage(client, audit_logger),
            GoogleSheetsBudgetStorage(client, audit_logger),
        )

    if backend == "local":
        storage = JsonFileStorage(settings.app.data_file_path, audit_logger)
        return storage, storage

    storage = InMemoryStorage(audit_logger)
    return storage, storage


def create_app_components(
    use_storage: bool = True,
) -> tuple[ExpenseFlow, BudgetFlow, LocalNotificationCenter]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured storage backend.
                    Set to False for testing without storage.

    Returns:
        (expense_flow, budget_flow, notification_center)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger(
        InMemoryAuditStorage(max_events=settings.app.audit_history_size)
    )

    backend = settings.app.storage_backend if use_storage else "memory"
    try:
        ledger_storage, budget_storage = _build_storage(backend, audit_logger)
    except Exception as e:
        # Storage not configured - continue without it
        audit_logger.log_error(
            error_type="storage_unavailable",
            error_message=str(e),
            details={"backend": backend},
        )
        ledger_storage = budget_storage = InMemoryStorage(audit_logger)

    ledger = Ledger.load(ledger_storage, audit_logger)
    budget_config = BudgetConfig.load(budget_storage, audit_logger)

    notification_center = LocalNotificationCenter(audit_logger=audit_logger)
    reminder_scheduler = ReminderScheduler(notification_center, audit_logger)

    expense_flow = ExpenseFlow(
        ledger=ledger,
        validator=ExpenseValidator(settings.app.entry_limit),
        reminder_scheduler=reminder_scheduler,
        audit_logger=audit_logger,
    )

    aggregator = BudgetAggregator(
        ledger,
        budget_config,
        grouping=CategoryGrouping(settings.app.category_grouping),
    )
    budget_flow = BudgetFlow(ledger, budget_config, aggregator)

    return expense_flow, budget_flow, notification_center
