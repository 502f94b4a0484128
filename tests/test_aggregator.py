"""Tests for budget aggregation and the budget config."""

import pytest
from datetime import date
from unittest.mock import MagicMock

from expense_tracker.audit import AuditLogger, InMemoryAuditStorage
from expense_tracker.budget import (
    BudgetAggregator,
    BudgetConfig,
    category_breakdown,
    days_left_in_month,
    overall_progress,
    remaining,
    summarize,
)
from expense_tracker.ledger import Ledger
from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.budget import CategoryGrouping
from expense_tracker.models.expense import ExpenseCategory, ExpenseRecord
from expense_tracker.services.storage import (
    BudgetConfigStorageInterface,
    InMemoryStorage,
    StorageError,
)


def make_record(category, amount, name="Item", custom_label=None):
    return ExpenseRecord(
        name=name,
        category=category,
        custom_label=custom_label,
        amount=amount,
    )


class TestProgressAndRemaining:
    """Tests for the overall figures."""

    def test_no_budget_means_no_progress(self):
        assert overall_progress(500, 0) == 0.0

    def test_progress_is_a_share_of_budget(self):
        assert overall_progress(250, 1000) == 0.25

    def test_progress_is_capped(self):
        assert overall_progress(5000, 1000) == 1.0

    def test_remaining_floors_at_zero(self):
        assert remaining(300, 1000) == 700
        assert remaining(1500, 1000) == 0


class TestDaysLeftInMonth:
    """Tests for the days-left counter."""

    @pytest.mark.parametrize("today, expected", [
        (date(2026, 1, 1), 30),
        (date(2026, 1, 31), 0),
        (date(2026, 4, 15), 15),
        (date(2026, 2, 10), 18),
        (date(2028, 2, 10), 19),
        (date(2028, 2, 29), 0),
        (date(1900, 2, 1), 27),
        (date(2000, 2, 1), 28),
    ])
    def test_days_left(self, today, expected):
        """Test month lengths, leap years included."""
        assert days_left_in_month(today) == expected


class TestCategoryBreakdown:
    """Tests for per-category summaries."""

    def test_empty_ledger(self):
        """Test an empty ledger has no categories and no progress."""
        overview = summarize([], 1000, date(2026, 5, 1))

        assert overview.overall_progress == 0
        assert overview.remaining == 1000
        assert overview.categories == []

    def test_single_category_gets_whole_budget(self):
        """Test one category present takes the full budget as its limit."""
        records = [
            make_record(ExpenseCategory.GROCERIES, 300),
            make_record(ExpenseCategory.GROCERIES, 200),
        ]

        [summary] = category_breakdown(records, 1000)

        assert summary.name == "Groceries"
        assert summary.spent == 500
        assert summary.limit == 1000
        assert summary.progress == 0.5
        assert summary.is_over is False

    def test_no_budget_means_any_spend_is_over(self):
        """Test a zero budget gives zero limits."""
        records = [make_record(ExpenseCategory.OTHER, 50, custom_label="Gift")]

        [summary] = category_breakdown(records, 0)

        assert summary.category == ExpenseCategory.OTHER
        assert summary.limit == 0
        assert summary.is_over is True
        assert summary.progress == 0

    def test_budget_split_evenly(self):
        """Test the budget is divided across present categories."""
        records = [
            make_record(ExpenseCategory.BILLS, 400),
            make_record(ExpenseCategory.GROCERIES, 200),
        ]

        bills, groceries = category_breakdown(records, 600)

        assert bills.name == "Bills"
        assert bills.limit == 300
        assert bills.is_over is True
        assert groceries.limit == 300
        assert groceries.is_over is False

    def test_sorted_by_name(self):
        records = [
            make_record(ExpenseCategory.TRANSPORT, 1),
            make_record(ExpenseCategory.BILLS, 1),
            make_record(ExpenseCategory.DINING, 1),
        ]
        names = [s.name for s in category_breakdown(records, 90)]
        assert names == ["Bills", "Dining", "Transport"]

    def test_zero_amount_record_still_forms_a_group(self):
        """Test a free expense still counts as a present category."""
        records = [
            make_record(ExpenseCategory.BILLS, 100),
            make_record(ExpenseCategory.OTHER, 0),
        ]
        summaries = category_breakdown(records, 100)
        assert [s.limit for s in summaries] == [50, 50]

    def test_other_labels_share_a_group_by_default(self):
        """Test custom labels collapse into one 'Other' group."""
        records = [
            make_record(ExpenseCategory.OTHER, 10, custom_label="Gift"),
            make_record(ExpenseCategory.OTHER, 20, custom_label="Pets"),
        ]

        [summary] = category_breakdown(records, 100)

        assert summary.name == "Other"
        assert summary.spent == 30

    def test_display_label_grouping(self):
        """Test custom labels form their own groups when opted in."""
        records = [
            make_record(ExpenseCategory.OTHER, 10, custom_label="Gift"),
            make_record(ExpenseCategory.OTHER, 20, custom_label="Pets"),
            make_record(ExpenseCategory.GROCERIES, 30),
        ]

        summaries = category_breakdown(
            records, 90, CategoryGrouping.DISPLAY_LABEL
        )

        assert [s.name for s in summaries] == ["Gift", "Groceries", "Pets"]
        assert all(s.limit == 30 for s in summaries)
        assert summaries[0].category == ExpenseCategory.OTHER

    def test_order_independent(self):
        """Test shuffling records does not change the overview."""
        records = [
            make_record(ExpenseCategory.BILLS, 0.1),
            make_record(ExpenseCategory.DINING, 0.2),
            make_record(ExpenseCategory.BILLS, 0.3),
            make_record(ExpenseCategory.DINING, 1e10),
        ]
        today = date(2026, 6, 1)

        forwards = summarize(records, 500, today)
        backwards = summarize(list(reversed(records)), 500, today)

        assert forwards == backwards

    def test_idempotent(self):
        records = [make_record(ExpenseCategory.BILLS, 10)]
        today = date(2026, 6, 1)
        assert summarize(records, 100, today) == summarize(records, 100, today)

    def test_sum_past_float_range(self):
        """Test huge finite amounts total to infinity instead of raising."""
        records = [
            make_record(ExpenseCategory.BILLS, 1e308),
            make_record(ExpenseCategory.BILLS, 1e308),
        ]

        overview = summarize(records, 1000, date(2026, 6, 1))

        assert overview.total_spent == float("inf")
        assert overview.remaining == 0
        assert overview.overall_progress == 1.0
        [bills] = overview.categories
        assert bills.spent == float("inf")
        assert bills.progress == 1.0


class TestBudgetConfig:
    """Tests for the persisted monthly budget."""

    def test_defaults_to_unset(self):
        config = BudgetConfig()
        assert config.total_budget == 0
        assert config.is_set is False

    def test_set_persists_once(self):
        storage = MagicMock(spec=BudgetConfigStorageInterface)
        config = BudgetConfig(storage=storage)

        assert config.set_total_budget(1000) == 1000

        assert config.is_set is True
        storage.save_total_budget.assert_called_once_with(1000.0)

    def test_negative_is_clamped(self):
        config = BudgetConfig()
        assert config.set_total_budget(-50) == 0
        assert config.is_set is False

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_is_rejected(self, value):
        storage = MagicMock(spec=BudgetConfigStorageInterface)
        config = BudgetConfig(storage=storage, total_budget=100)

        with pytest.raises(ValueError):
            config.set_total_budget(value)

        assert config.total_budget == 100
        storage.save_total_budget.assert_not_called()

    def test_save_failure_is_swallowed(self):
        """Test a failing write is logged and the value kept."""
        audit_storage = InMemoryAuditStorage()
        storage = MagicMock(spec=BudgetConfigStorageInterface)
        storage.save_total_budget.side_effect = StorageError("offline")
        config = BudgetConfig(storage=storage, audit_logger=AuditLogger(audit_storage))

        config.set_total_budget(750)

        assert config.total_budget == 750
        event_types = [e.event_type for e in audit_storage.get_recent_events()]
        assert AuditEventType.BUDGET_SAVE_FAILED in event_types

    def test_unexpected_save_error_is_swallowed(self):
        audit_storage = InMemoryAuditStorage()
        storage = MagicMock(spec=BudgetConfigStorageInterface)
        storage.save_total_budget.side_effect = RuntimeError("backend bug")
        config = BudgetConfig(storage=storage, audit_logger=AuditLogger(audit_storage))

        assert config.set_total_budget(300) == 300
        assert config.total_budget == 300
        event_types = [e.event_type for e in audit_storage.get_recent_events()]
        assert AuditEventType.BUDGET_SAVE_FAILED in event_types

    def test_load(self):
        storage = InMemoryStorage()
        BudgetConfig(storage=storage).set_total_budget(1200)

        assert BudgetConfig.load(storage).total_budget == 1200


class TestBudgetAggregator:
    """Tests for the live budget view."""

    @pytest.fixture
    def ledger(self):
        return Ledger()

    def test_reads_current_state(self, ledger):
        """Test figures follow the ledger and budget without caching."""
        config = BudgetConfig(total_budget=1000)
        aggregator = BudgetAggregator(ledger, config, today=lambda: date(2026, 3, 20))

        assert aggregator.overall_progress() == 0
        assert aggregator.remaining() == 1000

        ledger.add(make_record(ExpenseCategory.BILLS, 250))
        config.set_total_budget(500)

        assert aggregator.total_spent() == 250
        assert aggregator.overall_progress() == 0.5
        assert aggregator.remaining() == 250
        assert aggregator.days_left_in_month() == 11

    def test_overview(self, ledger):
        ledger.add(make_record(ExpenseCategory.BILLS, 400))
        ledger.add(make_record(ExpenseCategory.GROCERIES, 200))
        aggregator = BudgetAggregator(
            ledger,
            BudgetConfig(total_budget=600),
            today=lambda: date(2026, 2, 28),
        )

        overview = aggregator.overview()

        assert overview.total_spent == 600
        assert overview.remaining == 0
        assert overview.is_over_budget is True
        assert overview.days_left_in_month == 0
        assert [s.is_over for s in overview.categories] == [True, False]

    def test_overview_with_explicit_day(self, ledger):
        aggregator = BudgetAggregator(ledger, BudgetConfig(), today=lambda: date(2026, 1, 1))
        assert aggregator.overview(date(2026, 1, 30)).days_left_in_month == 1

    def test_grouping_policy(self, ledger):
        ledger.add(make_record(ExpenseCategory.OTHER, 10, custom_label="Gift"))
        ledger.add(make_record(ExpenseCategory.OTHER, 10, custom_label="Pets"))

        by_category = BudgetAggregator(ledger, BudgetConfig())
        by_label = BudgetAggregator(
            ledger, BudgetConfig(), grouping=CategoryGrouping.DISPLAY_LABEL
        )

        assert by_category.grouping == CategoryGrouping.CATEGORY
        assert len(by_category.category_breakdown()) == 1
        assert len(by_label.category_breakdown()) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
