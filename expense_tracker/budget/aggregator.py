"""
Budget Aggregation

Pure functions from (records, total budget, today) to a BudgetOverview.
No I/O and no hidden state: the same inputs always give the same
overview, whatever order the records are in.

DESIGN DECISION: Per-category limits are not configurable. The monthly
budget is split evenly across the groups that actually appear in the
ledger, so a new kind of expense shrinks everyone else's share.
"""

import calendar
from datetime import date
from typing import Callable, Iterable, Optional

from expense_tracker.models.budget import (
    BudgetOverview,
    CategoryGrouping,
    CategorySummary,
)
from expense_tracker.models.expense import ExpenseRecord, total_amount


def overall_progress(total_spent: float, total_budget: float) -> float:
    """Share of the budget spent, capped at 1. 0 when no budget is set."""
    if total_budget <= 0:
        return 0.0
    return min(max(total_spent / total_budget, 0.0), 1.0)


def remaining(total_spent: float, total_budget: float) -> float:
    return max(total_budget - total_spent, 0.0)


def days_left_in_month(today: date) -> int:
    """Whole days after `today` until the end of its month."""
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    return max(days_in_month - today.day, 0)


def _group_key(record: ExpenseRecord, grouping: CategoryGrouping) -> str:
    if grouping == CategoryGrouping.DISPLAY_LABEL:
        return record.display_type
    return record.category.value


def category_breakdown(
    records: Iterable[ExpenseRecord],
    total_budget: float,
    grouping: CategoryGrouping = CategoryGrouping.CATEGORY,
) -> list[CategorySummary]:
    """
    Spending per group against an even share of the budget.

    Only groups present in `records` are returned, sorted by name.
    """
    amounts: dict[str, list[float]] = {}
    firsts: dict[str, ExpenseRecord] = {}
    for record in records:
        key = _group_key(record, grouping)
        amounts.setdefault(key, []).append(record.amount)
        firsts.setdefault(key, record)

    if not amounts:
        return []

    limit = total_budget / len(amounts) if total_budget > 0 else 0.0

    summaries = []
    for key, values in amounts.items():
        record = firsts[key]
        if grouping == CategoryGrouping.DISPLAY_LABEL:
            name = record.display_type
        else:
            name = record.category.display_name
        summaries.append(CategorySummary(
            category=record.category,
            name=name,
            spent=total_amount(values),
            limit=limit,
            icon=record.category.icon,
        ))

    summaries.sort(key=lambda s: (s.name, s.category.value))
    return summaries


def summarize(
    records: Iterable[ExpenseRecord],
    total_budget: float,
    today: date,
    grouping: CategoryGrouping = CategoryGrouping.CATEGORY,
) -> BudgetOverview:
    """Build the whole budget screen in one pass."""
    records = list(records)
    total_spent = total_amount(r.amount for r in records)
    return BudgetOverview(
        total_budget=total_budget,
        total_spent=total_spent,
        remaining=remaining(total_spent, total_budget),
        overall_progress=overall_progress(total_spent, total_budget),
        days_left_in_month=days_left_in_month(today),
        categories=category_breakdown(records, total_budget, grouping),
    )


class BudgetAggregator:
    """
    Budget view over a live ledger and budget config.

    Nothing is cached; every call reads the current state.
    """

    def __init__(
        self,
        ledger,
        budget_config,
        today: Optional[Callable[[], date]] = None,
        grouping: Optional[CategoryGrouping] = None,
    ):
        """
        Initialize aggregator.

        Args:
            ledger: The Ledger to summarize
            budget_config: Holds the monthly total budget
            today: Clock returning the local date; date.today if None
            grouping: Grouping policy; by category tag if None
        """
        self._ledger = ledger
        self._budget_config = budget_config
        self._today = today or date.today
        self._grouping = grouping or CategoryGrouping.CATEGORY

    @property
    def grouping(self) -> CategoryGrouping:
        return self._grouping

    def total_spent(self) -> float:
        return self._ledger.total()

    def overall_progress(self) -> float:
        return overall_progress(
            self._ledger.total(), self._budget_config.total_budget
        )

    def remaining(self) -> float:
        return remaining(self._ledger.total(), self._budget_config.total_budget)

    def days_left_in_month(self) -> int:
        return days_left_in_month(self._today())

    def category_breakdown(self) -> list[CategorySummary]:
        return category_breakdown(
            self._ledger.items(),
            self._budget_config.total_budget,
            self._grouping,
        )

    def overview(self, today: Optional[date] = None) -> BudgetOverview:
        return summarize(
            self._ledger.items(),
            self._budget_config.total_budget,
            today or self._today(),
            self._grouping,
        )
