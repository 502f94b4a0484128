"""
Budget package.

Derived spending figures over the ledger, and the monthly budget they
are measured against.
"""

from expense_tracker.budget.aggregator import (
    BudgetAggregator,
    category_breakdown,
    days_left_in_month,
    overall_progress,
    remaining,
    summarize,
)
from expense_tracker.budget.config import BudgetConfig

__all__ = [
    "BudgetAggregator",
    "BudgetConfig",
    "category_breakdown",
    "days_left_in_month",
    "overall_progress",
    "remaining",
    "summarize",
]
