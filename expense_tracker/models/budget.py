"""
Budget Models for Expense Tracker

Everything here is DERIVED data. Summaries are recomputed from the
ledger and the configured total budget whenever either changes;
they are never stored or mutated on their own.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.expense import ExpenseCategory


class CategoryGrouping(str, Enum):
    """
    How records are grouped into budget categories.

    CATEGORY groups by the category tag, so every 'other' record lands in
    one "Other" group whatever its custom label. DISPLAY_LABEL groups by
    the label shown in the expense list, so each custom label is its own
    group.
    """
    CATEGORY = "category"
    DISPLAY_LABEL = "display_label"


class CategorySummary(BaseModel):
    """Spending against the default limit for one group of expenses."""
    model_config = ConfigDict(frozen=True)

    category: ExpenseCategory = Field(
        ...,
        description="Category tag of the group"
    )
    name: str = Field(
        ...,
        description="Display label of the group"
    )
    spent: float = Field(
        ...,
        ge=0,
        description="Sum of the group's amounts"
    )
    limit: float = Field(
        ...,
        ge=0,
        description="Default limit assigned to the group"
    )
    icon: str

    @property
    def progress(self) -> float:
        if self.limit <= 0:
            return 0.0
        return min(self.spent / self.limit, 1.0)

    @property
    def is_over(self) -> bool:
        return self.spent > self.limit

    @property
    def over_by(self) -> float:
        return max(self.spent - self.limit, 0.0)

    @property
    def remaining(self) -> float:
        return max(self.limit - self.spent, 0.0)


class BudgetOverview(BaseModel):
    """
    Monthly overview shown on the budget screen.

    Built in one pass from (ledger, total budget, today).
    """
    model_config = ConfigDict(frozen=True)

    total_budget: float = Field(ge=0)
    total_spent: float = Field(ge=0)
    remaining: float = Field(ge=0)
    overall_progress: float = Field(ge=0.0, le=1.0)
    days_left_in_month: int = Field(ge=0)
    categories: list[CategorySummary] = Field(default_factory=list)

    @property
    def is_over_budget(self) -> bool:
        return self.overall_progress >= 1.0
