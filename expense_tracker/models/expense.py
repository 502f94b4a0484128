"""
Core Data Models for Expense Tracker

These models define the strict schemas for expense data.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage with stable field names
4. Stay immutable once an expense is recorded

DESIGN DECISION: Amounts are plain floats. The core is currency-agnostic;
formatting with a currency code is a presentation concern.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    `OTHER` may carry a user-supplied label on the record itself.
    """
    BILLS = "bills"
    ELECTRICITY = "electricity"
    INTERNET = "internet"
    GROCERIES = "groceries"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    DINING = "dining"
    SUBSCRIPTIONS = "subscriptions"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def icon(self) -> str:
        return _ICONS[self]


_DISPLAY_NAMES = {
    ExpenseCategory.BILLS: "Bills",
    ExpenseCategory.ELECTRICITY: "Electricity",
    ExpenseCategory.INTERNET: "Internet",
    ExpenseCategory.GROCERIES: "Groceries",
    ExpenseCategory.TRANSPORT: "Transport",
    ExpenseCategory.ENTERTAINMENT: "Entertainment",
    ExpenseCategory.DINING: "Dining",
    ExpenseCategory.SUBSCRIPTIONS: "Subscriptions",
    ExpenseCategory.OTHER: "Other",
}

_ICONS = {
    ExpenseCategory.BILLS: "doc.text",
    ExpenseCategory.ELECTRICITY: "bolt.fill",
    ExpenseCategory.INTERNET: "wifi",
    ExpenseCategory.GROCERIES: "cart.fill",
    ExpenseCategory.TRANSPORT: "car.fill",
    ExpenseCategory.ENTERTAINMENT: "gamecontroller.fill",
    ExpenseCategory.DINING: "fork.knife",
    ExpenseCategory.SUBSCRIPTIONS: "creditcard.fill",
    ExpenseCategory.OTHER: "tag",
}

# Icons a user may pick to override the category default
AVAILABLE_ICONS = list(_ICONS.values())


class ValidationErrorKind(str, Enum):
    """Why a candidate expense was refused."""
    EMPTY_NAME = "empty_name"
    INVALID_AMOUNT = "invalid_amount"
    EXCEEDS_LIMIT = "exceeds_limit"


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    A recorded expense.

    CRITICAL: Records are immutable. Editing an expense means removing it
    and adding a new one.

    Field aliases are the stable names used by every storage backend.
    They must not change without a migration.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique record identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    category: ExpenseCategory = Field(
        ...,
        alias="type",
        description="Expense category"
    )
    custom_label: Optional[str] = Field(
        default=None,
        alias="customTypeLabel",
        description="User label, only kept for the 'other' category"
    )
    amount: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Amount spent (currency-agnostic)"
    )
    reminder_at: Optional[datetime] = Field(
        default=None,
        alias="reminderDate",
        description="When to remind the user about this expense"
    )
    icon: str = Field(
        default="",
        validate_default=True,
        description="Icon identifier, defaults to the category icon"
    )

    @field_validator('custom_label')
    @classmethod
    def drop_label_unless_other(
        cls,
        v: Optional[str],
        info: ValidationInfo,
    ) -> Optional[str]:
        """A custom label only means something for 'other' expenses."""
        if not v:
            return None
        if info.data.get("category") != ExpenseCategory.OTHER:
            return None
        return v

    @field_validator('icon')
    @classmethod
    def default_icon(cls, v: str, info: ValidationInfo) -> str:
        if v:
            return v
        category = info.data.get("category")
        return category.icon if category else v

    @property
    def display_type(self) -> str:
        """Label shown next to the expense in lists."""
        if self.category == ExpenseCategory.OTHER and self.custom_label:
            return self.custom_label
        return self.category.display_name


def total_amount(amounts: Iterable[float]) -> float:
    """
    Correctly rounded sum of `amounts`, independent of their order.

    Finite amounts whose sum exceeds the float range total to infinity.
    """
    try:
        return math.fsum(amounts)
    except OverflowError:
        return float("inf")


class ExpenseCandidate(BaseModel):
    """
    Raw input from the add-expense form.

    CRITICAL: This is UNVERIFIED data, exactly as typed.
    It MUST go through validation before it becomes an ExpenseRecord.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    amount: str = ""
    category: ExpenseCategory = ExpenseCategory.BILLS
    custom_label: str = ""
    reminder_at: Optional[datetime] = None
    icon: Optional[str] = None


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    kind: ValidationErrorKind = Field(
        ...,
        description="Which rule was broken"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a candidate expense.

    `is_valid` answers "is this a well-formed record"; `can_submit`
    additionally applies the per-entry limit.
    """

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    is_valid: bool = Field(
        ...,
        description="Can a record be built from the candidate?"
    )
    can_submit: bool = Field(
        ...,
        description="Is the submit action enabled?"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    record: Optional[ExpenseRecord] = Field(
        default=None,
        description="The record built from the candidate, when valid"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def error_kinds(self) -> list[ValidationErrorKind]:
        return [issue.kind for issue in self.issues]
