"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    AVAILABLE_ICONS,
    ExpenseCandidate,
    ExpenseCategory,
    ExpenseRecord,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
    total_amount,
)
from expense_tracker.models.budget import (
    BudgetOverview,
    CategoryGrouping,
    CategorySummary,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "AVAILABLE_ICONS",
    "ExpenseCandidate",
    "ExpenseCategory",
    "ExpenseRecord",
    "ValidationErrorKind",
    "ValidationIssue",
    "ValidationResult",
    "total_amount",
    # Budget models
    "BudgetOverview",
    "CategoryGrouping",
    "CategorySummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
