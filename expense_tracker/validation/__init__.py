"""Expense entry validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidator,
    ValidationError,
    build_record,
    can_submit,
    check_entry_limit,
    ensure_well_formed,
    parse_amount,
)

__all__ = [
    "ExpenseValidator",
    "ValidationError",
    "build_record",
    "can_submit",
    "check_entry_limit",
    "ensure_well_formed",
    "parse_amount",
]
