"""
Expense Entry Validation

DESIGN DECISION: Two separate questions are asked of a candidate entry:

1. IS IT WELL-FORMED?
   - Name present (after trimming whitespace)
   - Amount is a finite, non-negative decimal number
   - Answered by build_record(), which raises ValidationError

2. MAY IT BE SUBMITTED NOW?
   - Everything in (1)
   - Amount within the per-entry limit, when one is configured
   - Answered by can_submit(), which only returns a bool

The limit is a self-imposed ceiling the form enforces by disabling the
submit action; it is not a property of a valid record. Keeping the two
apart means a record over the limit can still be loaded from storage.

IMPORTANT: Validation NEVER silently fixes amounts or names.
It reports them for the user to correct.
"""

import math
import re
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from expense_tracker.config import get_settings
from expense_tracker.models.expense import (
    ExpenseCandidate,
    ExpenseRecord,
    ValidationErrorKind,
    ValidationIssue,
    ValidationResult,
)


# Plain decimal literal: sign, digits, optional fraction, optional exponent
_DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

_MESSAGES = {
    ValidationErrorKind.EMPTY_NAME: "Please enter a description for the expense",
    ValidationErrorKind.INVALID_AMOUNT: "Amount must be a number like 12.50",
    ValidationErrorKind.EXCEEDS_LIMIT: "Amount is above your per-entry limit",
}


class ValidationError(Exception):
    """A candidate expense broke one of the entry rules."""

    def __init__(self, kind: ValidationErrorKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or _MESSAGES[kind])


def parse_amount(raw: str) -> float:
    """
    Parse a typed amount.

    Surrounding whitespace is ignored. Infinity, NaN, hex literals and
    digit separators are rejected even though float() accepts them.

    Raises:
        ValidationError: INVALID_AMOUNT if `raw` is not a finite decimal
    """
    text = (raw or "").strip()
    if not _DECIMAL_PATTERN.match(text):
        raise ValidationError(
            ValidationErrorKind.INVALID_AMOUNT,
            f"'{raw}' is not a valid amount",
        )

    value = float(text)
    if not math.isfinite(value):
        raise ValidationError(
            ValidationErrorKind.INVALID_AMOUNT,
            f"'{raw}' is too large to be an amount",
        )
    return value


def check_entry_limit(amount: float, limit: Optional[float]) -> None:
    """
    Enforce the per-entry ceiling.

    A limit of None or <= 0 means no ceiling.

    Raises:
        ValidationError: EXCEEDS_LIMIT if amount > limit
    """
    if limit is None or limit <= 0:
        return
    if amount > limit:
        raise ValidationError(
            ValidationErrorKind.EXCEEDS_LIMIT,
            f"Amount {amount:,.2f} is above your per-entry limit of {limit:,.2f}",
        )


def build_record(candidate: ExpenseCandidate) -> ExpenseRecord:
    """
    Turn form input into a record.

    Raises:
        ValidationError: EMPTY_NAME or INVALID_AMOUNT
    """
    if not candidate.name.strip():
        raise ValidationError(ValidationErrorKind.EMPTY_NAME)

    amount = parse_amount(candidate.amount)
    if amount < 0:
        raise ValidationError(
            ValidationErrorKind.INVALID_AMOUNT,
            "Amount cannot be negative",
        )

    try:
        return ExpenseRecord(
            name=candidate.name,
            category=candidate.category,
            custom_label=candidate.custom_label or None,
            amount=amount,
            reminder_at=candidate.reminder_at,
            icon=candidate.icon or "",
        )
    except PydanticValidationError as e:
        raise ValidationError(ValidationErrorKind.INVALID_AMOUNT, str(e)) from e


def can_submit(candidate: ExpenseCandidate, limit: Optional[float] = None) -> bool:
    """Should the submit action be enabled for this input?"""
    try:
        record = build_record(candidate)
        check_entry_limit(record.amount, limit)
    except ValidationError:
        return False
    return True


def ensure_well_formed(record: ExpenseRecord) -> None:
    """
    Re-check a record before it enters the ledger.

    Records built through the model are always valid; this guards
    against ones created with model_construct() or other shortcuts.

    Raises:
        ValidationError: EMPTY_NAME or INVALID_AMOUNT
    """
    if not isinstance(record, ExpenseRecord):
        raise ValidationError(
            ValidationErrorKind.INVALID_AMOUNT,
            f"Expected an ExpenseRecord, got {type(record).__name__}",
        )

    name = getattr(record, "name", None)
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(ValidationErrorKind.EMPTY_NAME)

    amount = getattr(record, "amount", None)
    if (
        isinstance(amount, bool)
        or not isinstance(amount, (int, float))
        or not math.isfinite(amount)
        or amount < 0
    ):
        raise ValidationError(
            ValidationErrorKind.INVALID_AMOUNT,
            f"Record amount {amount!r} is not a finite, non-negative number",
        )


class ExpenseValidator:
    """
    Validates add-expense form input and reports every issue at once.

    build_record() stops at the first problem; the form wants to show
    all of them, so this class collects issues instead.
    """

    def __init__(self, entry_limit: Optional[float] = None):
        """
        Initialize validator.

        Args:
            entry_limit: Per-entry ceiling. If None, the configured
                         limit is used (0 disables the check).
        """
        if entry_limit is None:
            entry_limit = get_settings().app.entry_limit
        self._entry_limit = entry_limit

    @property
    def entry_limit(self) -> float:
        return self._entry_limit

    def validate(self, candidate: ExpenseCandidate) -> ValidationResult:
        issues = []

        if not candidate.name.strip():
            issues.append(ValidationIssue(
                field="name",
                kind=ValidationErrorKind.EMPTY_NAME,
                message=_MESSAGES[ValidationErrorKind.EMPTY_NAME],
                suggested_fix="e.g. Coffee",
            ))

        amount = None
        try:
            amount = parse_amount(candidate.amount)
        except ValidationError as e:
            issues.append(ValidationIssue(
                field="amount",
                kind=e.kind,
                message=str(e),
                suggested_fix="Use digits and an optional decimal point",
            ))
        else:
            if amount < 0:
                issues.append(ValidationIssue(
                    field="amount",
                    kind=ValidationErrorKind.INVALID_AMOUNT,
                    message="Amount cannot be negative",
                ))

        record = None
        if not issues:
            record = build_record(candidate)

        is_valid = record is not None

        if is_valid:
            try:
                check_entry_limit(record.amount, self._entry_limit)
            except ValidationError as e:
                issues.append(ValidationIssue(
                    field="amount",
                    kind=e.kind,
                    message=str(e),
                    suggested_fix="Lower the amount or raise your limit in settings",
                ))

        return ValidationResult(
            is_valid=is_valid,
            can_submit=is_valid and not issues,
            issues=issues,
            record=record,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short text shown under the add-expense form."""
        if result.can_submit:
            return "✅ Ready to add."

        lines = ["❌ Please fix the following:"]
        for issue in result.issues:
            lines.append(f"   • {issue.message}")
            if issue.suggested_fix:
                lines.append(f"     💡 {issue.suggested_fix}")
        return "\n".join(lines)
