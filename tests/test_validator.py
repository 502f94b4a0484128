"""Tests for expense entry validation."""

import pytest
from datetime import datetime

from expense_tracker.models.expense import (
    ExpenseCandidate,
    ExpenseCategory,
    ExpenseRecord,
    ValidationErrorKind,
)
from expense_tracker.validation import (
    ExpenseValidator,
    ValidationError,
    build_record,
    can_submit,
    check_entry_limit,
    ensure_well_formed,
    parse_amount,
)


class TestParseAmount:
    """Tests for typed amount parsing."""

    @pytest.mark.parametrize("raw, expected", [
        ("12.50", 12.5),
        ("0", 0.0),
        ("  42  ", 42.0),
        ("3.", 3.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("+7", 7.0),
    ])
    def test_accepts_decimal_literals(self, raw, expected):
        """Test that plain decimal literals parse."""
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [
        "", "   ", "abc", "12,50", "1_000", "0x10", "inf", "-inf",
        "nan", "Infinity", "1.2.3", "$5", "1e999",
    ])
    def test_rejects_everything_else(self, raw):
        """Test that non-numeric and non-finite input is refused."""
        with pytest.raises(ValidationError) as exc_info:
            parse_amount(raw)
        assert exc_info.value.kind == ValidationErrorKind.INVALID_AMOUNT

    def test_negative_literal_parses(self):
        """Test that the sign is parsed; negativity is rejected later."""
        assert parse_amount("-5") == -5.0


class TestBuildRecord:
    """Tests for turning form input into a record."""

    def test_builds_record(self):
        """Test a valid candidate becomes a record."""
        reminder = datetime(2030, 1, 1, 9, 0)
        record = build_record(ExpenseCandidate(
            name="Coffee",
            amount="3.50",
            category=ExpenseCategory.DINING,
            reminder_at=reminder,
        ))
        assert isinstance(record, ExpenseRecord)
        assert record.name == "Coffee"
        assert record.amount == 3.5
        assert record.category == ExpenseCategory.DINING
        assert record.reminder_at == reminder
        assert record.icon == ExpenseCategory.DINING.icon

    def test_empty_name(self):
        """Test an empty name is refused."""
        with pytest.raises(ValidationError) as exc_info:
            build_record(ExpenseCandidate(name="", amount="12.50"))
        assert exc_info.value.kind == ValidationErrorKind.EMPTY_NAME

    def test_whitespace_name(self):
        """Test a whitespace-only name counts as empty."""
        with pytest.raises(ValidationError) as exc_info:
            build_record(ExpenseCandidate(name="   ", amount="12.50"))
        assert exc_info.value.kind == ValidationErrorKind.EMPTY_NAME

    def test_unparsable_amount(self):
        """Test a non-numeric amount is refused."""
        with pytest.raises(ValidationError) as exc_info:
            build_record(ExpenseCandidate(name="Coffee", amount="abc"))
        assert exc_info.value.kind == ValidationErrorKind.INVALID_AMOUNT

    def test_negative_amount(self):
        """Test a negative amount is refused."""
        with pytest.raises(ValidationError) as exc_info:
            build_record(ExpenseCandidate(name="Refund", amount="-5"))
        assert exc_info.value.kind == ValidationErrorKind.INVALID_AMOUNT

    def test_name_checked_before_amount(self):
        """Test the name error wins when both fields are bad."""
        with pytest.raises(ValidationError) as exc_info:
            build_record(ExpenseCandidate(name="", amount="abc"))
        assert exc_info.value.kind == ValidationErrorKind.EMPTY_NAME

    def test_custom_label_carried_for_other(self):
        """Test the custom label reaches the record."""
        record = build_record(ExpenseCandidate(
            name="Flowers",
            amount="50",
            category=ExpenseCategory.OTHER,
            custom_label="Gift",
        ))
        assert record.custom_label == "Gift"

    def test_empty_custom_label_becomes_none(self):
        """Test an empty label is not stored."""
        record = build_record(ExpenseCandidate(
            name="Misc",
            amount="1",
            category=ExpenseCategory.OTHER,
        ))
        assert record.custom_label is None

    def test_past_reminder_is_allowed(self):
        """Test reminder timestamps are not validated."""
        record = build_record(ExpenseCandidate(
            name="Old",
            amount="1",
            reminder_at=datetime(2000, 1, 1),
        ))
        assert record.reminder_at == datetime(2000, 1, 1)


class TestEntryLimit:
    """Tests for the per-entry ceiling."""

    def test_within_limit(self):
        check_entry_limit(100, 100)

    def test_over_limit(self):
        """Test amounts above the limit are refused."""
        with pytest.raises(ValidationError) as exc_info:
            check_entry_limit(100.01, 100)
        assert exc_info.value.kind == ValidationErrorKind.EXCEEDS_LIMIT

    @pytest.mark.parametrize("limit", [None, 0, -5])
    def test_unset_limit(self, limit):
        """Test that no limit, or a non-positive one, disables the check."""
        check_entry_limit(1_000_000, limit)


class TestCanSubmit:
    """Tests for the submit gate."""

    def test_valid_candidate(self):
        assert can_submit(ExpenseCandidate(name="Coffee", amount="3")) is True

    def test_invalid_candidate(self):
        assert can_submit(ExpenseCandidate(name="", amount="3")) is False
        assert can_submit(ExpenseCandidate(name="Coffee", amount="abc")) is False

    def test_limit_blocks_submit(self):
        """Test the limit disables submit for otherwise valid input."""
        candidate = ExpenseCandidate(name="TV", amount="500")
        assert can_submit(candidate, limit=100) is False
        assert can_submit(candidate, limit=1000) is True

    def test_limit_does_not_stop_record_construction(self):
        """Test that a record can still be built above the limit."""
        candidate = ExpenseCandidate(name="TV", amount="500")
        assert build_record(candidate).amount == 500


class TestEnsureWellFormed:
    """Tests for the ledger's guard."""

    def test_valid_record(self):
        record = ExpenseRecord(name="Rent", category=ExpenseCategory.BILLS, amount=900)
        ensure_well_formed(record)

    def test_constructed_with_empty_name(self):
        """Test records built without validation are still checked."""
        record = ExpenseRecord.model_construct(
            name="",
            category=ExpenseCategory.BILLS,
            amount=1.0,
        )
        with pytest.raises(ValidationError) as exc_info:
            ensure_well_formed(record)
        assert exc_info.value.kind == ValidationErrorKind.EMPTY_NAME

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), -1.0])
    def test_constructed_with_bad_amount(self, amount):
        record = ExpenseRecord.model_construct(
            name="Bad",
            category=ExpenseCategory.BILLS,
            amount=amount,
        )
        with pytest.raises(ValidationError) as exc_info:
            ensure_well_formed(record)
        assert exc_info.value.kind == ValidationErrorKind.INVALID_AMOUNT

    def test_not_a_record(self):
        with pytest.raises(ValidationError):
            ensure_well_formed({"name": "Rent", "amount": 900})


class TestExpenseValidator:
    """Tests for the issue-collecting validator."""

    def test_valid_candidate(self):
        """Test a clean candidate produces a record and no issues."""
        validator = ExpenseValidator(entry_limit=0)
        result = validator.validate(ExpenseCandidate(name="Coffee", amount="3.50"))

        assert result.is_valid is True
        assert result.can_submit is True
        assert result.issues == []
        assert result.record.amount == 3.5

    def test_collects_every_issue(self):
        """Test both field problems are reported together."""
        validator = ExpenseValidator(entry_limit=0)
        result = validator.validate(ExpenseCandidate(name="", amount="abc"))

        assert result.is_valid is False
        assert result.can_submit is False
        assert result.record is None
        assert result.error_kinds == [
            ValidationErrorKind.EMPTY_NAME,
            ValidationErrorKind.INVALID_AMOUNT,
        ]

    def test_over_limit_is_valid_but_not_submittable(self):
        """Test the limit only affects can_submit."""
        validator = ExpenseValidator(entry_limit=100)
        result = validator.validate(ExpenseCandidate(name="TV", amount="500"))

        assert result.is_valid is True
        assert result.can_submit is False
        assert result.error_kinds == [ValidationErrorKind.EXCEEDS_LIMIT]

    def test_default_limit_from_settings(self, monkeypatch):
        """Test the limit is read from configuration when not given."""
        monkeypatch.setenv("EXPENSE_TRACKER_ENTRY_LIMIT", "250")
        validator = ExpenseValidator()
        assert validator.entry_limit == 250

    def test_summary_ready(self):
        validator = ExpenseValidator(entry_limit=0)
        result = validator.validate(ExpenseCandidate(name="Coffee", amount="3"))
        assert "Ready" in validator.get_user_friendly_summary(result)

    def test_summary_lists_issues(self):
        """Test the summary mentions every issue."""
        validator = ExpenseValidator(entry_limit=0)
        result = validator.validate(ExpenseCandidate(name="", amount="abc"))
        summary = validator.get_user_friendly_summary(result)

        assert "description" in summary
        assert "'abc' is not a valid amount" in summary


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
