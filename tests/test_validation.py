"""Tests for transaction input validation."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from src.models.state import NewTransactionState
from src.models.transaction import TransactionCategory, TransactionType, UserSession
from src.validation import (
    TransactionValidationError,
    TransactionValidator,
    ValidationCode,
    parse_amount,
    validate_amount,
    validate_description,
)


class TestValidateAmount:
    """Tests for amount checks."""

    def test_empty_amount(self):
        issue = validate_amount("")
        assert issue.code == ValidationCode.EMPTY_AMOUNT
        assert issue.message == "Amount is required"

    @pytest.mark.parametrize("text", ["abc", "1.2.3", "12a", "NaN", "Infinity", "-inf", "1_000", "\u0661\u0662", "1,000"])
    def test_invalid_amount(self, text):
        """Non-numbers, non-finite values, digit separators and non-ASCII digits are rejected."""
        issue = validate_amount(text)
        assert issue.code == ValidationCode.INVALID_AMOUNT
        assert issue.message == "Invalid amount"

    @pytest.mark.parametrize("text", ["0", "0.00", "-5"])
    def test_non_positive_amount(self, text):
        issue = validate_amount(text)
        assert issue.code == ValidationCode.NON_POSITIVE_AMOUNT
        assert issue.message == "Amount must be greater than 0"

    @pytest.mark.parametrize("text", ["0.01", "40", "1250.75", ".5", "1e3", " 12 "])
    def test_valid_amount(self, text):
        assert validate_amount(text) is None

    def test_parse_amount(self):
        assert parse_amount("40.50") == Decimal("40.50")
        assert parse_amount("nope") is None
        assert parse_amount("nan") is None


class TestValidateDescription:
    """Tests for description checks."""

    def test_empty_description(self):
        issue = validate_description("")
        assert issue.code == ValidationCode.EMPTY_DESCRIPTION
        assert issue.message == "Description is required"

    def test_too_short_description(self):
        issue = validate_description("ab")
        assert issue.code == ValidationCode.TOO_SHORT_DESCRIPTION
        assert issue.message == "Description must be at least 3 characters"

    def test_minimum_length_is_enough(self):
        assert validate_description("abc") is None

    def test_custom_minimum_length(self):
        issue = validate_description("abcd", min_length=5)
        assert issue.message == "Description must be at least 5 characters"

    def test_whitespace_only_description(self):
        issue = validate_description("   ")
        assert issue.code == ValidationCode.EMPTY_DESCRIPTION

    def test_length_ignores_surrounding_whitespace(self):
        issue = validate_description("  ab  ")
        assert issue.code == ValidationCode.TOO_SHORT_DESCRIPTION

    def test_too_long_description(self):
        issue = validate_description("x" * 501)
        assert issue.code == ValidationCode.TOO_LONG_DESCRIPTION
        assert issue.message == "Description must be at most 500 characters"

    def test_maximum_length_is_allowed(self):
        assert validate_description("x" * 500) is None


class TestTransactionValidator:
    """Tests for whole-form validation and Transaction building."""

    @pytest.fixture
    def validator(self):
        return TransactionValidator()

    def test_validate_collects_every_field(self, validator):
        """One issue per failing field."""
        issues = validator.validate(NewTransactionState(amount="", description="a"))
        assert {i.field for i in issues} == {"amount", "description"}

    def test_valid_form_has_no_issues(self, validator):
        form = NewTransactionState(amount="10", description="Coffee")
        assert validator.validate(form) == []

    def test_build_transaction(self, validator):
        """A valid form becomes an unsaved Transaction owned by the session user."""
        timestamp = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        form = NewTransactionState(
            amount="40.00",
            type=TransactionType.EXPENSE,
            category=TransactionCategory.FOOD,
            description="Groceries",
            timestamp=timestamp,
        )
        tx = validator.build_transaction(form, UserSession(owner_id="owner-1"))

        assert tx.id == ""
        assert tx.amount == Decimal("40.00")
        assert tx.category == "Food & Dining"
        assert tx.owner_id == "owner-1"
        assert tx.timestamp == timestamp

    def test_build_transaction_rejects_invalid_form(self, validator):
        form = NewTransactionState(amount="0", description="Groceries")
        with pytest.raises(TransactionValidationError) as exc_info:
            validator.build_transaction(form, UserSession(owner_id="owner-1"))

        assert [i.code for i in exc_info.value.issues] == [ValidationCode.NON_POSITIVE_AMOUNT]
        assert "Amount must be greater than 0" in str(exc_info.value)

    def test_issues_to_dicts(self, validator):
        issues = validator.validate(NewTransactionState(amount="x", description="Lunch"))
        assert TransactionValidator.issues_to_dicts(issues) == [
            {"field": "amount", "code": "invalid_amount", "message": "Invalid amount"}
        ]
