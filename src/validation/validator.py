"""
Transaction Input Validation

DESIGN DECISION: Validation works on the raw text the user typed,
before anything is converted to a Transaction.

- validate_amount / validate_description are pure functions.
  They never touch UI state, storage or configuration, so screens
  can call them on every keystroke.
- TransactionValidator bundles them for a whole form and builds
  the Transaction once every field passes.

IMPORTANT: Validation NEVER silently fixes input.
It reports the first problem per field for the user to correct.
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from src.models.state import NewTransactionState
from src.models.transaction import Transaction, UserSession


MIN_DESCRIPTION_LENGTH = 3
MAX_DESCRIPTION_LENGTH = 500

# Plain ASCII decimal, optional sign and exponent. No digit separators.
AMOUNT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class ValidationCode(str, Enum):
    """Why a field was rejected."""
    EMPTY_AMOUNT = "empty_amount"
    INVALID_AMOUNT = "invalid_amount"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    EMPTY_DESCRIPTION = "empty_description"
    TOO_SHORT_DESCRIPTION = "too_short_description"
    TOO_LONG_DESCRIPTION = "too_long_description"


class ValidationIssue(BaseModel):
    """A single user-correctable input problem."""

    field: str = Field(
        ...,
        description="Form field with the issue"
    )
    code: ValidationCode
    message: str = Field(
        ...,
        description="Message shown under the field"
    )


class TransactionValidationError(Exception):
    """Raised when a draft transaction cannot be built from the form."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues))


def parse_amount(text: str) -> Optional[Decimal]:
    """Parse user input as a finite decimal, or None if it is not a number."""
    if not isinstance(text, str) or not AMOUNT_PATTERN.fullmatch(text.strip()):
        return None
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def validate_amount(text: str) -> Optional[ValidationIssue]:
    """
    Check an amount as typed.

    Returns None when the amount is usable.
    """
    if not text:
        return ValidationIssue(
            field="amount",
            code=ValidationCode.EMPTY_AMOUNT,
            message="Amount is required",
        )

    value = parse_amount(text)
    if value is None:
        return ValidationIssue(
            field="amount",
            code=ValidationCode.INVALID_AMOUNT,
            message="Invalid amount",
        )

    if value <= 0:
        return ValidationIssue(
            field="amount",
            code=ValidationCode.NON_POSITIVE_AMOUNT,
            message="Amount must be greater than 0",
        )

    return None


def validate_description(
    text: str,
    min_length: int = MIN_DESCRIPTION_LENGTH,
    max_length: int = MAX_DESCRIPTION_LENGTH,
) -> Optional[ValidationIssue]:
    """
    Check a description as typed. Returns None when it is usable.

    Length is measured on the text without surrounding whitespace,
    which is what gets stored.
    """
    text = (text or "").strip()
    if not text:
        return ValidationIssue(
            field="description",
            code=ValidationCode.EMPTY_DESCRIPTION,
            message="Description is required",
        )

    if len(text) < min_length:
        return ValidationIssue(
            field="description",
            code=ValidationCode.TOO_SHORT_DESCRIPTION,
            message=f"Description must be at least {min_length} characters",
        )

    if len(text) > max_length:
        return ValidationIssue(
            field="description",
            code=ValidationCode.TOO_LONG_DESCRIPTION,
            message=f"Description must be at most {max_length} characters",
        )

    return None


class TransactionValidator:
    """
    Validates the add-transaction form as a whole.

    Holds only the description length threshold, so it is safe
    to share between screens.
    """

    def __init__(self, min_description_length: int = MIN_DESCRIPTION_LENGTH):
        self._min_description_length = min_description_length

    def validate_amount(self, text: str) -> Optional[ValidationIssue]:
        return validate_amount(text)

    def validate_description(self, text: str) -> Optional[ValidationIssue]:
        return validate_description(text, self._min_description_length)

    def validate(self, draft: NewTransactionState) -> list[ValidationIssue]:
        """Run every field check and collect the failures."""
        issues = []

        amount_issue = self.validate_amount(draft.amount)
        if amount_issue:
            issues.append(amount_issue)

        description_issue = self.validate_description(draft.description)
        if description_issue:
            issues.append(description_issue)

        return issues

    def build_transaction(
        self,
        draft: NewTransactionState,
        session: UserSession,
    ) -> Transaction:
        """
        Convert a valid form into a Transaction owned by the session user.

        The returned Transaction has no id yet; the repository assigns it.

        Raises:
            TransactionValidationError: If any field fails validation
        """
        issues = self.validate(draft)
        if issues:
            raise TransactionValidationError(issues)

        return Transaction(
            amount=parse_amount(draft.amount),
            type=draft.type,
            category=draft.category.display_name,
            description=draft.description,
            timestamp=draft.timestamp,
            owner_id=session.owner_id,
        )

    @staticmethod
    def issues_to_dicts(issues: list[ValidationIssue]) -> list[dict]:
        """Flatten issues for audit logging."""
        return [
            {"field": i.field, "code": i.code.value, "message": i.message}
            for i in issues
        ]
