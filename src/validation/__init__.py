"""Input validation package."""

from src.validation.validator import (
    MAX_DESCRIPTION_LENGTH,
    MIN_DESCRIPTION_LENGTH,
    TransactionValidationError,
    TransactionValidator,
    ValidationCode,
    ValidationIssue,
    parse_amount,
    validate_amount,
    validate_description,
)

__all__ = [
    "MAX_DESCRIPTION_LENGTH",
    "MIN_DESCRIPTION_LENGTH",
    "TransactionValidationError",
    "TransactionValidator",
    "ValidationCode",
    "ValidationIssue",
    "parse_amount",
    "validate_amount",
    "validate_description",
]
