"""Input validation package."""

from finanzas.validation.validator import (
    EDITABLE_FIELDS,
    TransactionValidator,
    ValidationError,
    ValidationIssue,
    parse_amount,
)

__all__ = [
    "EDITABLE_FIELDS",
    "TransactionValidator",
    "ValidationError",
    "ValidationIssue",
    "parse_amount",
]
