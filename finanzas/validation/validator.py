"""
Transaction Input Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - FIELD CHECKS:
- Amount is numeric, finite and strictly positive
- Type and category are inside their enumerations (no fallback here,
  unlike records read back from storage)
- No unknown field names

STAGE 2 - MODEL CONSTRUCTION:
- The pydantic model enforces the remaining constraints (date format,
  description length)

IMPORTANT: Validation NEVER silently fixes input.
Every problem is reported as a ValidationIssue.
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from finanzas.models.transaction import Category, Transaction, TransactionType


EDITABLE_FIELDS = ("type", "amount", "description", "category", "date")


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_positive', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationError(ValueError):
    """Mutation input was rejected. ``issues`` lists every problem found."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues) or "Invalid transaction")

    def as_dicts(self) -> list[dict]:
        return [issue.model_dump() for issue in self.issues]


def parse_amount(value: Any) -> tuple[Optional[Decimal], Optional[ValidationIssue]]:
    """
    Parse a user-supplied amount.

    Returns (amount, None) on success or (None, issue) on failure.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, ValidationIssue(
            field="amount",
            issue_type="missing",
            message="Amount is required",
        )
    if isinstance(value, bool):
        return None, ValidationIssue(
            field="amount",
            issue_type="not_numeric",
            message=f"Amount must be a number, got {value!r}",
        )
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None, ValidationIssue(
            field="amount",
            issue_type="not_numeric",
            message=f"Amount must be a number, got {value!r}",
        )
    if not amount.is_finite():
        return None, ValidationIssue(
            field="amount",
            issue_type="not_finite",
            message="Amount must be a finite number",
        )
    if amount <= 0:
        return None, ValidationIssue(
            field="amount",
            issue_type="not_positive",
            message="Amount must be greater than zero",
        )
    return amount, None


class TransactionValidator:
    """Validates user input for new and edited transactions."""

    def _check_fields(self, fields: Mapping[str, Any]) -> tuple[dict, list[ValidationIssue]]:
        """
        Stage 1: field checks.

        Returns: (normalized_fields, list_of_issues)
        """
        issues = []
        normalized = dict(fields)

        for name in fields:
            if name not in EDITABLE_FIELDS and name != "id":
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="unknown_field",
                    message=f"Unknown field: {name}",
                ))

        amount, issue = parse_amount(fields.get("amount"))
        if issue:
            issues.append(issue)
        else:
            normalized["amount"] = amount

        raw_type = fields.get("type")
        try:
            normalized["type"] = TransactionType(raw_type)
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="unknown_type",
                message=f"Type must be one of {[t.value for t in TransactionType]}, got {raw_type!r}",
            ))

        raw_category = fields.get("category", Category.OTHER)
        try:
            normalized["category"] = Category(raw_category)
        except ValueError:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Category must be one of {[c.value for c in Category]}, got {raw_category!r}",
            ))

        description = fields.get("description", "")
        if description is None:
            normalized["description"] = ""
        elif not isinstance(description, str):
            issues.append(ValidationIssue(
                field="description",
                issue_type="invalid_type",
                message="Description must be text",
            ))

        return normalized, issues

    def _build_model(self, fields: Mapping[str, Any]) -> tuple[Optional[Transaction], list[ValidationIssue]]:
        """
        Stage 2: model construction.

        Returns: (transaction_or_none, list_of_issues)
        """
        try:
            return Transaction.model_validate(fields), []
        except PydanticValidationError as e:
            issues = []
            for err in e.errors():
                field = ".".join(str(p) for p in err["loc"]) or "transaction"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type=err["type"],
                    message=f"{field}: {err['msg']}",
                ))
            return None, issues

    def validate(self, fields: Mapping[str, Any]) -> Transaction:
        """
        Validate a complete set of transaction fields (``id`` included).

        Raises:
            ValidationError: With every issue found
        """
        normalized, issues = self._check_fields(fields)
        if issues:
            raise ValidationError(issues)

        if normalized.get("date") is None:
            normalized.pop("date", None)

        transaction, issues = self._build_model(normalized)
        if issues:
            raise ValidationError(issues)
        return transaction

    def get_user_friendly_summary(self, error: ValidationError) -> str:
        """Generate a user-friendly summary of a rejected input."""
        lines = ["❌ No se pudo guardar el movimiento:", ""]
        for issue in error.issues:
            lines.append(f"• {issue.message}")
        return "\n".join(lines)
