"""
Core Data Models for Finanzas

These models define the schemas for every transaction that enters,
leaves or is persisted by the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the exact document shape kept in storage and backups

DESIGN DECISION: Transactions are frozen. An edit produces a new
record, so a snapshot handed to the query engine can never change
underneath it.
"""

from datetime import date as calendar_date, datetime, timezone, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class Category(str, Enum):
    """
    Supported transaction categories.

    DESIGN DECISION: Declaration order is significant. It is the
    deterministic order used for breakdowns and for breaking ties
    between categories with equal totals.
    """
    FOOD = "food"
    TRANSPORT = "transport"
    UTILITIES = "utilities"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    HEALTH = "health"
    SALARY = "salary"
    OTHER = "other"


CATEGORY_ORDER: tuple[Category, ...] = tuple(Category)

CATEGORY_LABELS: dict[Category, str] = {
    Category.FOOD: "Comida",
    Category.TRANSPORT: "Transporte",
    Category.UTILITIES: "Servicios",
    Category.ENTERTAINMENT: "Entretenimiento",
    Category.SHOPPING: "Compras",
    Category.HEALTH: "Salud",
    Category.SALARY: "Salario",
    Category.OTHER: "Otro",
}

MONTH_NAMES: tuple[str, ...] = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def month_label(year: int, month: int) -> str:
    """Long month label, e.g. ``enero de 2024`` (month is 1-12)."""
    return f"{MONTH_NAMES[month - 1]} de {year}"


def category_label(category: Optional[Category]) -> str:
    """Display name for a category; 'Ninguna' when there is none."""
    if category is None:
        return "Ninguna"
    return CATEGORY_LABELS.get(category, category.value)


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(BaseModel):
    """
    A single income or expense record.

    Unknown categories coming from persisted or imported data fall back
    to ``other``. The mutation validator is stricter and rejects them
    before a record is ever built from user input.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(
        ...,
        ge=0,
        description="Unique id; larger means more recent"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount as entered, always positive"
    )
    category: Category = Field(
        default=Category.OTHER,
        description="Spending category"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="Free text supplied by the user"
    )
    date: datetime = Field(
        default_factory=_utcnow,
        description="When the transaction happened"
    )

    @field_validator('category', mode='before')
    @classmethod
    def fallback_unknown_category(cls, v: Any) -> Any:
        """Map values outside the enum to ``other``."""
        if isinstance(v, Category):
            return v
        try:
            return Category(v)
        except ValueError:
            return Category.OTHER

    @field_validator('description', mode='before')
    @classmethod
    def none_description_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, amount: Decimal) -> Union[int, float, str]:
        """
        Write amounts as JSON numbers when that is lossless.

        Integral amounts become ints. Fractions become floats only if
        the float prints back to the same decimal; anything more precise
        is written as a decimal string so reloading never changes it.
        """
        if amount == amount.to_integral_value():
            return int(amount)
        as_float = float(amount)
        if Decimal(repr(as_float)) == amount:
            return as_float
        return str(amount)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    def local_date(self, tz: Optional[tzinfo] = None) -> calendar_date:
        """
        Calendar date of the transaction in ``tz``.

        Naive datetimes are taken as local wall time already. With
        ``tz`` None, aware datetimes are converted to the system zone.
        """
        if self.date.tzinfo is None:
            return self.date.date()
        return self.date.astimezone(tz).date()

    def to_storage_dict(self) -> dict:
        """Convert to the JSON-compatible dict kept in storage."""
        return self.model_dump(mode="json")


class TransactionDocument(BaseModel):
    """
    The persisted document: ``{"transactions": [...]}``.

    Same shape for the storage slot and for backup files.
    """
    model_config = ConfigDict(extra="ignore")

    transactions: list[Transaction] = Field(
        default_factory=list,
        description="All transactions in insertion order"
    )

    def to_storage_dict(self) -> dict:
        return {"transactions": [t.to_storage_dict() for t in self.transactions]}
