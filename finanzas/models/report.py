"""
Query and Report Models

Ephemeral value objects derived from a transaction snapshot.
None of these are ever persisted.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finanzas.models.transaction import (
    Category,
    Transaction,
    category_label,
    month_label,
)


class RangeKind(str, Enum):
    """Symbolic time windows understood by the query engine."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class DateRange(BaseModel):
    """
    Explicit calendar window, inclusive of both ends.

    ``end`` covers the whole day, through 23:59:59.999.
    """
    model_config = ConfigDict(frozen=True)

    start: date
    end: date


class MonthRef(BaseModel):
    """A calendar month (month is 1-12) with its display label."""
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1)
    month: int = Field(..., ge=1, le=12)
    label: str = ""

    @model_validator(mode='before')
    @classmethod
    def fill_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("label"):
            try:
                data = {**data, "label": month_label(int(data["year"]), int(data["month"]))}
            except (KeyError, TypeError, ValueError, IndexError):
                # Field validation reports the bad year/month
                pass
        return data

    @property
    def key(self) -> str:
        """Composite key, e.g. ``2024-03``."""
        return f"{self.year}-{self.month:02d}"

    @classmethod
    def from_key(cls, key: str) -> 'MonthRef':
        year, month = key.split("-")
        return cls(year=int(year), month=int(month))


class Totals(BaseModel):
    """Income and expense sums for a set of transactions."""
    model_config = ConfigDict(frozen=True)

    income: Decimal = Decimal(0)
    expense: Decimal = Decimal(0)

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


ADVICE_MESSAGES = {
    "surplus": "¡Superávit logrado! Buen mes para ahorrar.",
    "deficit": "Déficit detectado. Ajusta tus gastos el próximo mes.",
    "break_even": "Equilibrio exacto. Intenta reducir gastos variables.",
}


class Advice(str, Enum):
    """Three-way classification of a balance by its sign."""
    SURPLUS = "surplus"
    DEFICIT = "deficit"
    BREAK_EVEN = "break_even"

    @property
    def message(self) -> str:
        return ADVICE_MESSAGES[self.value]


class PeriodSummary(BaseModel):
    """Figures behind the stats cards, charts and breakdown list."""
    model_config = ConfigDict(frozen=True)

    income: Decimal = Decimal(0)
    expense: Decimal = Decimal(0)
    balance: Decimal = Decimal(0)
    breakdown: dict[Category, Decimal] = Field(default_factory=dict)
    sorted_breakdown: list[tuple[Category, Decimal]] = Field(default_factory=list)
    transaction_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return self.transaction_count == 0


class MonthlyReport(BaseModel):
    """
    Report for one historical month.

    An empty month is a valid report with zero totals and no top category.
    """
    model_config = ConfigDict(frozen=True)

    month: MonthRef
    totals: Totals
    balance: Decimal
    top_category: Optional[Category] = None
    advice: Advice
    transaction_count: int = Field(default=0, ge=0)

    @property
    def top_category_label(self) -> str:
        return category_label(self.top_category)

    @property
    def advice_message(self) -> str:
        return self.advice.message


class Suggestion(BaseModel):
    """A rule-based spending suggestion."""
    model_config = ConfigDict(frozen=True)

    kind: str = Field(
        ...,
        pattern="^(top_category|savings_rule)$",
        description="Which rule produced the suggestion"
    )
    title: str
    message: str
    category: Optional[Category] = None
    percentage: Optional[int] = Field(default=None, ge=0, le=100)


class MonthView(BaseModel):
    """Transactions of one month plus their totals."""
    model_config = ConfigDict(frozen=True)

    month: MonthRef
    transactions: list[Transaction] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    balance: Decimal = Decimal(0)

    @property
    def is_empty(self) -> bool:
        return not self.transactions


class ReportChoice(BaseModel):
    """
    What the report screen should show.

    No months means there is no history yet. With exactly one month the
    report is already built; with several the user picks one.
    """
    model_config = ConfigDict(frozen=True)

    months: list[MonthRef] = Field(default_factory=list)
    report: Optional[MonthlyReport] = None

    @property
    def has_history(self) -> bool:
        return bool(self.months)

    @property
    def needs_selection(self) -> bool:
        return len(self.months) > 1
