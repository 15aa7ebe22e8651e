"""
Aggregation Functions

Folds over a sequence of transactions. All sums are Decimal, so every
caller computing the same figure from the same snapshot gets exactly
the same number.

None of these functions raise on empty input: no data means zeros
and empty mappings.
"""

from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from finanzas.models.report import Advice, PeriodSummary, Totals
from finanzas.models.transaction import (
    CATEGORY_ORDER,
    Category,
    Transaction,
    TransactionType,
)


Number = Union[Decimal, int, float, str]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _category_rank(category: Category) -> int:
    return CATEGORY_ORDER.index(Category(category))


def totals(transactions: Iterable[Transaction]) -> Totals:
    """
    Sum amounts into income and expense.

    Anything that is not income counts as expense.
    """
    income = Decimal(0)
    expense = Decimal(0)
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
        else:
            expense += transaction.amount
    return Totals(income=income, expense=expense)


def balance(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expense, as a single signed fold."""
    result = Decimal(0)
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            result += transaction.amount
        else:
            result -= transaction.amount
    return result


def category_breakdown(transactions: Iterable[Transaction]) -> dict[Category, Decimal]:
    """
    Expense amount per category.

    Only categories with at least one expense appear, in category
    declaration order.
    """
    sums: dict[Category, Decimal] = {}
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            continue
        sums[transaction.category] = sums.get(transaction.category, Decimal(0)) + transaction.amount
    return {category: sums[category] for category in CATEGORY_ORDER if category in sums}


def sorted_breakdown(breakdown: Mapping[Category, Decimal]) -> list[tuple[Category, Decimal]]:
    """Breakdown entries by amount descending; equal amounts keep category order."""
    return sorted(
        breakdown.items(),
        key=lambda item: (-item[1], _category_rank(item[0])),
    )


def top_category(breakdown: Mapping[Category, Decimal]) -> Optional[Category]:
    """
    Category with the largest amount, or None for an empty breakdown.

    Ties go to the category declared first.
    """
    ranked = sorted_breakdown(breakdown)
    return Category(ranked[0][0]) if ranked else None


def percentage_of_total(amount: Number, total: Number) -> int:
    """
    ``amount`` as a whole percentage of ``total``, halves rounded up.

    A zero total gives 0 instead of a division error.
    """
    total_value = _to_decimal(total)
    if total_value == 0:
        return 0
    ratio = _to_decimal(amount) / total_value * 100
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def advice(balance_value: Number) -> Advice:
    """Classify a balance by its sign."""
    value = _to_decimal(balance_value)
    if value > 0:
        return Advice.SURPLUS
    if value < 0:
        return Advice.DEFICIT
    return Advice.BREAK_EVEN


def summarize_period(transactions: Iterable[Transaction]) -> PeriodSummary:
    """Totals, balance and breakdown of one filtered period."""
    items = list(transactions)
    period_totals = totals(items)
    breakdown = category_breakdown(items)
    return PeriodSummary(
        income=period_totals.income,
        expense=period_totals.expense,
        balance=balance(items),
        breakdown=breakdown,
        sorted_breakdown=sorted_breakdown(breakdown),
        transaction_count=len(items),
    )
