"""Aggregation and reporting package."""

from finanzas.reporting.aggregation import (
    advice,
    balance,
    category_breakdown,
    percentage_of_total,
    sorted_breakdown,
    summarize_period,
    top_category,
    totals,
)
from finanzas.reporting.insights import (
    SAVINGS_RULE,
    SUGGESTION_TIPS,
    build_monthly_report,
    generate_suggestions,
)

__all__ = [
    "SAVINGS_RULE",
    "SUGGESTION_TIPS",
    "advice",
    "balance",
    "build_monthly_report",
    "category_breakdown",
    "generate_suggestions",
    "percentage_of_total",
    "sorted_breakdown",
    "summarize_period",
    "top_category",
    "totals",
]
