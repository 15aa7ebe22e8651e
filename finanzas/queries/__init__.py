"""Query engine package."""

from finanzas.queries.engine import (
    Clock,
    RangeSpec,
    QueryEngine,
    all_sorted,
    available_months,
    by_month_offset,
    by_range,
    by_year_month,
    find_by_id,
    local_today,
    resolve_range,
    shift_month,
    system_clock,
)

__all__ = [
    "Clock",
    "RangeSpec",
    "QueryEngine",
    "all_sorted",
    "available_months",
    "by_month_offset",
    "by_range",
    "by_year_month",
    "find_by_id",
    "local_today",
    "resolve_range",
    "shift_month",
    "system_clock",
]
