"""
Monthly Reports and Spending Suggestions

Built strictly on top of the query engine and the aggregation
functions; nothing here filters or sums on its own.
"""

from collections.abc import Iterable
from datetime import tzinfo
from typing import Optional

from finanzas.models.report import MonthlyReport, MonthRef, Suggestion
from finanzas.models.transaction import (
    Category,
    Transaction,
    TransactionType,
    category_label,
)
from finanzas.queries import by_year_month
from finanzas.reporting.aggregation import (
    advice,
    balance,
    category_breakdown,
    percentage_of_total,
    top_category,
    totals,
)


SUGGESTION_TIPS: dict[Category, str] = {
    Category.FOOD: "Estás gastando mucho en comida. Prueba cocinar más en casa esta semana.",
    Category.TRANSPORT: "Tus gastos en transporte son altos. ¿Podrías compartir viaje o usar transporte público?",
    Category.UTILITIES: "Altos gastos en servicios. Recuerda apagar luces y dispositivos que no uses.",
    Category.ENTERTAINMENT: "¡Mucha diversión! Pero considera actividades gratuitas para equilibrar.",
    Category.SHOPPING: "Compras impulsivas detectadas. Prueba la regla de esperar 24h antes de comprar.",
    Category.HEALTH: "La salud es prioridad, pero revisa si hay genéricos o alternativas más económicas.",
    Category.OTHER: "Revisa tus gastos 'Varios' para identificar fugas de dinero.",
}

SAVINGS_RULE = Suggestion(
    kind="savings_rule",
    title="Regla 50/30/20",
    message="Intenta destinar el 20% de tus ingresos al ahorro. Es un buen hábito para empezar.",
)


def build_monthly_report(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    tz: Optional[tzinfo] = None,
) -> MonthlyReport:
    """
    Report for (year, month) computed from a full snapshot.

    A month without transactions yields zero totals, no top category
    and break-even advice.
    """
    selected = by_year_month(transactions, year, month, tz)
    month_totals = totals(selected)
    month_balance = balance(selected)
    return MonthlyReport(
        month=MonthRef(year=year, month=month),
        totals=month_totals,
        balance=month_balance,
        top_category=top_category(category_breakdown(selected)),
        advice=advice(month_balance),
        transaction_count=len(selected),
    )


def generate_suggestions(transactions: Iterable[Transaction]) -> list[Suggestion]:
    """
    Rule-based suggestions for an already filtered set of transactions.

    Without expenses there is nothing to suggest. Otherwise the top
    spending category is called out with its share of all expenses,
    followed by the general savings rule.
    """
    expenses = [t for t in transactions if t.type != TransactionType.INCOME]
    if not expenses:
        return []

    breakdown = category_breakdown(expenses)
    top = top_category(breakdown)
    if top is None:
        return []

    share = percentage_of_total(breakdown[top], totals(expenses).expense)
    tip = SUGGESTION_TIPS.get(top, SUGGESTION_TIPS[Category.OTHER])

    return [
        Suggestion(
            kind="top_category",
            title=f"Atención en {category_label(top)}",
            message=f"El {share}% de tus gastos del mes se van en esta categoría. {tip}",
            category=top,
            percentage=share,
        ),
        SAVINGS_RULE,
    ]
