"""Tests for aggregation and insights."""

import pytest
from datetime import datetime
from decimal import Decimal

from finanzas.models import Advice, Category, MonthRef, TransactionType
from finanzas.reporting import (
    SAVINGS_RULE,
    advice,
    balance,
    build_monthly_report,
    category_breakdown,
    generate_suggestions,
    percentage_of_total,
    sorted_breakdown,
    summarize_period,
    top_category,
    totals,
)

from conftest import UTC


INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


class TestTotals:
    """Tests for income/expense folds."""

    def test_empty(self):
        """Test empty input gives zeros."""
        assert totals([]).income == 0
        assert totals([]).expense == 0
        assert balance([]) == 0

    def test_balance_matches_totals(self, make_tx):
        """Test income minus expense equals the signed fold."""
        samples = [
            [],
            [make_tx(1, INCOME, "100.10")],
            [make_tx(1, EXPENSE, "0.01"), make_tx(2, EXPENSE, "99.99")],
            [make_tx(1, INCOME, "1000"), make_tx(2, EXPENSE, "1000.5"), make_tx(3, INCOME, "0.3")],
        ]
        for sample in samples:
            result = totals(sample)
            assert result.income - result.expense == balance(sample)

    def test_decimal_exact(self, make_tx):
        """Test sums do not drift like floats."""
        txs = [make_tx(i, EXPENSE, "0.1") for i in range(1, 4)]
        assert totals(txs).expense == Decimal("0.3")


class TestBreakdown:
    """Tests for category breakdown and top category."""

    def test_income_excluded(self, make_tx):
        """Test only expenses are broken down."""
        txs = [
            make_tx(1, INCOME, "1000000", Category.SALARY),
            make_tx(2, EXPENSE, "250000", Category.FOOD),
        ]
        assert category_breakdown(txs) == {Category.FOOD: Decimal("250000")}

    def test_monthly_scenario(self, make_tx):
        """Test the salary plus groceries month."""
        txs = [
            make_tx(1, INCOME, "1000000", Category.SALARY),
            make_tx(2, EXPENSE, "250000", Category.FOOD),
        ]
        summary = summarize_period(txs)

        assert summary.balance == Decimal("750000")
        assert summary.breakdown == {Category.FOOD: Decimal("250000")}
        assert top_category(summary.breakdown) == Category.FOOD
        assert percentage_of_total(250000, 250000) == 100
        assert summary.transaction_count == 2

    def test_sorted_breakdown_ties_use_category_order(self, make_tx):
        """Test equal amounts keep declaration order."""
        txs = [
            make_tx(1, EXPENSE, "50", Category.SHOPPING),
            make_tx(2, EXPENSE, "50", Category.TRANSPORT),
            make_tx(3, EXPENSE, "80", Category.HEALTH),
        ]
        ranked = sorted_breakdown(category_breakdown(txs))
        assert [c for c, _ in ranked] == [Category.HEALTH, Category.TRANSPORT, Category.SHOPPING]

    def test_top_category_tie(self, make_tx):
        """Test the first declared category wins a tie."""
        txs = [
            make_tx(1, EXPENSE, "10", Category.OTHER),
            make_tx(2, EXPENSE, "10", Category.FOOD),
        ]
        assert top_category(category_breakdown(txs)) == Category.FOOD

    def test_top_category_empty(self):
        """Test no expenses means no top category."""
        assert top_category({}) is None


class TestPercentageAndAdvice:
    """Tests for percentages and advice."""

    def test_zero_total(self):
        """Test a zero total gives zero rather than an error."""
        assert percentage_of_total(10, 0) == 0

    def test_rounds_half_up(self):
        """Test halves round up."""
        assert percentage_of_total(1, 8) == 13  # 12.5
        assert percentage_of_total(1, 3) == 33

    def test_advice_by_sign(self):
        """Test three-way classification."""
        assert advice(Decimal("0.01")) == Advice.SURPLUS
        assert advice(-5) == Advice.DEFICIT
        assert advice(0) == Advice.BREAK_EVEN


class TestMonthlyReport:
    """Tests for build_monthly_report."""

    def test_report(self, make_tx):
        """Test totals, top category and advice for one month."""
        feb = datetime(2024, 2, 10, tzinfo=UTC)
        txs = [
            make_tx(1, INCOME, "100", Category.SALARY, date=feb),
            make_tx(2, EXPENSE, "150", Category.TRANSPORT, date=feb),
            make_tx(3, EXPENSE, "999"),  # March, not included
        ]
        report = build_monthly_report(txs, 2024, 2, UTC)

        assert report.month == MonthRef(year=2024, month=2)
        assert report.totals.expense == Decimal("150")
        assert report.balance == Decimal("-50")
        assert report.top_category == Category.TRANSPORT
        assert report.advice == Advice.DEFICIT
        assert report.transaction_count == 2

    def test_empty_month(self):
        """Test a month without data is a valid break-even report."""
        report = build_monthly_report([], 2024, 1, UTC)
        assert report.top_category is None
        assert report.top_category_label == "Ninguna"
        assert report.advice == Advice.BREAK_EVEN


class TestSuggestions:
    """Tests for generate_suggestions."""

    def test_no_expenses(self, make_tx):
        """Test income only gives no suggestions."""
        assert generate_suggestions([make_tx(1, INCOME, "100")]) == []
        assert generate_suggestions([]) == []

    def test_top_category_then_savings_rule(self, make_tx):
        """Test the top spending category is called out first."""
        txs = [
            make_tx(1, EXPENSE, "300", Category.FOOD),
            make_tx(2, EXPENSE, "100", Category.TRANSPORT),
            make_tx(3, INCOME, "5000", Category.SALARY),
        ]
        first, second = generate_suggestions(txs)

        assert first.kind == "top_category"
        assert first.category == Category.FOOD
        assert first.percentage == 75
        assert "Comida" in first.title
        assert "75%" in first.message
        assert second == SAVINGS_RULE


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
