"""Tests for the end-to-end flows."""

from datetime import datetime
from decimal import Decimal

import pytest

from finanzas.config import Settings
from finanzas.models import AuditEventType, Category, MonthRef
from finanzas.orchestrator import create_app_components
from finanzas.services.storage import InMemoryStorage

from conftest import UTC


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setenv("LOG_JSON", "false")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return Settings()


@pytest.fixture
def components(settings, storage, clock):
    return create_app_components(storage=storage, settings=settings, clock=clock)


class TestEmptyApp:
    """Tests for a first run with no data."""

    def test_everything_is_empty(self, components):
        """Test an empty store gives zeros and no history."""
        view = components.dashboard.current_month()

        assert view.is_empty
        assert view.month == MonthRef(year=2024, month=3)
        assert view.balance == 0
        assert components.dashboard.period_stats("month").is_empty
        assert components.dashboard.suggestions() == []
        choice = components.reports.report_choice()
        assert not choice.has_history
        assert choice.report is None


class TestDashboardFlow:
    """Tests for the main screen figures."""

    def test_current_month(self, components):
        """Test cards and list follow the current calendar month."""
        m = components.mutations
        m.add(type="income", amount=1000000, category="salary")
        m.add(type="expense", amount=250000, category="food")
        m.add(type="expense", amount=999, date=datetime(2024, 2, 1, tzinfo=UTC))

        view = components.dashboard.current_month()

        assert len(view.transactions) == 2
        assert view.totals.income == Decimal(1000000)
        assert view.balance == Decimal(750000)
        assert view.transactions[0].id > view.transactions[1].id

    def test_period_stats_and_suggestions_agree(self, components):
        """Test stats and suggestions see the same month."""
        m = components.mutations
        m.add(type="expense", amount=300, category="food")
        m.add(type="expense", amount=100, category="transport")

        stats = components.dashboard.period_stats("month")
        first = components.dashboard.suggestions()[0]

        assert stats.sorted_breakdown[0] == (Category.FOOD, Decimal(300))
        assert first.category == Category.FOOD
        assert first.percentage == 75

    def test_custom_range(self, components):
        """Test the stats panel with explicit dates."""
        components.mutations.add(type="expense", amount=5, date=datetime(2024, 1, 31, 23, 0, tzinfo=UTC))
        stats = components.dashboard.period_stats({"start": "2024-01-01", "end": "2024-01-31"})
        assert stats.expense == Decimal(5)


class TestReportFlow:
    """Tests for the monthly report flow."""

    def test_single_month_history(self, components):
        """Test a single past month is reported without asking."""
        components.mutations.add(
            type="expense", amount=80, category="health",
            date=datetime(2024, 2, 10, tzinfo=UTC),
        )
        components.mutations.add(type="income", amount=10)

        choice = components.reports.report_choice()
        assert choice.months == [MonthRef(year=2024, month=2)]
        assert not choice.needs_selection

        report = choice.report
        assert report.month == MonthRef(year=2024, month=2)
        assert report.top_category == Category.HEALTH
        assert report.balance == Decimal(-80)
        assert "Déficit" in report.advice_message

        event = components.audit_logger.recent_events(1)[0]
        assert event.event_type == AuditEventType.REPORT_GENERATED
        assert event.details["month"] == "2024-02"

    def test_several_months_need_selection(self, components):
        """Test several past months are offered newest first without a report."""
        for month in (1, 2):
            components.mutations.add(
                type="expense", amount=5, date=datetime(2024, month, 3, tzinfo=UTC),
            )

        choice = components.reports.report_choice()

        assert choice.has_history
        assert choice.needs_selection
        assert choice.months == [MonthRef(year=2024, month=2), MonthRef(year=2024, month=1)]
        assert choice.report is None


class TestComponents:
    """Tests for create_app_components wiring."""

    def test_data_survives_restart(self, settings, storage, clock):
        """Test a second app on the same storage sees earlier data."""
        first = create_app_components(storage=storage, settings=settings, clock=clock)
        tx = first.mutations.add(type="income", amount=42, description="Regalo")

        second = create_app_components(storage=storage, settings=settings, clock=clock)
        assert second.queries.get(tx.id) == tx

    def test_backup_names_use_today(self, components):
        """Test backup naming follows the app clock."""
        filename, _ = components.backups.export(components.today())
        assert filename == "finanzas_backup_2024-03-15.json"

    def test_corrupt_storage_starts_empty(self, settings, clock):
        """Test startup never fails on bad data."""
        storage = InMemoryStorage({"finance_app_data_v1": "garbage"})
        components = create_app_components(storage=storage, settings=settings, clock=clock)
        assert len(components.store) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
