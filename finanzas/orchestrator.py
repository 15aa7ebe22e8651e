"""
Main Orchestrator for Finanzas

This module ties together all the components and defines the
end-to-end flows behind each screen:
1. Dashboard (current month -> summary cards, list, stats, suggestions)
2. Monthly report (history -> pick a month -> totals, top category, advice)

DESIGN DECISION: The orchestrator owns no logic of its own.
- Every figure comes from the query engine and the aggregation module
- Every change goes through the mutation service or the backup service
- The UI only calls into the flows built here

This keeps all screens in agreement about what a period contains.
"""

from datetime import date
from typing import NamedTuple, Optional

from finanzas.audit import AuditLogger, configure_logging
from finanzas.config import Settings, get_settings
from finanzas.models.report import (
    MonthlyReport,
    MonthRef,
    MonthView,
    PeriodSummary,
    ReportChoice,
    Suggestion,
)
from finanzas.mutations import TransactionMutations
from finanzas.queries import Clock, QueryEngine, RangeSpec
from finanzas.reporting import (
    balance,
    build_monthly_report,
    generate_suggestions,
    summarize_period,
    totals,
)
from finanzas.services.backup import BackupService
from finanzas.services.storage import JsonFileStorage, KeyValueStorageInterface
from finanzas.store import TransactionStore


class DashboardFlow:
    """
    Figures for the main screen.

    The summary cards and the transaction list show the current
    calendar month; the statistics panel follows the selected range.
    """

    def __init__(self, queries: QueryEngine):
        self._queries = queries

    def current_month(self) -> MonthView:
        """Transactions, totals and balance of the current calendar month."""
        transactions = self._queries.by_month_offset(0)
        return MonthView(
            month=self._queries.month_ref(0),
            transactions=transactions,
            totals=totals(transactions),
            balance=balance(transactions),
        )

    def period_stats(self, range_spec: RangeSpec = None) -> PeriodSummary:
        """
        Summary for the statistics panel.

        ``range_spec`` is ``week``, ``month``, ``year`` or a custom
        ``{"start": ..., "end": ...}`` range; anything else covers all
        transactions.
        """
        return summarize_period(self._queries.by_range(range_spec))

    def suggestions(self) -> list[Suggestion]:
        """Suggestions based on the current month's expenses."""
        return generate_suggestions(self._queries.by_month_offset(0))


class ReportFlow:
    """
    Orchestrates the monthly report.

    Flow:
    1. List the completed months that have data
    2. No months -> "no history" message
    3. One month -> report it directly
    4. Several months -> user picks one
    """

    def __init__(
        self,
        queries: QueryEngine,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._queries = queries
        self._audit_logger = audit_logger

    def available_months(self) -> list[MonthRef]:
        """Months with data before the current one, newest first."""
        return self._queries.available_months()

    def report_choice(self) -> ReportChoice:
        """
        Decide what the report screen shows.

        With a single completed month its report is built right away.
        """
        months = self.available_months()
        if len(months) == 1:
            only = months[0]
            return ReportChoice(months=months, report=self.report(only.year, only.month))
        return ReportChoice(months=months)

    def report(self, year: int, month: int) -> MonthlyReport:
        """Build the report for one calendar month."""
        result = build_monthly_report(
            self._queries.snapshot(), year, month, self._queries.tz
        )

        if self._audit_logger:
            self._audit_logger.log_report_generated(
                result.month.key, result.transaction_count
            )

        return result


class AppComponents(NamedTuple):
    """Everything the UI needs, wired to one store."""

    settings: Settings
    audit_logger: AuditLogger
    store: TransactionStore
    queries: QueryEngine
    mutations: TransactionMutations
    backups: BackupService
    dashboard: DashboardFlow
    reports: ReportFlow

    def today(self) -> date:
        return self.queries.today()


def create_app_components(
    storage: Optional[KeyValueStorageInterface] = None,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        storage: Key-value backend. Defaults to JSON files under the
                 configured data directory. Pass InMemoryStorage
                 for testing.
        settings: Defaults to the cached environment settings.
        clock: Source of "now". Defaults to the system clock.

    Returns:
        AppComponents with the store already loaded
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage
    backup_settings = settings.backup

    configure_logging(app_settings.effective_log_level, app_settings.log_json)
    audit_logger = AuditLogger()

    if storage is None:
        storage = JsonFileStorage(
            storage_settings.data_dir,
            write_attempts=storage_settings.write_retries,
        )

    store = TransactionStore(
        storage,
        key=storage_settings.slot_key,
        audit_logger=audit_logger,
    )
    store.load()

    queries = QueryEngine(store, clock=clock, tz=app_settings.tzinfo)

    mutation_kwargs = {"audit_logger": audit_logger}
    if clock is not None:
        mutation_kwargs["clock"] = clock
    mutations = TransactionMutations(store, **mutation_kwargs)

    backups = BackupService(
        store,
        prefix=backup_settings.file_prefix,
        indent=backup_settings.indent,
        audit_logger=audit_logger,
    )

    return AppComponents(
        settings=settings,
        audit_logger=audit_logger,
        store=store,
        queries=queries,
        mutations=mutations,
        backups=backups,
        dashboard=DashboardFlow(queries),
        reports=ReportFlow(queries, audit_logger=audit_logger),
    )
