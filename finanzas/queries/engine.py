"""
Query Engine

DESIGN DECISION: Every view of the data is computed HERE and nowhere
else. The summary cards, charts, breakdown list, suggestions and the
monthly report all call these functions, so two screens can never
disagree about what "this month" contains.

The module-level functions are pure: they take a snapshot and the
current instant and return new lists. ``QueryEngine`` binds them to
the live store and a clock for presentation callers.

Calendar rules:
- A transaction belongs to the calendar day of its timestamp in the
  configured timezone (system local by default), not to an elapsed-time
  window. Time of day never matters.
- Months are 1-12.
- Results are always sorted newest first (id descending).
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from finanzas.models.report import DateRange, MonthRef, RangeKind
from finanzas.models.transaction import Transaction
from finanzas.store import TransactionStore


Clock = Callable[[], datetime]

RangeSpec = Union[RangeKind, DateRange, Mapping, str, None]

WEEK_LOOKBACK_DAYS = 7


def system_clock() -> datetime:
    """Current instant as an aware datetime in the system zone."""
    return datetime.now().astimezone()


def local_today(now: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of ``now`` in ``tz`` (naive ``now`` is already local)."""
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Add ``offset`` months to (year, month), rolling the year over."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def all_sorted(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Every transaction, newest id first. The canonical display order."""
    return sorted(transactions, key=lambda t: t.id, reverse=True)


def find_by_id(
    transactions: Iterable[Transaction],
    transaction_id: int,
) -> Optional[Transaction]:
    for transaction in transactions:
        if transaction.id == transaction_id:
            return transaction
    return None


def by_year_month(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    tz: Optional[tzinfo] = None,
) -> list[Transaction]:
    """Transactions whose local date falls in (year, month)."""
    matching = []
    for transaction in transactions:
        day = transaction.local_date(tz)
        if day.year == year and day.month == month:
            matching.append(transaction)
    return all_sorted(matching)


def by_month_offset(
    transactions: Iterable[Transaction],
    offset: int,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> list[Transaction]:
    """
    Transactions of the month ``offset`` months away from ``now``.

    0 is the current month, -1 the previous one, and so on.
    """
    today = local_today(now, tz)
    year, month = shift_month(today.year, today.month, offset)
    return by_year_month(transactions, year, month, tz)


def resolve_range(spec: RangeSpec) -> Union[RangeKind, DateRange]:
    """
    Normalize a range spec.

    Anything that is not a known symbolic range or a complete
    start/end pair means "everything".
    """
    if isinstance(spec, (RangeKind, DateRange)):
        return spec
    if isinstance(spec, str):
        try:
            return RangeKind(spec.strip().lower())
        except ValueError:
            return RangeKind.ALL
    if isinstance(spec, Mapping):
        if not spec.get("start") or not spec.get("end"):
            return RangeKind.ALL
        try:
            return DateRange(start=spec["start"], end=spec["end"])
        except PydanticValidationError:
            return RangeKind.ALL
    return RangeKind.ALL


def by_range(
    transactions: Iterable[Transaction],
    spec: RangeSpec,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> list[Transaction]:
    """
    Filter by a range spec.

    - ``week``: local date within [today - 7 days, today]
    - ``month``: current calendar month
    - ``year``: current calendar year
    - ``DateRange``: start through end, both days inclusive
    - anything else: no filtering
    """
    window = resolve_range(spec)
    today = local_today(now, tz)

    if window == RangeKind.ALL:
        return all_sorted(transactions)

    if isinstance(window, DateRange):
        def keep(day: date) -> bool:
            return window.start <= day <= window.end
    elif window == RangeKind.WEEK:
        week_start = today - timedelta(days=WEEK_LOOKBACK_DAYS)

        def keep(day: date) -> bool:
            return week_start <= day <= today
    elif window == RangeKind.MONTH:
        def keep(day: date) -> bool:
            return day.year == today.year and day.month == today.month
    else:
        def keep(day: date) -> bool:
            return day.year == today.year

    return all_sorted(t for t in transactions if keep(t.local_date(tz)))


def available_months(
    transactions: Iterable[Transaction],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> list[MonthRef]:
    """
    Distinct months with at least one transaction, excluding the
    current month, most recent first.

    An empty list means there is no history to report on.
    """
    today = local_today(now, tz)
    current = (today.year, today.month)

    found: set[tuple[int, int]] = set()
    for transaction in transactions:
        day = transaction.local_date(tz)
        key = (day.year, day.month)
        if key != current:
            found.add(key)

    return [
        MonthRef(year=year, month=month)
        for year, month in sorted(found, reverse=True)
    ]


class QueryEngine:
    """
    The pure query functions bound to the live store and a clock.

    Every call reads a fresh snapshot, so results always reflect the
    latest mutation.
    """

    def __init__(
        self,
        store: TransactionStore,
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None,
    ):
        self._store = store
        self._clock = clock or system_clock
        self._tz = tz

    @property
    def tz(self) -> Optional[tzinfo]:
        return self._tz

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return local_today(self.now(), self._tz)

    def snapshot(self) -> Sequence[Transaction]:
        return self._store.snapshot()

    def all_sorted(self) -> list[Transaction]:
        return all_sorted(self.snapshot())

    def get(self, transaction_id: int) -> Optional[Transaction]:
        return find_by_id(self.snapshot(), transaction_id)

    def month_ref(self, offset: int = 0) -> MonthRef:
        """The calendar month ``offset`` months from today."""
        today = self.today()
        year, month = shift_month(today.year, today.month, offset)
        return MonthRef(year=year, month=month)

    def by_month_offset(self, offset: int = 0) -> list[Transaction]:
        return by_month_offset(self.snapshot(), offset, self.now(), self._tz)

    def by_year_month(self, year: int, month: int) -> list[Transaction]:
        return by_year_month(self.snapshot(), year, month, self._tz)

    def by_range(self, spec: Any = None) -> list[Transaction]:
        return by_range(self.snapshot(), spec, self.now(), self._tz)

    def available_months(self) -> list[MonthRef]:
        return available_months(self.snapshot(), self.now(), self._tz)
