"""Cash-in-hand aggregation per cleaner."""

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from cashtrack.database.base import Database
from cashtrack.database.live_query import LiveQuery
from cashtrack.domain.entities import (
    COLLECTIONS,
    DEPOSITS,
    PENDING_ITEMS,
    CleanerAlert,
    CleanerSummary,
    CollectionRecord,
    Deposit,
    PendingItem,
)
from cashtrack.utils.date_parser import utc_now

logger = logging.getLogger(__name__)

# Cash in hand above this amount is flagged, whatever the currency
HIGH_BALANCE_THRESHOLD = Decimal("5000")
# A cleaner still holding cash this many days after the last collection is flagged
OVERDUE_DAYS = 3

SECONDS_PER_DAY = 86400


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """Whole days from ``earlier`` to ``later``, truncated toward zero."""
    return int((later - earlier).total_seconds() / SECONDS_PER_DAY)


def aggregate_balances(
    collections: Iterable[CollectionRecord],
    pending_items: Iterable[PendingItem],
    deposits: Iterable[Deposit],
    now: datetime,
) -> list[CleanerSummary]:
    """Compute one summary per distinct cleaner name.

    Collections and pending items both count as collected cash; deposits
    reduce it. Entries without a cleaner name are skipped. Names are used
    exactly as stored, so "Ali" and "ali " are different cleaners.

    Args:
        collections: Collection records
        pending_items: Pending items
        deposits: Deposits
        now: Instant the day counts are measured against

    Returns:
        Unordered list of CleanerSummary; empty when all inputs are empty
    """
    collected: dict[str, Decimal] = defaultdict(Decimal)
    deposited: dict[str, Decimal] = defaultdict(Decimal)
    last_dates: dict[str, Optional[datetime]] = {}

    for entry in [*collections, *pending_items]:
        if not entry.cleaner_name:
            continue
        name = entry.cleaner_name
        collected[name] += entry.amount
        latest = last_dates.get(name)
        if latest is None or entry.date > latest:
            last_dates[name] = entry.date
        deposited.setdefault(name, Decimal("0"))

    for deposit in deposits:
        if not deposit.cleaner_name:
            continue
        name = deposit.cleaner_name
        deposited[name] += deposit.total_amount
        collected.setdefault(name, Decimal("0"))

    summaries = []
    for name in collected:
        last_date = last_dates.get(name)
        summaries.append(
            CleanerSummary(
                name=name,
                total_collections=collected[name],
                total_deposits=deposited[name],
                cash_in_hand=collected[name] - deposited[name],
                last_collection_date=last_date,
                days_since_last_collection=(
                    whole_days_between(last_date, now) if last_date is not None else None
                ),
            )
        )
    return summaries


def cleaner_alerts(summary: CleanerSummary) -> list[CleanerAlert]:
    """Dashboard flags for a cleaner, in display order."""
    alerts = []
    if summary.cash_in_hand > HIGH_BALANCE_THRESHOLD:
        alerts.append(CleanerAlert.OVER_LIMIT)
    days = summary.days_since_last_collection
    if days is not None and days > OVERDUE_DAYS and summary.cash_in_hand > 0:
        alerts.append(CleanerAlert.OVERDUE)
    if summary.cash_in_hand <= 0:
        alerts.append(CleanerAlert.CLEARED)
    return alerts


def is_at_risk(summary: CleanerSummary) -> bool:
    """True when the cleaner holds too much cash or has held it too long."""
    alerts = cleaner_alerts(summary)
    return CleanerAlert.OVER_LIMIT in alerts or CleanerAlert.OVERDUE in alerts


def sort_summaries(summaries: Iterable[CleanerSummary]) -> list[CleanerSummary]:
    """Highest cash in hand first, then by name."""
    return sorted(summaries, key=lambda s: (-s.cash_in_hand, s.name))


class BalanceService:
    """Service for computing cleaner balances from the store."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_cleaner_summaries(self, now: Optional[datetime] = None) -> list[CleanerSummary]:
        """Load all records and return summaries, highest cash in hand first."""
        summaries = aggregate_balances(
            self.db.list_records(COLLECTIONS),
            self.db.list_records(PENDING_ITEMS),
            self.db.list_records(DEPOSITS),
            now or utc_now(),
        )
        return sort_summaries(summaries)

    @staticmethod
    def get_totals(summaries: Iterable[CleanerSummary]) -> dict[str, Decimal | int]:
        """Total cash in hand across cleaners and the number at risk."""
        total = Decimal("0")
        at_risk = 0
        for summary in summaries:
            total += summary.cash_in_hand
            if is_at_risk(summary):
                at_risk += 1
        return {"cash_in_hand": total, "at_risk": at_risk}

    def cash_in_hand_for(
        self, cleaner_name: str, editing_deposit: Optional[Deposit] = None
    ) -> Decimal:
        """Current cash in hand for one cleaner.

        When a deposit is being edited, its amount is added back so the figure
        shows what the cleaner held before that deposit.
        """
        balance = Decimal("0")
        for summary in self.get_cleaner_summaries():
            if summary.name == cleaner_name:
                balance = summary.cash_in_hand
                break
        if editing_deposit is not None and editing_deposit.cleaner_name == cleaner_name:
            balance += editing_deposit.total_amount
        return balance


class LiveBalance:
    """Cleaner summaries kept current from three live queries.

    Any change to collections, pending items or deposits recomputes the
    whole summary list.
    """

    def __init__(self, db: Database, now: Optional[Callable[[], datetime]] = None):
        self._now = now or utc_now
        self.queries = {
            name: LiveQuery(db, name) for name in (COLLECTIONS, PENDING_ITEMS, DEPOSITS)
        }
        self.summaries: list[CleanerSummary] = []
        self._unsubscribers: list[Callable[[], None]] = []
        self._listeners: list[Callable[["LiveBalance"], None]] = []

    @property
    def loading(self) -> bool:
        return any(query.loading for query in self.queries.values())

    @property
    def error(self) -> Optional[Exception]:
        for query in self.queries.values():
            if query.error is not None:
                return query.error
        return None

    def on_update(self, callback: Callable[["LiveBalance"], None]) -> None:
        """Call ``callback(self)`` after each recomputation."""
        self._listeners.append(callback)

    def start(self) -> "LiveBalance":
        for query in self.queries.values():
            self._unsubscribers.append(query.subscribe(self._recompute))
        for query in self.queries.values():
            query.start()
        return self

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        for query in self.queries.values():
            query.close()

    def _recompute(self, _query: LiveQuery) -> None:
        if self.loading:
            return
        self.summaries = sort_summaries(
            aggregate_balances(
                self.queries[COLLECTIONS].data,
                self.queries[PENDING_ITEMS].data,
                self.queries[DEPOSITS].data,
                self._now(),
            )
        )
        logger.debug("Recomputed balances for %d cleaners", len(self.summaries))
        for callback in list(self._listeners):
            callback(self)

    def __enter__(self) -> "LiveBalance":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
