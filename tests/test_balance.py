"""Tests for the cash-in-hand aggregator and balance service."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

from cashtrack.domain.balance import (
    HIGH_BALANCE_THRESHOLD,
    aggregate_balances,
    cleaner_alerts,
    is_at_risk,
    sort_summaries,
    whole_days_between,
)
from cashtrack.domain.entities import (
    CleanerAlert,
    CleanerSummary,
    CollectionRecord,
    Deposit,
    PendingItem,
)

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=UTC)


def _collection(name, amount, date, record_id="c"):
    return CollectionRecord(
        id=record_id, cleaner_name=name, site="Tower A", date=date, amount=Decimal(amount)
    )


def _pending(name, amount, date, record_id="p"):
    return PendingItem(
        id=record_id,
        cleaner_name=name,
        site="Tower A",
        car_plate="P12345",
        amount=Decimal(amount),
        date=date,
    )


def _deposit(name, cash, card="0", record_id="d"):
    return Deposit(
        id=record_id,
        cleaner_name=name,
        site="Tower A",
        date=NOW,
        cash_amount=Decimal(cash),
        card_amount=Decimal(card),
        total_amount=Decimal(cash) + Decimal(card),
    )


def _summary(cash_in_hand, days=None):
    return CleanerSummary(
        name="Ali",
        total_collections=Decimal("0"),
        total_deposits=Decimal("0"),
        cash_in_hand=Decimal(cash_in_hand),
        last_collection_date=None,
        days_since_last_collection=days,
    )


def test_empty_input_gives_empty_list():
    """Test aggregating no records at all."""
    assert aggregate_balances([], [], [], NOW) == []


def test_cash_in_hand_is_collections_minus_deposits():
    """Test cash in hand sums collections and pending items minus deposits."""
    summaries = aggregate_balances(
        [_collection("Ali", "250.00", NOW - timedelta(days=1))],
        [_pending("Ali", "100.00", NOW - timedelta(days=2))],
        [_deposit("Ali", "200.00", "30.00")],
        NOW,
    )

    assert len(summaries) == 1
    summary = summaries[0]
    assert summary.name == "Ali"
    assert summary.total_collections == Decimal("350.00")
    assert summary.total_deposits == Decimal("230.00")
    assert summary.cash_in_hand == Decimal("120.00")


def test_cash_in_hand_can_be_negative():
    """Test a cleaner who deposited more than collected."""
    summaries = aggregate_balances(
        [_collection("Ali", "100", NOW)], [], [_deposit("Ali", "150")], NOW
    )
    assert summaries[0].cash_in_hand == Decimal("-50")


def test_deposits_only_cleaner():
    """Test a cleaner with deposits but no collections."""
    summaries = aggregate_balances([], [], [_deposit("Sara", "40")], NOW)

    assert len(summaries) == 1
    assert summaries[0].cash_in_hand < 0
    assert summaries[0].total_collections == Decimal("0")
    assert summaries[0].last_collection_date is None
    assert summaries[0].days_since_last_collection is None


def test_last_collection_date_is_latest_of_collections_and_pending():
    """Test the last collection date is the chronological maximum."""
    latest = NOW - timedelta(days=1)
    summaries = aggregate_balances(
        [_collection("Ali", "10", NOW - timedelta(days=5))],
        [_pending("Ali", "10", latest)],
        [],
        NOW,
    )
    assert summaries[0].last_collection_date == latest
    assert summaries[0].days_since_last_collection == 1


def test_entries_without_cleaner_name_are_skipped():
    """Test records with an empty cleaner name are ignored."""
    summaries = aggregate_balances(
        [_collection("", "10", NOW), _collection("Ali", "10", NOW)],
        [],
        [_deposit("", "5")],
        NOW,
    )
    assert [summary.name for summary in summaries] == ["Ali"]


def test_names_are_not_normalized():
    """Test names differing by case or spacing are separate cleaners."""
    summaries = aggregate_balances(
        [_collection("Ali", "10", NOW), _collection("ali ", "20", NOW)], [], [], NOW
    )
    assert sorted(summary.name for summary in summaries) == ["Ali", "ali "]


def test_whole_days_truncate():
    """Test partial days are dropped."""
    assert whole_days_between(NOW - timedelta(hours=47), NOW) == 1
    assert whole_days_between(NOW - timedelta(days=3, hours=1), NOW) == 3
    assert whole_days_between(NOW, NOW) == 0


def test_over_limit_alert():
    """Test a balance above the threshold is flagged."""
    assert CleanerAlert.OVER_LIMIT in cleaner_alerts(_summary("5000.01", days=0))
    assert cleaner_alerts(_summary(HIGH_BALANCE_THRESHOLD, days=0)) == []


def test_overdue_alert_requires_cash_in_hand():
    """Test overdue only applies while the cleaner still holds cash."""
    assert cleaner_alerts(_summary("10", days=4)) == [CleanerAlert.OVERDUE]
    assert cleaner_alerts(_summary("10", days=3)) == []
    assert CleanerAlert.OVERDUE not in cleaner_alerts(_summary("0", days=10))


def test_cleared_alert():
    """Test zero or negative balances are cleared."""
    assert cleaner_alerts(_summary("0")) == [CleanerAlert.CLEARED]
    assert cleaner_alerts(_summary("-20")) == [CleanerAlert.CLEARED]


def test_at_risk():
    """Test at-risk covers over-limit and overdue but not cleared."""
    assert is_at_risk(_summary("6000", days=0))
    assert is_at_risk(_summary("10", days=5))
    assert not is_at_risk(_summary("0", days=5))
    assert not is_at_risk(_summary("10", days=1))


def test_sort_summaries_highest_first():
    """Test summaries sort by cash in hand, then name."""
    summaries = aggregate_balances(
        [
            _collection("Bea", "10", NOW),
            _collection("Ali", "10", NOW),
            _collection("Cy", "500", NOW),
        ],
        [],
        [],
        NOW,
    )
    assert [summary.name for summary in sort_summaries(summaries)] == ["Cy", "Ali", "Bea"]


def test_balance_service_summaries(balance_service, sample_collections, deposit_service):
    """Test summaries computed from the store."""
    deposit_service.create_deposit(
        cleaner_name="Ali", site="Tower A", cash_amount=Decimal("50.00")
    )

    summaries = balance_service.get_cleaner_summaries(now=datetime(2024, 1, 21, tzinfo=UTC))

    assert [summary.name for summary in summaries] == ["Ali", "Sara"]
    assert summaries[0].cash_in_hand == Decimal("300.00")
    assert summaries[1].cash_in_hand == Decimal("75.50")
    assert summaries[0].days_since_last_collection == 12


def test_balance_service_totals(balance_service, sample_collections):
    """Test totals across cleaners."""
    summaries = balance_service.get_cleaner_summaries(now=datetime(2024, 1, 21, tzinfo=UTC))
    totals = balance_service.get_totals(summaries)

    assert totals["cash_in_hand"] == Decimal("425.50")
    # Ali last collected 12 days earlier, Sara the day before
    assert totals["at_risk"] == 1


def test_cash_in_hand_for_adds_back_edited_deposit(
    balance_service, sample_collections, deposit_service
):
    """Test the balance shown while editing a deposit excludes that deposit."""
    deposit_id = deposit_service.create_deposit(
        cleaner_name="Ali", site="Tower A", cash_amount=Decimal("100.00")
    )
    deposit = deposit_service.get_deposit(deposit_id)

    assert balance_service.cash_in_hand_for("Ali") == Decimal("250.00")
    assert balance_service.cash_in_hand_for("Ali", editing_deposit=deposit) == Decimal("350.00")
    assert balance_service.cash_in_hand_for("Nobody") == Decimal("0")
