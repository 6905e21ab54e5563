"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: ISO text in the store becomes
aware datetimes in the domain, and the store identifier is merged into each
entity.
"""

from decimal import Decimal
from typing import Any, Callable

from cashtrack.domain import entities as domain
from cashtrack.database.models import (
    Collection as ORMCollection,
    Deposit as ORMDeposit,
    PendingItem as ORMPendingItem,
)
from cashtrack.utils.date_parser import from_iso


def _decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


def collection_to_domain(orm_collection: ORMCollection) -> domain.CollectionRecord:
    """Convert SQLAlchemy Collection model to domain CollectionRecord."""
    return domain.CollectionRecord(
        id=orm_collection.id,
        cleaner_name=orm_collection.cleaner_name,
        site=orm_collection.site,
        date=from_iso(orm_collection.date),
        amount=_decimal(orm_collection.amount),
        notes=orm_collection.notes,
    )


def pending_item_to_domain(orm_item: ORMPendingItem) -> domain.PendingItem:
    """Convert SQLAlchemy PendingItem model to domain PendingItem."""
    return domain.PendingItem(
        id=orm_item.id,
        cleaner_name=orm_item.cleaner_name,
        site=orm_item.site,
        car_plate=orm_item.car_plate,
        amount=_decimal(orm_item.amount),
        date=from_iso(orm_item.date),
    )


def deposit_to_domain(orm_deposit: ORMDeposit) -> domain.Deposit:
    """Convert SQLAlchemy Deposit model to domain Deposit."""
    return domain.Deposit(
        id=orm_deposit.id,
        cleaner_name=orm_deposit.cleaner_name,
        site=orm_deposit.site,
        date=from_iso(orm_deposit.date),
        cash_amount=_decimal(orm_deposit.cash_amount),
        card_amount=_decimal(orm_deposit.card_amount),
        total_amount=_decimal(orm_deposit.total_amount),
        deposit_slip=orm_deposit.deposit_slip or None,
        auth_code=orm_deposit.auth_code or None,
    )


MAPPERS_BY_MODEL: dict[type, Callable[[Any], Any]] = {
    ORMCollection: collection_to_domain,
    ORMPendingItem: pending_item_to_domain,
    ORMDeposit: deposit_to_domain,
}


def record_to_domain(orm_record: Any) -> Any:
    """Convert any store record to its domain entity."""
    return MAPPERS_BY_MODEL[type(orm_record)](orm_record)
