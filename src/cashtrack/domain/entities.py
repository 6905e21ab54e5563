"""Domain model entities for cashtrack.

These are pure data classes representing business concepts, independent of
the store schema. Records carry the store-assigned identifier as ``id``.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

COLLECTIONS = "collections"
DEPOSITS = "deposits"
PENDING_ITEMS = "pendingItems"

COLLECTION_NAMES = (COLLECTIONS, DEPOSITS, PENDING_ITEMS)


@dataclass(frozen=True)
class CollectionRecord:
    """One cash handover from a cleaner."""

    id: str
    cleaner_name: str
    site: str
    date: datetime
    amount: Decimal
    notes: Optional[str] = None


@dataclass(frozen=True)
class PendingItem:
    """An imported collection awaiting confirmation."""

    id: str
    cleaner_name: str
    site: str
    car_plate: str
    amount: Decimal
    date: datetime


@dataclass(frozen=True)
class Deposit:
    """Cash and card handed to the bank on behalf of a cleaner."""

    id: str
    cleaner_name: str
    site: str
    date: datetime
    cash_amount: Decimal
    card_amount: Decimal
    total_amount: Decimal
    deposit_slip: Optional[str] = None
    auth_code: Optional[str] = None


@dataclass(frozen=True)
class CleanerSummary:
    """Derived balance for one cleaner name. Never persisted."""

    name: str
    total_collections: Decimal
    total_deposits: Decimal
    cash_in_hand: Decimal
    last_collection_date: Optional[datetime]
    days_since_last_collection: Optional[int]


class CleanerAlert(Enum):
    """Dashboard status flags for a cleaner."""

    OVER_LIMIT = "over_limit"
    OVERDUE = "overdue"
    CLEARED = "cleared"


@dataclass(frozen=True)
class OrderBy:
    """Ordering clause for a record query."""

    field: str
    descending: bool = False
