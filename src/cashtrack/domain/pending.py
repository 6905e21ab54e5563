"""Pending item domain service."""

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from cashtrack.database.base import Database
from cashtrack.domain.entities import PENDING_ITEMS, OrderBy, PendingItem
from cashtrack.domain.errors import NotFoundError, record_not_found
from cashtrack.domain.validation import (
    require_cleaner_name,
    require_positive,
    require_site,
    require_text,
)
from cashtrack.utils.date_parser import utc_now

logger = logging.getLogger(__name__)

OLDEST_FIRST = (OrderBy("date"),)


def collected_note(car_plate: str) -> str:
    """Notes stored on a collection created from a pending item."""
    return f"Collected from pending: {car_plate}"


def validate_pending_fields(
    cleaner_name: str, site: str, car_plate: str, amount: Decimal
) -> dict:
    """Validate a pending item and return its store fields."""
    return {
        "cleaner_name": require_cleaner_name(cleaner_name),
        "site": require_site(site),
        "car_plate": require_text(car_plate, "car_plate", "Car plate"),
        "amount": require_positive(amount, "amount", "Amount"),
    }


class PendingService:
    """Service for reviewing pending items.

    A pending item is either collected (becomes a collection record),
    rejected (deleted), or edited in place.
    """

    def __init__(self, db: Database):
        """Initialize pending service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_item(
        self,
        cleaner_name: str,
        site: str,
        car_plate: str,
        amount: Decimal,
        date: Optional[datetime] = None,
    ) -> str:
        """Add a pending item by hand. Returns its ID."""
        fields = validate_pending_fields(cleaner_name, site, car_plate, amount)
        fields["date"] = date or utc_now()
        (item_id,) = self.db.create_pending_items([fields])
        logger.info("Added pending item %s (%s)", item_id, fields["car_plate"])
        return item_id

    def get_item(self, item_id: str) -> Optional[PendingItem]:
        """Get pending item by ID, or None."""
        return self.db.get_pending_item(item_id)

    def require_item(self, item_id: str) -> PendingItem:
        """Get pending item by ID.

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self.db.get_pending_item(item_id)
        if item is None:
            raise NotFoundError(record_not_found("Pending item", item_id))
        return item

    def update_item(
        self,
        item_id: str,
        cleaner_name: Optional[str] = None,
        site: Optional[str] = None,
        car_plate: Optional[str] = None,
        amount: Optional[Decimal] = None,
    ) -> None:
        """Edit a pending item in place; it stays pending.

        Raises:
            NotFoundError: If the item does not exist
            ValidationError: If the edited item would be invalid
        """
        item = self.require_item(item_id)
        fields = validate_pending_fields(
            cleaner_name if cleaner_name is not None else item.cleaner_name,
            site if site is not None else item.site,
            car_plate if car_plate is not None else item.car_plate,
            amount if amount is not None else item.amount,
        )
        self.db.update_pending_item(item_id, **fields)
        logger.info("Updated pending item %s", item_id)

    def collect_item(self, item_id: str) -> str:
        """Confirm a pending item as collected.

        Creates a collection record with the item's cleaner, site, date and
        amount and deletes the item, as one atomic store write.

        Returns:
            ID of the new collection record

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self.require_item(item_id)
        collection_id = self.db.promote_pending_item(item_id, notes=collected_note(item.car_plate))
        logger.info("Collected pending item %s as collection %s", item_id, collection_id)
        return collection_id

    def reject_item(self, item_id: str) -> None:
        """Delete a pending item without recording a collection.

        Raises:
            NotFoundError: If the item does not exist
        """
        self.require_item(item_id)
        self.db.delete_pending_item(item_id)
        logger.info("Rejected pending item %s", item_id)

    def reject_items(self, item_ids: Sequence[str]) -> int:
        """Reject several pending items in one atomic batch."""
        deleted = self.db.delete_records(PENDING_ITEMS, list(item_ids))
        logger.info("Rejected %d pending items", deleted)
        return deleted

    def list_items(self) -> list[PendingItem]:
        """List pending items, oldest first."""
        return self.db.list_records(PENDING_ITEMS, order_by=OLDEST_FIRST)

    def items_by_cleaner(self) -> dict[str, list[PendingItem]]:
        """Pending items grouped by cleaner name, oldest first within a group."""
        grouped: dict[str, list[PendingItem]] = defaultdict(list)
        for item in self.list_items():
            grouped[item.cleaner_name].append(item)
        return dict(grouped)

    def purge_items(self, older_than: Optional[datetime] = None) -> int:
        """Delete pending items dated before ``older_than``, or all of them."""
        deleted = self.db.purge_records(PENDING_ITEMS, before=older_than)
        logger.info("Purged %d pending items", len(deleted))
        return len(deleted)
