"""Cash collection domain service."""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from cashtrack.database.base import Database
from cashtrack.domain.entities import COLLECTIONS, PENDING_ITEMS, CollectionRecord, OrderBy
from cashtrack.domain.errors import NotFoundError, ValidationError, record_not_found
from cashtrack.domain.validation import (
    optional_text,
    require_cleaner_name,
    require_positive,
    require_site,
)
from cashtrack.utils.date_parser import start_of_day, utc_now

logger = logging.getLogger(__name__)

NEWEST_FIRST = (OrderBy("date", descending=True),)


def date_bounds(
    start_date: Optional[date], end_date: Optional[date]
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Turn an inclusive calendar-day range into [start, end) instants.

    Raises:
        ValidationError: If start_date is after end_date
    """
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValidationError(
            f"Start date {start_date} is after end date {end_date}", field="start_date"
        )
    start = start_of_day(start_date) if start_date is not None else None
    end = start_of_day(end_date + timedelta(days=1)) if end_date is not None else None
    return start, end


class CollectionService:
    """Service for managing cash collection records."""

    def __init__(self, db: Database):
        """Initialize collection service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_collection(
        self,
        cleaner_name: str,
        site: str,
        amount: Decimal,
        date: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> str:
        """Record a cash collection.

        Args:
            cleaner_name: Cleaner who handed over the cash
            site: Site the cash came from
            amount: Amount collected, greater than zero
            date: When it was collected (defaults to now)
            notes: Optional notes

        Returns:
            Collection ID

        Raises:
            ValidationError: If any field is invalid
        """
        cleaner_name = require_cleaner_name(cleaner_name)
        site = require_site(site)
        amount = require_positive(amount, "amount", "Amount")

        collection_id = self.db.create_collection(
            cleaner_name=cleaner_name,
            site=site,
            date=date or utc_now(),
            amount=amount,
            notes=optional_text(notes),
        )
        logger.info("Recorded collection %s for %s: %s", collection_id, cleaner_name, amount)
        return collection_id

    def get_collection(self, collection_id: str) -> Optional[CollectionRecord]:
        """Get collection record by ID, or None."""
        return self.db.get_collection(collection_id)

    def require_collection(self, collection_id: str) -> CollectionRecord:
        """Get collection record by ID.

        Raises:
            NotFoundError: If the record does not exist
        """
        collection = self.db.get_collection(collection_id)
        if collection is None:
            raise NotFoundError(record_not_found("Collection", collection_id))
        return collection

    def update_collection(
        self,
        collection_id: str,
        cleaner_name: Optional[str] = None,
        site: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Update the provided fields of a collection record.

        Raises:
            NotFoundError: If the record does not exist
            ValidationError: If any provided field is invalid
        """
        self.require_collection(collection_id)

        fields = {}
        if cleaner_name is not None:
            fields["cleaner_name"] = require_cleaner_name(cleaner_name)
        if site is not None:
            fields["site"] = require_site(site)
        if amount is not None:
            fields["amount"] = require_positive(amount, "amount", "Amount")
        if date is not None:
            fields["date"] = date
        if notes is not None:
            fields["notes"] = optional_text(notes)

        if fields:
            self.db.update_collection(collection_id, **fields)
            logger.info("Updated collection %s: %s", collection_id, ", ".join(sorted(fields)))

    def delete_collection(self, collection_id: str) -> None:
        """Delete a collection record.

        Raises:
            NotFoundError: If the record does not exist
        """
        self.require_collection(collection_id)
        self.db.delete_collection(collection_id)
        logger.info("Deleted collection %s", collection_id)

    def delete_collections(self, collection_ids: Sequence[str]) -> int:
        """Delete several collection records in one atomic batch."""
        deleted = self.db.delete_records(COLLECTIONS, list(collection_ids))
        logger.info("Deleted %d collections", deleted)
        return deleted

    def list_collections(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[CollectionRecord]:
        """List collections, newest first, optionally within a date range."""
        start, end = date_bounds(start_date, end_date)
        return self.db.list_records(COLLECTIONS, order_by=NEWEST_FIRST, start=start, end=end)

    def purge_collections(self, older_than: Optional[datetime] = None) -> int:
        """Delete collections dated before ``older_than``, or all of them."""
        deleted = self.db.purge_records(COLLECTIONS, before=older_than)
        logger.info("Purged %d collections", len(deleted))
        return len(deleted)

    def known_cleaners(self) -> list[str]:
        """Distinct cleaner names seen in collections and pending items."""
        return self._distinct("cleaner_name")

    def known_sites(self) -> list[str]:
        """Distinct site names seen in collections and pending items."""
        return self._distinct("site")

    def _distinct(self, attribute: str) -> list[str]:
        values = set()
        for name in (COLLECTIONS, PENDING_ITEMS):
            for record in self.db.list_records(name):
                value = getattr(record, attribute)
                if value:
                    values.add(value)
        return sorted(values)
