"""CSV export of collection records."""

import logging
from datetime import UTC, date
from typing import Iterable, Optional

from cashtrack.database.base import Database
from cashtrack.domain.collection import date_bounds
from cashtrack.domain.entities import COLLECTIONS, CollectionRecord, OrderBy
from cashtrack.domain.errors import ValidationError

logger = logging.getLogger(__name__)

EXPORT_HEADER = ("Date", "Cleaner Name", "Site", "Amount", "Notes")


def quote(value: Optional[str]) -> str:
    """Wrap a text field in double quotes, doubling any inside it."""
    return '"' + (value or "").replace('"', '""') + '"'


def export_filename(start_date: date, end_date: date) -> str:
    return f"collections-export-{start_date.isoformat()}-to-{end_date.isoformat()}.csv"


def format_row(collection: CollectionRecord) -> str:
    """One CSV line: date and amount bare, text fields quoted."""
    return ",".join(
        [
            collection.date.astimezone(UTC).strftime("%Y-%m-%d"),
            quote(collection.cleaner_name),
            quote(collection.site),
            f"{collection.amount:.2f}",
            quote(collection.notes),
        ]
    )


def render_csv(collections: Iterable[CollectionRecord]) -> str:
    """Render collections as CSV text with a header row."""
    lines = [",".join(EXPORT_HEADER)]
    lines.extend(format_row(collection) for collection in collections)
    return "\n".join(lines) + "\n"


class CollectionExportService:
    """Service for exporting collections in a date range to CSV."""

    def __init__(self, db: Database):
        """Initialize export service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_collections(self, start_date: date, end_date: date) -> tuple[str, str]:
        """Export collections dated within [start_date, end_date].

        Args:
            start_date: First calendar day included (UTC)
            end_date: Last calendar day included (UTC)

        Returns:
            Tuple of (filename, CSV text)

        Raises:
            ValidationError: If either date is missing or start_date is after end_date
        """
        if start_date is None or end_date is None:
            raise ValidationError("Both a start and an end date are required", field="start_date")
        start, end = date_bounds(start_date, end_date)

        collections = self.db.list_records(
            COLLECTIONS, order_by=(OrderBy("date"),), start=start, end=end
        )
        logger.info("Exporting %d collections from %s to %s", len(collections), start_date, end_date)
        return export_filename(start_date, end_date), render_csv(collections)
