"""Import of pasted tabular text into pending items."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from cashtrack.database.base import Database
from cashtrack.domain.errors import ValidationError
from cashtrack.domain.validation import require_positive
from cashtrack.utils.amount_parser import strip_to_decimal
from cashtrack.utils.date_parser import utc_now

logger = logging.getLogger(__name__)

_DELIMITER = re.compile(r"\t|,")

# Field -> substring its header must contain (matched case-insensitively)
HEADER_KEYS = {
    "car_plate": "plate",
    "amount": "contract amount cash",
    "cleaner_name": "cleaner name",
    "site": "site name",
}

REQUIRED_COLUMNS_MESSAGE = (
    "Could not find all required columns: Plate, Contract Amount Cash, Cleaner Name, Site Name."
)


@dataclass(frozen=True)
class ParsedImport:
    """Result of parsing pasted text, before anything is stored."""

    items: list[dict[str, Any]]
    errors: list[str]


def split_line(line: str) -> list[str]:
    """Split a row on tabs or commas."""
    return _DELIMITER.split(line)


def locate_columns(header_line: str) -> dict[str, int]:
    """Find the column index of each required field in the header row.

    Raises:
        ValidationError: If any required column is missing
    """
    headers = [header.strip() for header in split_line(header_line.lower())]
    indices = {}
    for field, key in HEADER_KEYS.items():
        index = next((i for i, header in enumerate(headers) if key in header), None)
        if index is None:
            raise ValidationError(REQUIRED_COLUMNS_MESSAGE, field=field)
        indices[field] = index
    return indices


def _cell(columns: list[str], index: int) -> Optional[str]:
    if index >= len(columns):
        return None
    return columns[index].strip() or None


def parse_pending_text(text: str, now: Optional[datetime] = None) -> ParsedImport:
    """Parse pasted text (header row plus data rows) into pending items.

    Rows missing a field, or whose amount is not a positive whole-cent number
    once non-numeric characters are stripped, are skipped and reported as
    errors. Every accepted row is dated ``now``.

    Raises:
        ValidationError: If the text is empty or the header lacks a required column
    """
    lines = (text or "").strip().split("\n")
    header_line = lines.pop(0).strip()
    if not header_line:
        raise ValidationError("Pasted data is empty.")

    indices = locate_columns(header_line)
    stamp = now or utc_now()
    items = []
    errors = []

    for row_num, line in enumerate(lines, start=2):
        if not line.strip():
            continue
        columns = split_line(line.rstrip("\r"))

        cleaner_name = _cell(columns, indices["cleaner_name"])
        site = _cell(columns, indices["site"])
        car_plate = _cell(columns, indices["car_plate"])
        amount_str = _cell(columns, indices["amount"])

        amount: Optional[Decimal] = None
        if amount_str:
            try:
                amount = require_positive(strip_to_decimal(amount_str), "amount", "Amount")
            except ValueError:
                amount = None

        if cleaner_name and site and car_plate and amount is not None:
            items.append(
                {
                    "cleaner_name": cleaner_name,
                    "site": site,
                    "car_plate": car_plate,
                    "amount": amount,
                    "date": stamp,
                }
            )
        else:
            message = (
                f"Row {row_num}: Invalid data (cleaner name={cleaner_name!r}, site={site!r}, "
                f"plate={car_plate!r}, amount={amount_str!r})"
            )
            logger.debug("Skipping %s", message)
            errors.append(message)

    return ParsedImport(items=items, errors=errors)


class PendingImportService:
    """Service for importing pasted pending lists."""

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db

    def import_text(self, text: str, now: Optional[datetime] = None) -> dict[str, Any]:
        """Parse pasted text and store every valid row as a pending item.

        All items are written in one atomic batch.

        Returns:
            Dict with import statistics:
            - imported: number of pending items created
            - item_ids: their IDs
            - errors: list of skipped-row messages

        Raises:
            ValidationError: If the text is empty, a required column is
                missing, or no row is valid
        """
        parsed = parse_pending_text(text, now=now)
        if not parsed.items:
            raise ValidationError(
                "No valid data found to import. Please check the format and try again."
            )

        item_ids = self.db.create_pending_items(parsed.items)
        logger.info(
            "Imported %d pending items (%d rows skipped)", len(item_ids), len(parsed.errors)
        )
        return {
            "imported": len(item_ids),
            "item_ids": item_ids,
            "errors": parsed.errors,
        }
