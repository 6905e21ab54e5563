"""Bank deposit domain service."""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from cashtrack.database.base import Database
from cashtrack.database.models import new_record_id
from cashtrack.database.slip_store import FileSlipStore
from cashtrack.domain.collection import NEWEST_FIRST, date_bounds
from cashtrack.domain.entities import DEPOSITS, Deposit
from cashtrack.domain.errors import NotFoundError, ValidationError, record_not_found
from cashtrack.domain.validation import (
    optional_text,
    require_cleaner_name,
    require_non_negative,
    require_site,
)
from cashtrack.utils.date_parser import utc_now

logger = logging.getLogger(__name__)


def deposit_amounts(
    cash_amount: Optional[Decimal], card_amount: Optional[Decimal]
) -> tuple[Decimal, Decimal, Decimal]:
    """Validate the two deposit parts and return them with their total.

    Missing parts count as zero. The total is the sum of the validated parts,
    so it matches what is stored for them.

    Raises:
        ValidationError: If a part is negative or neither part is positive
    """
    cash = require_non_negative(cash_amount, "cash_amount", "Cash amount")
    card = require_non_negative(card_amount, "card_amount", "Card amount")
    if not (cash > 0 or card > 0):
        raise ValidationError(
            "At least one amount (cash or card) must be greater than 0.", field="cash_amount"
        )
    return cash, card, cash + card


class DepositService:
    """Service for managing bank deposits and their slips."""

    def __init__(self, db: Database, slip_store: Optional[FileSlipStore] = None):
        """Initialize deposit service.

        Args:
            db: Database instance
            slip_store: Where deposit slip images are kept. Needed only when
                slips are attached or removed.
        """
        self.db = db
        self.slip_store = slip_store

    def _require_slip_store(self) -> FileSlipStore:
        if self.slip_store is None:
            raise ValidationError("No deposit slip store is configured", field="deposit_slip")
        return self.slip_store

    def create_deposit(
        self,
        cleaner_name: str,
        site: str,
        cash_amount: Optional[Decimal] = None,
        card_amount: Optional[Decimal] = None,
        date: Optional[datetime] = None,
        auth_code: Optional[str] = None,
        slip_data_uri: Optional[str] = None,
    ) -> str:
        """Record a bank deposit.

        The total is always computed as cash + card. A slip, when given, is
        uploaded under the new deposit's ID before the record is written.

        Returns:
            Deposit ID

        Raises:
            ValidationError: If any field is invalid
        """
        cleaner_name = require_cleaner_name(cleaner_name)
        site = require_site(site)
        cash, card, total = deposit_amounts(cash_amount, card_amount)

        deposit_id = new_record_id()
        slip_url = None
        if slip_data_uri:
            slip_url = self._require_slip_store().upload_data_uri(deposit_id, slip_data_uri)

        self.db.create_deposit(
            cleaner_name=cleaner_name,
            site=site,
            date=date or utc_now(),
            cash_amount=cash,
            card_amount=card,
            total_amount=total,
            deposit_slip=slip_url,
            auth_code=optional_text(auth_code),
            deposit_id=deposit_id,
        )
        logger.info("Recorded deposit %s for %s: %s", deposit_id, cleaner_name, total)
        return deposit_id

    def get_deposit(self, deposit_id: str) -> Optional[Deposit]:
        """Get deposit by ID, or None."""
        return self.db.get_deposit(deposit_id)

    def require_deposit(self, deposit_id: str) -> Deposit:
        """Get deposit by ID.

        Raises:
            NotFoundError: If the deposit does not exist
        """
        deposit = self.db.get_deposit(deposit_id)
        if deposit is None:
            raise NotFoundError(record_not_found("Deposit", deposit_id))
        return deposit

    def update_deposit(
        self,
        deposit_id: str,
        cleaner_name: Optional[str] = None,
        site: Optional[str] = None,
        cash_amount: Optional[Decimal] = None,
        card_amount: Optional[Decimal] = None,
        date: Optional[datetime] = None,
        auth_code: Optional[str] = None,
        slip_data_uri: Optional[str] = None,
        clear_slip: bool = False,
    ) -> None:
        """Update a deposit.

        Amounts not given keep their stored values; the total is recomputed
        from both parts. A new slip replaces the stored one; ``clear_slip``
        removes it.

        Raises:
            NotFoundError: If the deposit does not exist
            ValidationError: If the resulting deposit would be invalid
        """
        if slip_data_uri and clear_slip:
            raise ValidationError("Cannot both attach and clear a deposit slip", field="deposit_slip")

        existing = self.require_deposit(deposit_id)

        fields = {}
        if cleaner_name is not None:
            fields["cleaner_name"] = require_cleaner_name(cleaner_name)
        if site is not None:
            fields["site"] = require_site(site)
        if date is not None:
            fields["date"] = date
        if auth_code is not None:
            fields["auth_code"] = optional_text(auth_code)

        cash = existing.cash_amount if cash_amount is None else cash_amount
        card = existing.card_amount if card_amount is None else card_amount
        cash, card, total = deposit_amounts(cash, card)
        fields["cash_amount"] = cash
        fields["card_amount"] = card
        fields["total_amount"] = total

        if slip_data_uri:
            fields["deposit_slip"] = self._require_slip_store().upload_data_uri(
                deposit_id, slip_data_uri
            )
        elif clear_slip and existing.deposit_slip:
            self._discard_slips([existing])
            fields["deposit_slip"] = None

        self.db.update_deposit(deposit_id, **fields)
        logger.info("Updated deposit %s", deposit_id)

    def delete_deposit(self, deposit_id: str) -> None:
        """Delete a deposit, then its slip.

        The slip is removed after the record; if that fails the slip is left
        behind and the failure is logged.

        Raises:
            NotFoundError: If the deposit does not exist
        """
        deposit = self.require_deposit(deposit_id)
        self.db.delete_deposit(deposit_id)
        logger.info("Deleted deposit %s", deposit_id)
        self._discard_slips([deposit])

    def delete_deposits(self, deposit_ids: Sequence[str]) -> int:
        """Delete several deposits in one atomic batch, then their slips."""
        unique_ids = list(dict.fromkeys(deposit_ids))
        deposits = [self.require_deposit(deposit_id) for deposit_id in unique_ids]
        deleted = self.db.delete_records(DEPOSITS, unique_ids)
        logger.info("Deleted %d deposits", deleted)
        self._discard_slips(deposits)
        return deleted

    def list_deposits(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[Deposit]:
        """List deposits, newest first, optionally within a date range."""
        start, end = date_bounds(start_date, end_date)
        return self.db.list_records(DEPOSITS, order_by=NEWEST_FIRST, start=start, end=end)

    def purge_deposits(self, older_than: Optional[datetime] = None) -> int:
        """Delete deposits dated before ``older_than`` (or all), then their slips."""
        deleted = self.db.purge_records(DEPOSITS, before=older_than)
        logger.info("Purged %d deposits", len(deleted))
        self._discard_slips(deleted)
        return len(deleted)

    def _discard_slips(self, deposits: Iterable[Deposit]) -> None:
        """Best-effort slip removal; failures leave orphaned files."""
        for deposit in deposits:
            if not deposit.deposit_slip:
                continue
            if self.slip_store is None:
                logger.warning("No slip store configured; slip for deposit %s left behind", deposit.id)
                continue
            try:
                self.slip_store.delete(deposit.deposit_slip)
            except (NotFoundError, ValidationError, OSError):
                logger.exception("Could not delete slip for deposit %s", deposit.id)
