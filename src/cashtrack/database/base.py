"""Abstract record store interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from cashtrack.domain.entities import (
    CollectionRecord,
    Deposit,
    OrderBy,
    PendingItem,
)

ChangeListener = Callable[[str], None]


class Database(ABC):
    """Abstract record store for cashtrack.

    Three named collections (``collections``, ``deposits``, ``pendingItems``)
    hold flat records keyed by opaque string identifiers. Every successful
    write notifies the listeners registered for the collections it touched.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize store schema (create tables)."""
        pass

    # Change notification
    @abstractmethod
    def listen(self, collection_name: str, callback: ChangeListener) -> Callable[[], None]:
        """Call ``callback(collection_name)`` after each committed change.

        Returns a function that removes the listener.
        """
        pass

    # Generic record operations
    @abstractmethod
    def list_records(
        self,
        collection_name: str,
        order_by: Sequence[OrderBy] = (),
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Any]:
        """List records of a collection.

        Args:
            collection_name: Store collection name
            order_by: Ordering clauses, applied in sequence
            start: Optional inclusive lower bound on ``date``
            end: Optional exclusive upper bound on ``date``
        """
        pass

    @abstractmethod
    def delete_records(self, collection_name: str, record_ids: Sequence[str]) -> int:
        """Delete several records in one atomic batch. Returns count deleted."""
        pass

    @abstractmethod
    def purge_records(
        self, collection_name: str, before: Optional[datetime] = None
    ) -> list[Any]:
        """Delete records dated before ``before`` (all records if None).

        Returns the deleted records so callers can clean up attachments.
        """
        pass

    # Collection operations
    @abstractmethod
    def create_collection(
        self,
        cleaner_name: str,
        site: str,
        date: datetime,
        amount: Decimal,
        notes: Optional[str] = None,
    ) -> str:
        """Create a collection record. Returns its ID."""
        pass

    @abstractmethod
    def get_collection(self, collection_id: str) -> Optional[CollectionRecord]:
        """Get collection record by ID."""
        pass

    @abstractmethod
    def update_collection(self, collection_id: str, **fields: Any) -> None:
        """Update the given fields of a collection record."""
        pass

    @abstractmethod
    def delete_collection(self, collection_id: str) -> None:
        """Delete a collection record."""
        pass

    # Pending item operations
    @abstractmethod
    def create_pending_items(self, items: Sequence[dict[str, Any]]) -> list[str]:
        """Create several pending items in one atomic batch. Returns their IDs."""
        pass

    @abstractmethod
    def get_pending_item(self, item_id: str) -> Optional[PendingItem]:
        """Get pending item by ID."""
        pass

    @abstractmethod
    def update_pending_item(self, item_id: str, **fields: Any) -> None:
        """Update the given fields of a pending item."""
        pass

    @abstractmethod
    def delete_pending_item(self, item_id: str) -> None:
        """Delete a pending item."""
        pass

    @abstractmethod
    def promote_pending_item(self, item_id: str, notes: Optional[str] = None) -> str:
        """Atomically turn a pending item into a collection record.

        The new collection copies cleaner, site, date and amount. Both the
        insert and the delete commit together or not at all.

        Returns:
            ID of the new collection record
        """
        pass

    # Deposit operations
    @abstractmethod
    def create_deposit(
        self,
        cleaner_name: str,
        site: str,
        date: datetime,
        cash_amount: Decimal,
        card_amount: Decimal,
        total_amount: Decimal,
        deposit_slip: Optional[str] = None,
        auth_code: Optional[str] = None,
        deposit_id: Optional[str] = None,
    ) -> str:
        """Create a deposit. Returns its ID (``deposit_id`` if given)."""
        pass

    @abstractmethod
    def get_deposit(self, deposit_id: str) -> Optional[Deposit]:
        """Get deposit by ID."""
        pass

    @abstractmethod
    def update_deposit(self, deposit_id: str, **fields: Any) -> None:
        """Update the given fields of a deposit."""
        pass

    @abstractmethod
    def delete_deposit(self, deposit_id: str) -> None:
        """Delete a deposit."""
        pass
