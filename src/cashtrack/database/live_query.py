"""Live, push-updated view of one record collection.

A :class:`LiveQuery` keeps an in-memory list of a collection's records in
sync with the store. It registers a store listener while open, reloads the
whole list on every change notification, and tells its subscribers. Callers
must :meth:`~LiveQuery.close` it (or use it as a context manager) so the
store listener is removed.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Union

from sqlalchemy.exc import SQLAlchemyError

from cashtrack.database.base import Database
from cashtrack.domain.entities import OrderBy
from cashtrack.domain.errors import DomainError

logger = logging.getLogger(__name__)

OrderSpec = Union[str, OrderBy]
Subscriber = Callable[["LiveQuery"], None]


def normalize_order(order_by: Sequence[OrderSpec]) -> tuple[OrderBy, ...]:
    """Turn bare field names into ascending :class:`OrderBy` clauses."""
    return tuple(clause if isinstance(clause, OrderBy) else OrderBy(clause) for clause in order_by)


class LiveQuery:
    """Live list of records from one collection, optionally ordered."""

    def __init__(self, db: Database, collection_name: str, order_by: Sequence[OrderSpec] = ()):
        self.db = db
        self.collection_name = collection_name
        self.order_by = normalize_order(order_by)
        self.data: list[Any] = []
        self.loading = True
        self.error: Optional[Exception] = None
        self._subscribers: list[Subscriber] = []
        self._unlisten: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        return self._unlisten is not None

    def start(self) -> "LiveQuery":
        """Attach to the store and load the first snapshot."""
        if self.is_open:
            return self
        try:
            self._unlisten = self.db.listen(self.collection_name, self._on_change)
        except DomainError as e:
            self._fail(e)
            return self
        self._reload()
        return self

    def close(self) -> None:
        """Detach from the store. Safe to call more than once."""
        if self._unlisten is not None:
            self._unlisten()
            self._unlisten = None

    def set_query(self, collection_name: str, order_by: Sequence[OrderSpec] = ()) -> None:
        """Point the query at a new collection or ordering.

        The store listener is only torn down and re-established when the
        collection name or ordering actually changed.
        """
        new_order = normalize_order(order_by)
        if collection_name == self.collection_name and new_order == self.order_by:
            return
        was_open = self.is_open
        self.close()
        self.collection_name = collection_name
        self.order_by = new_order
        self.data = []
        self.loading = True
        self.error = None
        if was_open:
            self.start()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(query)`` after every snapshot. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _on_change(self, collection_name: str) -> None:
        self._reload()

    def _reload(self) -> None:
        try:
            records = self.db.list_records(self.collection_name, order_by=self.order_by)
        except (SQLAlchemyError, DomainError) as e:
            self._fail(e)
            return
        self.data = records
        self.error = None
        self.loading = False
        logger.debug("Snapshot of %s: %d records", self.collection_name, len(records))
        self._publish()

    def _fail(self, error: Exception) -> None:
        logger.error("Live query on %s failed: %s", self.collection_name, error)
        self.error = error
        self.loading = False
        self._publish()

    def _publish(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    def __enter__(self) -> "LiveQuery":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
