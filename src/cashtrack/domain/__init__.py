"""Domain layer for cashtrack application.

Services live in their own modules (``cashtrack.domain.collection`` and so
on); this package only re-exports the entities and error types.
"""

from cashtrack.domain.entities import (
    CleanerAlert,
    CleanerSummary,
    CollectionRecord,
    Deposit,
    OrderBy,
    PendingItem,
)
from cashtrack.domain.errors import DomainError, NotFoundError, StoreError, ValidationError

__all__ = [
    "CleanerAlert",
    "CleanerSummary",
    "CollectionRecord",
    "Deposit",
    "OrderBy",
    "PendingItem",
    "DomainError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
