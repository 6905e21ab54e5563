"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic.

    ``field`` names the offending input when there is one, so callers can
    report the problem next to that field.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Requested record or blob does not exist."""


class StoreError(DomainError):
    """A write or delete against the record store failed and was rolled back."""


def record_not_found(kind: str, record_id: str) -> str:
    """Return message for a missing record."""
    return f"{kind} '{record_id}' not found"


def unknown_collection(name: str) -> str:
    """Return message for an unknown record collection name."""
    return f"Unknown collection '{name}'"


def unknown_order_field(collection_name: str, field: str) -> str:
    """Return message for an ordering field the collection does not have."""
    return f"Collection '{collection_name}' has no field '{field}'"
