"""Input checks shared by the record services.

Each check raises ValidationError naming the field, before anything is
written to the store.
"""

from decimal import Decimal
from typing import Optional

from cashtrack.domain.errors import ValidationError

MIN_CLEANER_NAME_LENGTH = 2
CENTS = Decimal("0.01")


def require_text(value: Optional[str], field: str, label: str, min_length: int = 1) -> str:
    """Return ``value`` unchanged, or raise if it has fewer than ``min_length``
    non-blank characters.

    Names are stored exactly as entered; balances group on the raw string.
    """
    if len((value or "").strip()) < min_length:
        if min_length > 1:
            raise ValidationError(f"{label} must be at least {min_length} characters", field=field)
        raise ValidationError(f"{label} is required", field=field)
    return value


def require_cleaner_name(value: Optional[str]) -> str:
    return require_text(value, "cleaner_name", "Cleaner name", MIN_CLEANER_NAME_LENGTH)


def require_site(value: Optional[str]) -> str:
    return require_text(value, "site", "Site")


def require_cents(amount: Decimal, field: str, label: str) -> Decimal:
    """Return ``amount`` at two decimal places, or raise if that would change it.

    Amounts are stored with two decimal places, so finer values are rejected
    rather than rounded on write.
    """
    cents = amount.quantize(CENTS)
    if cents != amount:
        raise ValidationError(f"{label} cannot have more than 2 decimal places", field=field)
    return cents


def require_positive(amount: Optional[Decimal], field: str, label: str) -> Decimal:
    """Return ``amount`` if it is greater than zero and whole cents."""
    if amount is None or not amount > 0:
        raise ValidationError(f"{label} must be greater than 0", field=field)
    return require_cents(amount, field, label)


def require_non_negative(amount: Optional[Decimal], field: str, label: str) -> Decimal:
    """Return ``amount`` (None counts as zero) if it is not negative."""
    if amount is None:
        return Decimal("0")
    if amount < 0:
        raise ValidationError(f"{label} cannot be negative", field=field)
    return require_cents(amount, field, label)


def optional_text(value: Optional[str]) -> Optional[str]:
    """Strip ``value``; blank becomes None."""
    if value is None:
        return None
    text = value.strip()
    return text or None
