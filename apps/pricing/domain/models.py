"""
Pure domain entities (POPOs).
No dependency on Django or the ORM.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from apps.pricing.domain.exceptions import MarkupValidationError

ARS_MINOR_UNIT = Decimal("0.01")
RATE_PRECISION = Decimal("0.00000001")


@dataclass(frozen=True)
class FetchedRate:
    """A raw USD to ARS rate as reported by one provider."""

    base_value: Decimal
    provider_name: str
    source_fetched_at: datetime

    def __post_init__(self):
        if self.base_value <= 0:
            raise ValueError(f"base_value must be positive, got {self.base_value}")


def normalize_markup(markup_value) -> Decimal:
    """
    Coerce a markup into a non-negative Decimal.

    Raises:
        MarkupValidationError: if the value is not numeric, not finite, or negative
    """
    if isinstance(markup_value, bool):
        raise MarkupValidationError("added_value must be a number")
    try:
        markup = markup_value if isinstance(markup_value, Decimal) else Decimal(str(markup_value))
    except (InvalidOperation, TypeError, ValueError):
        raise MarkupValidationError("added_value must be a number")

    if not markup.is_finite():
        raise MarkupValidationError("added_value must be a finite number")
    if markup < 0:
        raise MarkupValidationError("added_value must be greater than or equal to 0")
    return markup


def apply_markup(base_value: Decimal, markup_value: Decimal, is_percentage: bool) -> Decimal:
    """
    Compute the effective dollar value.

    Percentage markups scale the base (1000 at 10% -> 1100); flat markups are
    added to it (1000 + 50 -> 1050). The result keeps rate precision and is
    never rounded to the ARS minor unit.

    Example:
        >>> apply_markup(Decimal("1000"), Decimal("10"), True)
        Decimal('1100.00000000')
    """
    if is_percentage:
        effective = base_value * (Decimal("1") + markup_value / Decimal("100"))
    else:
        effective = base_value + markup_value
    return effective.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP)


def to_ars(amount_usd: Decimal, effective_value: Decimal) -> Decimal:
    """Convert USD to ARS, rounded half-up to cents."""
    return (amount_usd * effective_value).quantize(ARS_MINOR_UNIT, rounding=ROUND_HALF_UP)
