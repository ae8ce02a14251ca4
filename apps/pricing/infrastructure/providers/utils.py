from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.utils import timezone
from django.utils.dateparse import parse_datetime


def parse_provider_timestamp(raw) -> datetime:
    """
    Parse an ISO-8601 timestamp from a provider payload.
    Naive values are interpreted in the project time zone.

    Raises:
        ValueError: if the value is missing or not a valid timestamp
    """
    if not isinstance(raw, str):
        raise ValueError(f"Timestamp must be a string, got {raw!r}")

    parsed = parse_datetime(raw)
    if parsed is None:
        raise ValueError(f"Unparseable timestamp {raw!r}")

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def parse_rate_value(raw) -> Decimal:
    """
    Parse a numeric rate from a provider payload.

    Raises:
        ValueError: if the value is not a finite number
    """
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"Rate must be numeric, got {raw!r}")

    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        raise ValueError(f"Rate must be numeric, got {raw!r}")
    if not value.is_finite():
        raise ValueError(f"Rate must be finite, got {raw!r}")
    return value
