"""
Repository pattern implementation.
Abstracts database access to decouple domain logic from persistence.
"""

import logging
from decimal import Decimal
from typing import Callable, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import DecimalField, F, Value
from django.db.models.functions import Round
from django.utils import timezone

from apps.catalog.models import ProductVariant
from apps.orders.models import REPRICEABLE_STATUSES, Order
from apps.pricing.domain.exceptions import PersistenceConflict, RateNotInitialized
from apps.pricing.domain.models import apply_markup
from apps.pricing.infrastructure.persistence.models import DOLLAR_RATE_KEY, DollarRate

logger = logging.getLogger(__name__)


def _rate_value(effective_value: Decimal) -> Value:
    return Value(effective_value, output_field=DecimalField(max_digits=20, decimal_places=8))


class DollarRateRepository:
    """Repository for the DollarRate singleton."""

    @staticmethod
    def read() -> Optional[DollarRate]:
        """Get the dollar rate record, or None before the first fetch."""
        return DollarRate.objects.filter(key=DOLLAR_RATE_KEY).first()

    @staticmethod
    def create_if_absent(**fields) -> Tuple[DollarRate, bool]:
        """
        Create the record by the well-known key unless it already exists.
        An existing record is returned untouched.

        Returns:
            (record, created)
        """
        try:
            return DollarRateRepository._get_or_create(fields)
        except PersistenceConflict as e:
            rate = DollarRateRepository.read()
            if rate is None:
                raise
            logger.warning("Dollar rate creation raced with another writer, using its record: %s", e)
            return rate, False

    @staticmethod
    def apply(mutate: Callable[[DollarRate], bool]) -> Tuple[DollarRate, bool]:
        """
        Mutate the record under a row lock and keep effective_value consistent.

        mutate receives the locked row and returns whether it changed anything.
        The effective value is then recomputed from the locked row's base and
        markup before saving, so concurrent writers never combine stale values.

        Returns:
            (record, changed)

        Raises:
            RateNotInitialized: if the record does not exist
        """
        with transaction.atomic():
            try:
                rate = DollarRate.objects.select_for_update().get(key=DOLLAR_RATE_KEY)
            except DollarRate.DoesNotExist:
                raise RateNotInitialized()

            changed = mutate(rate)
            if changed:
                rate.effective_value = apply_markup(
                    rate.base_value, rate.markup_value, rate.markup_is_percentage
                )
                rate.save()
        return rate, changed

    @staticmethod
    def _get_or_create(fields: dict) -> Tuple[DollarRate, bool]:
        try:
            with transaction.atomic():
                return DollarRate.objects.get_or_create(
                    key=DOLLAR_RATE_KEY,
                    defaults=fields,
                )
        except IntegrityError as e:
            raise PersistenceConflict(str(e)) from e


class ProductVariantPriceRepository:
    """Bulk price writes for ProductVariant."""

    @staticmethod
    def reprice_all(effective_value: Decimal) -> int:
        """Set price_ars = ROUND(price_usd * rate, 2) on every variant in one UPDATE."""
        with transaction.atomic():
            return ProductVariant.objects.update(
                price_ars=Round(F("price_usd") * _rate_value(effective_value), 2),
                updated_at=timezone.now(),
            )


class OrderPriceRepository:
    """Bulk ARS total writes for orders that are still unpaid."""

    @staticmethod
    def reprice_open_orders(effective_value: Decimal) -> int:
        """Recompute total_amount_ars for re-priceable orders only; the rest stay frozen."""
        with transaction.atomic():
            return Order.objects.filter(status__in=REPRICEABLE_STATUSES).update(
                total_amount_ars=Round(F("total_amount") * _rate_value(effective_value), 2),
                exchange_rate=effective_value,
                updated_at=timezone.now(),
            )
