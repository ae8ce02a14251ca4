"""
Domain services - Core business logic.
Implements the provider fallback chain, the markup rules and the price cascades.
"""

import logging
from decimal import Decimal

from django.db import DatabaseError

from apps.pricing.application.dto import (
    CascadeResultDTO,
    ConversionResultDTO,
    MarkupUpdateResultDTO,
    RefreshResultDTO,
)
from apps.pricing.domain.exceptions import (
    CascadeFailure,
    MarkupValidationError,
    RateNotInitialized,
    SourceUnavailable,
)
from apps.pricing.domain.models import (
    RATE_PRECISION,
    FetchedRate,
    apply_markup,
    normalize_markup,
    to_ars,
)
from apps.pricing.infrastructure.persistence.models import DollarRate
from apps.pricing.infrastructure.persistence.repositories import (
    DollarRateRepository,
    OrderPriceRepository,
    ProductVariantPriceRepository,
)
from apps.pricing.infrastructure.providers.registry import get_providers_ordered

logger = logging.getLogger(__name__)

VARIANTS_STAGE = "product variants"
ORDERS_STAGE = "orders"


class DollarRateService:
    """
    Domain service that owns the USD to ARS rate.

    Fallback strategy:
    1. Query providers in the configured order
    2. If a provider fails, try the next one
    3. Persist only when the base value actually moved
    4. Raise SourceUnavailable if every provider fails
    """

    @staticmethod
    def fetch_rate() -> FetchedRate:
        """
        Walk the providers in order and return the first usable rate.

        Raises:
            SourceUnavailable: if no provider is configured or all of them fail
        """
        providers = get_providers_ordered()

        if not providers:
            logger.error("No dollar rate providers configured")
            raise SourceUnavailable("No dollar rate providers configured")

        for provider in providers:
            provider_name = provider.__class__.__name__
            logger.debug("Trying %s...", provider_name)

            fetched = provider.get_rate_data()
            if fetched is not None:
                logger.info("%s returned dollar rate %s", provider_name, fetched.base_value)
                return fetched

            logger.warning("%s failed, trying next provider", provider_name)

        logger.error("All dollar rate providers failed")
        raise SourceUnavailable()

    @staticmethod
    def get_current_rate() -> DollarRate:
        """
        Get the stored rate, fetching it first if it was never initialized.

        Raises:
            SourceUnavailable: on first use when every provider fails
        """
        rate = DollarRateRepository.read()
        if rate is not None:
            return rate

        logger.info("Dollar rate not initialized, fetching from providers")
        return DollarRateService.refresh_rate().rate

    @staticmethod
    def refresh_rate() -> RefreshResultDTO:
        """
        Fetch the rate and persist it when it differs from the stored base value.

        The markup configuration is never touched here; a new record starts
        with a flat markup of 0.

        Returns:
            RefreshResultDTO with the current record and whether it changed

        Example:
            >>> result = DollarRateService.refresh_rate()
            >>> if result.changed:
            ...     PriceCascadeService.cascade(result.rate.effective_value)
        """
        fetched = DollarRateService.fetch_rate()
        base_value = fetched.base_value.quantize(RATE_PRECISION)

        rate, created = DollarRateRepository.create_if_absent(
            base_value=base_value,
            markup_value=Decimal("0"),
            markup_is_percentage=False,
            effective_value=apply_markup(base_value, Decimal("0"), False),
            provider_name=fetched.provider_name,
            source_fetched_at=fetched.source_fetched_at,
        )
        if created:
            logger.info("Dollar rate initialized at %s (%s)", rate.effective_value, fetched.provider_name)
            return RefreshResultDTO(rate=rate, changed=True)

        previous_base_value = None

        def move_base(locked: DollarRate) -> bool:
            nonlocal previous_base_value
            previous_base_value = locked.base_value
            if locked.base_value == base_value:
                return False
            locked.base_value = base_value
            locked.provider_name = fetched.provider_name
            locked.source_fetched_at = fetched.source_fetched_at
            return True

        rate, changed = DollarRateRepository.apply(move_base)
        if not changed:
            logger.info("Dollar rate unchanged at %s", rate.base_value)
            return RefreshResultDTO(rate=rate, changed=False)

        logger.info(
            "Dollar rate changed %s -> %s, effective value %s (%s)",
            previous_base_value,
            rate.base_value,
            rate.effective_value,
            fetched.provider_name,
        )
        return RefreshResultDTO(rate=rate, changed=True)

    @staticmethod
    def update_markup_config(markup_value, markup_is_percentage) -> MarkupUpdateResultDTO:
        """
        Replace the markup and recompute the effective value from the stored base.
        Never contacts a provider.

        Args:
            markup_value: Non-negative amount (ARS when flat, percent otherwise)
            markup_is_percentage: Whether markup_value is a percentage

        Raises:
            MarkupValidationError: if the markup is negative or not numeric
            RateNotInitialized: if the rate was never fetched
        """
        markup = normalize_markup(markup_value)
        if not isinstance(markup_is_percentage, bool):
            raise MarkupValidationError("is_percentage must be a boolean")

        previous_effective_value = None

        def set_markup(locked: DollarRate) -> bool:
            nonlocal previous_effective_value
            previous_effective_value = locked.effective_value
            locked.markup_value = markup
            locked.markup_is_percentage = markup_is_percentage
            # Config writes persist even when identical
            return True

        rate, _ = DollarRateRepository.apply(set_markup)
        logger.info(
            "Dollar markup set to %s%s, effective value %s -> %s",
            markup,
            "%" if markup_is_percentage else " ARS",
            previous_effective_value,
            rate.effective_value,
        )
        return MarkupUpdateResultDTO(rate=rate, previous_effective_value=previous_effective_value)

    @staticmethod
    def convert_to_ars(amount_usd: Decimal) -> ConversionResultDTO:
        """
        Convert a USD amount with the current effective value.

        Example:
            >>> DollarRateService.convert_to_ars(Decimal("50")).amount_ars
            Decimal('55000.00')
        """
        rate = DollarRateService.get_current_rate()
        return ConversionResultDTO(
            amount_usd=amount_usd,
            rate=rate.effective_value,
            amount_ars=to_ars(amount_usd, rate.effective_value),
        )


class PriceCascadeService:
    """
    Pushes the effective dollar value into every dependent ARS price.

    Each stage is a single bulk UPDATE in its own transaction; a failure in one
    stage is reported and does not stop the other.
    """

    @staticmethod
    def recompute_all_variant_prices(effective_value: Decimal) -> int:
        try:
            updated = ProductVariantPriceRepository.reprice_all(effective_value)
        except DatabaseError as e:
            raise CascadeFailure(VARIANTS_STAGE, e) from e

        logger.info("Repriced %s product variants at %s", updated, effective_value)
        return updated

    @staticmethod
    def recompute_eligible_order_totals(effective_value: Decimal) -> int:
        try:
            updated = OrderPriceRepository.reprice_open_orders(effective_value)
        except DatabaseError as e:
            raise CascadeFailure(ORDERS_STAGE, e) from e

        logger.info("Repriced %s open orders at %s", updated, effective_value)
        return updated

    @staticmethod
    def cascade(effective_value: Decimal) -> CascadeResultDTO:
        """
        Run the variant cascade, then the order cascade.

        Returns:
            CascadeResultDTO with per-stage counts and error messages
        """
        result = CascadeResultDTO(effective_value=effective_value)

        try:
            result.variants_updated = PriceCascadeService.recompute_all_variant_prices(effective_value)
        except CascadeFailure as e:
            logger.exception("Cascade stage '%s' failed", e.stage)
            result.errors.append(str(e))

        try:
            result.orders_updated = PriceCascadeService.recompute_eligible_order_totals(effective_value)
        except CascadeFailure as e:
            logger.exception("Cascade stage '%s' failed", e.stage)
            result.errors.append(str(e))

        return result

    @staticmethod
    def force_cascade() -> CascadeResultDTO:
        """
        Cascade the stored effective value whether or not it changed recently.

        Raises:
            RateNotInitialized: if the rate was never fetched
        """
        rate = DollarRateRepository.read()
        if rate is None:
            raise RateNotInitialized()

        logger.info("Forcing price cascade at %s", rate.effective_value)
        return PriceCascadeService.cascade(rate.effective_value)
