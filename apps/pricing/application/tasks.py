"""
Celery tasks for background processing.
sync_dollar_rate is fired by Celery beat (see CELERY_BEAT_SCHEDULE).
"""

import logging
from enum import Enum
from typing import Dict

from celery import shared_task

from apps.pricing.application.dto import SyncResultDTO
from apps.pricing.domain.exceptions import RateNotInitialized, SourceUnavailable
from apps.pricing.domain.services import DollarRateService, PriceCascadeService
from apps.pricing.infrastructure.providers.registry import get_providers_ordered

logger = logging.getLogger(__name__)


class SyncStage(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    CASCADING = "cascading"
    DONE = "done"
    ERROR = "error"


def run_sync_cycle(force_cascade: bool = False) -> SyncResultDTO:
    """
    Run one synchronization tick: fetch the rate and cascade it when it moved.

    Never raises; failures end the tick in the ERROR stage.

    Args:
        force_cascade: Cascade even when the rate did not change

    Returns:
        SyncResultDTO describing where the tick ended
    """
    result = SyncResultDTO(stage=SyncStage.IDLE.value)

    result.stage = SyncStage.FETCHING.value
    try:
        refresh = DollarRateService.refresh_rate()
    except SourceUnavailable as e:
        logger.error("Dollar sync skipped: %s", e)
        result.stage = SyncStage.ERROR.value
        result.errors.append(str(e))
        result.message = "Dollar rate sources unavailable"
        return result
    except Exception as e:
        logger.exception("Unexpected error fetching the dollar rate")
        result.stage = SyncStage.ERROR.value
        result.errors.append(str(e))
        result.message = "Unexpected error fetching the dollar rate"
        return result

    result.changed = refresh.changed
    result.effective_value = refresh.rate.effective_value

    if not refresh.changed and not force_cascade:
        logger.info("Dollar rate unchanged, no cascade needed")
        result.stage = SyncStage.DONE.value
        result.message = "Dollar rate unchanged"
        return result

    result.stage = SyncStage.CASCADING.value
    try:
        cascade = PriceCascadeService.cascade(refresh.rate.effective_value)
    except Exception as e:
        logger.exception("Unexpected error during the price cascade")
        result.stage = SyncStage.ERROR.value
        result.errors.append(str(e))
        result.message = "Price cascade failed"
        return result

    result.variants_updated = cascade.variants_updated
    result.orders_updated = cascade.orders_updated
    result.errors.extend(cascade.errors)

    if cascade.success:
        result.stage = SyncStage.DONE.value
        result.message = (
            f"Dollar rate {result.effective_value} applied to "
            f"{cascade.variants_updated} variants and {cascade.orders_updated} orders"
        )
    else:
        result.stage = SyncStage.ERROR.value
        result.message = "Price cascade finished with errors"
    return result


@shared_task(name="sync_dollar_rate")
def sync_dollar_rate(force_cascade: bool = False) -> Dict:
    """
    Scheduled dollar rate synchronization.

    Returns:
        Dict with operation results
    """
    result = run_sync_cycle(force_cascade=force_cascade)
    logger.info("Dollar sync finished in stage '%s': %s", result.stage, result.message)
    return result.to_dict()


@shared_task(name="cascade_dollar_prices")
def cascade_dollar_prices() -> Dict:
    """
    Push the stored effective value into variant and order prices.
    Dispatched after manual refreshes and markup changes, and used for recovery.
    """
    try:
        cascade = PriceCascadeService.force_cascade()
    except RateNotInitialized as e:
        logger.warning("Price cascade skipped: %s", e)
        return {
            "success": False,
            "message": str(e),
            "variants_updated": None,
            "orders_updated": None,
            "errors": [str(e)],
        }

    return {
        "success": cascade.success,
        "message": "Price cascade completed" if cascade.success else "Price cascade finished with errors",
        "effective_value": str(cascade.effective_value),
        "variants_updated": cascade.variants_updated,
        "orders_updated": cascade.orders_updated,
        "errors": list(cascade.errors),
    }


@shared_task(name="check_dollar_providers_health")
def check_dollar_providers_health() -> Dict:
    """
    Query each configured provider once and report which ones answer.
    Nothing is persisted.
    """
    results = {}

    for provider in get_providers_ordered():
        fetched = provider.get_rate_data()
        results[str(provider.name)] = {
            "healthy": fetched is not None,
            "base_value": str(fetched.base_value) if fetched else None,
            "source_fetched_at": fetched.source_fetched_at.isoformat() if fetched else None,
        }

    healthy = [name for name, status in results.items() if status["healthy"]]
    logger.info("Dollar provider health: %s/%s healthy", len(healthy), len(results))

    return {
        "success": bool(healthy),
        "healthy_providers": healthy,
        "providers": results,
    }
