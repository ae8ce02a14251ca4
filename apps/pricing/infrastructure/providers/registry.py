"""
Provider Registry - Maps ProviderName enum to adapter classes.
The fallback order comes from the DOLLAR_RATE_PROVIDERS setting.
"""

import logging

from core.settings import DOLLAR_RATE_PROVIDERS
from apps.pricing.domain.interfaces import BaseDollarRateProvider
from apps.pricing.infrastructure.persistence.models import ProviderName
from apps.pricing.infrastructure.providers.bluelytics import BluelyticsProvider
from apps.pricing.infrastructure.providers.dolar_api import DolarApiProvider

logger = logging.getLogger(__name__)


# Registry: Maps ProviderName enum to the corresponding adapter class
PROVIDER_REGISTRY: dict[str, type[BaseDollarRateProvider]] = {
    ProviderName.BLUELYTICS: BluelyticsProvider,
    ProviderName.DOLARAPI: DolarApiProvider,
}


def get_provider_instance(provider_name: str) -> BaseDollarRateProvider | None:
    """
    Get an instance of a provider by its name.

    Args:
        provider_name: The provider name from ProviderName enum

    Returns:
        Instance of the provider adapter, or None if not found
    """
    provider_class = PROVIDER_REGISTRY.get(provider_name)

    if provider_class is None:
        logger.warning("Provider '%s' not found in registry", provider_name)
        return None

    return provider_class()


def get_providers_ordered(provider_names: list[str] | None = None) -> list[BaseDollarRateProvider]:
    """
    Get provider instances in fallback order.

    Args:
        provider_names: Explicit order; defaults to DOLLAR_RATE_PROVIDERS

    Returns:
        Provider instances, unknown names skipped
    """
    if provider_names is None:
        provider_names = DOLLAR_RATE_PROVIDERS

    provider_instances = []
    for name in provider_names:
        instance = get_provider_instance(name)
        if instance is not None:
            provider_instances.append(instance)

    return provider_instances
