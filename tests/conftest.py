import pytest
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import MagicMock

from rest_framework.test import APIClient

from apps.pricing.domain.models import FetchedRate, apply_markup
from apps.pricing.infrastructure.persistence.models import DollarRate, ProviderName

FETCHED_AT = datetime(2024, 5, 21, 14, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def api_client():
    """DRF API client."""
    return APIClient()


@pytest.fixture
def make_fetched_rate():
    """Build a FetchedRate as a provider would return it."""
    def _make(value="1000", provider_name=ProviderName.BLUELYTICS):
        return FetchedRate(
            base_value=Decimal(value),
            provider_name=provider_name,
            source_fetched_at=FETCHED_AT,
        )
    return _make


@pytest.fixture
def make_provider():
    """Build a provider double whose get_rate_data returns the given result."""
    def _make(result, name=ProviderName.BLUELYTICS):
        provider = MagicMock()
        provider.name = name
        provider.get_rate_data.return_value = result
        return provider
    return _make


@pytest.fixture
def make_dollar_rate(db):
    """Persist the dollar rate singleton with a consistent effective value."""
    def _make(base_value="1000", markup_value="0", markup_is_percentage=False):
        base = Decimal(base_value)
        markup = Decimal(markup_value)
        return DollarRate.objects.create(
            base_value=base,
            markup_value=markup,
            markup_is_percentage=markup_is_percentage,
            effective_value=apply_markup(base, markup, markup_is_percentage),
            provider_name=ProviderName.BLUELYTICS,
            source_fetched_at=FETCHED_AT,
        )
    return _make
