import pytest
from decimal import Decimal
from unittest.mock import patch

from django.db.models import QuerySet

from apps.pricing.domain.exceptions import (
    MarkupValidationError,
    RateNotInitialized,
    SourceUnavailable,
)
from apps.pricing.domain.services import DollarRateService
from apps.pricing.infrastructure.persistence.models import (
    DOLLAR_RATE_KEY,
    DollarRate,
    ProviderName,
)
from apps.pricing.infrastructure.persistence.repositories import DollarRateRepository

PROVIDERS_PATH = 'apps.pricing.domain.services.get_providers_ordered'


class TestFetchRate:
    """Tests for the provider fallback chain."""

    @patch(PROVIDERS_PATH)
    def test_primary_provider_wins(self, mock_providers, make_provider, make_fetched_rate):
        """The fallback provider is not called when the primary answers."""
        primary = make_provider(make_fetched_rate("1000"))
        fallback = make_provider(make_fetched_rate("999", ProviderName.DOLARAPI), ProviderName.DOLARAPI)
        mock_providers.return_value = [primary, fallback]

        fetched = DollarRateService.fetch_rate()

        assert fetched.base_value == Decimal("1000")
        assert fetched.provider_name == ProviderName.BLUELYTICS
        fallback.get_rate_data.assert_not_called()

    @patch(PROVIDERS_PATH)
    def test_falls_back_to_secondary(self, mock_providers, make_provider, make_fetched_rate):
        primary = make_provider(None)
        fallback = make_provider(make_fetched_rate("1010", ProviderName.DOLARAPI), ProviderName.DOLARAPI)
        mock_providers.return_value = [primary, fallback]

        fetched = DollarRateService.fetch_rate()

        assert fetched.base_value == Decimal("1010")
        assert fetched.provider_name == ProviderName.DOLARAPI
        primary.get_rate_data.assert_called_once()

    @patch(PROVIDERS_PATH)
    def test_all_providers_fail(self, mock_providers, make_provider):
        mock_providers.return_value = [make_provider(None), make_provider(None, ProviderName.DOLARAPI)]

        with pytest.raises(SourceUnavailable):
            DollarRateService.fetch_rate()

    @patch(PROVIDERS_PATH)
    def test_no_providers_configured(self, mock_providers):
        mock_providers.return_value = []

        with pytest.raises(SourceUnavailable):
            DollarRateService.fetch_rate()


@pytest.mark.django_db(transaction=True)
class TestRefreshRate:
    """Tests for DollarRateService.refresh_rate."""

    @patch(PROVIDERS_PATH)
    def test_first_fetch_creates_record(self, mock_providers, make_provider, make_fetched_rate):
        """A new record starts with a flat markup of 0."""
        mock_providers.return_value = [make_provider(make_fetched_rate("1000"))]

        result = DollarRateService.refresh_rate()

        assert result.changed is True
        assert DollarRate.objects.count() == 1
        rate = DollarRate.objects.get()
        assert rate.key == DOLLAR_RATE_KEY
        assert rate.base_value == Decimal("1000")
        assert rate.markup_value == Decimal("0")
        assert rate.markup_is_percentage is False
        assert rate.effective_value == Decimal("1000")
        assert rate.provider_name == ProviderName.BLUELYTICS

    @patch(PROVIDERS_PATH)
    def test_unchanged_value_is_not_written(self, mock_providers, make_provider, make_fetched_rate,
                                            make_dollar_rate):
        """Fetched 1000 equals stored 1000: nothing changes."""
        make_dollar_rate(base_value="1000")
        mock_providers.return_value = [make_provider(make_fetched_rate("1000"))]

        with patch.object(DollarRate, "save") as mock_save:
            result = DollarRateService.refresh_rate()

        assert result.changed is False
        assert result.rate.base_value == Decimal("1000")
        mock_save.assert_not_called()

    @patch(PROVIDERS_PATH)
    def test_second_refresh_with_same_value_reports_unchanged(self, mock_providers, make_provider,
                                                              make_fetched_rate):
        mock_providers.return_value = [make_provider(make_fetched_rate("1000"))]

        first = DollarRateService.refresh_rate()
        updated_at = DollarRate.objects.get().updated_at
        second = DollarRateService.refresh_rate()

        assert first.changed is True
        assert second.changed is False
        assert DollarRate.objects.get().updated_at == updated_at

    @patch(PROVIDERS_PATH)
    def test_changed_value_keeps_markup(self, mock_providers, make_provider, make_fetched_rate,
                                        make_dollar_rate):
        """A new base value is re-marked-up with the existing configuration."""
        make_dollar_rate(base_value="1000", markup_value="10", markup_is_percentage=True)
        mock_providers.return_value = [
            make_provider(make_fetched_rate("1200", ProviderName.DOLARAPI), ProviderName.DOLARAPI)
        ]

        result = DollarRateService.refresh_rate()

        assert result.changed is True
        rate = DollarRate.objects.get()
        assert rate.base_value == Decimal("1200")
        assert rate.markup_value == Decimal("10")
        assert rate.markup_is_percentage is True
        assert rate.effective_value == Decimal("1320")
        assert rate.provider_name == ProviderName.DOLARAPI

    @patch(PROVIDERS_PATH)
    def test_markup_change_between_read_and_write_is_kept(self, mock_providers, make_provider,
                                                          make_fetched_rate, make_dollar_rate):
        """A markup saved while the refresh is in flight still applies to the new base."""
        make_dollar_rate(base_value="1000")
        mock_providers.return_value = [make_provider(make_fetched_rate("1200"))]
        create_if_absent = DollarRateRepository.create_if_absent

        def create_then_edit_markup(**fields):
            found = create_if_absent(**fields)
            DollarRateService.update_markup_config(Decimal("10"), True)
            return found

        with patch(
            'apps.pricing.domain.services.DollarRateRepository.create_if_absent',
            side_effect=create_then_edit_markup,
        ):
            result = DollarRateService.refresh_rate()

        assert result.changed is True
        rate = DollarRate.objects.get()
        assert rate.base_value == Decimal("1200")
        assert rate.markup_value == Decimal("10")
        assert rate.markup_is_percentage is True
        assert rate.effective_value == Decimal("1320")
        assert result.rate.effective_value == Decimal("1320")

    @patch(PROVIDERS_PATH)
    def test_racing_first_fetches_leave_one_record(self, mock_providers, make_provider, make_fetched_rate):
        """A second initializer inserts the row after our lookup missed it."""
        provider = make_provider(None)
        provider.get_rate_data.side_effect = [make_fetched_rate("1000"), make_fetched_rate("1100")]
        mock_providers.return_value = [provider]
        real_get = QuerySet.get
        lookups = []

        def get_after_competitor(queryset, *args, **kwargs):
            lookups.append(kwargs)
            if len(lookups) == 1:
                competitor = DollarRateService.refresh_rate()
                assert competitor.changed is True
                raise DollarRate.DoesNotExist()
            return real_get(queryset, *args, **kwargs)

        with patch.object(QuerySet, "get", autospec=True, side_effect=get_after_competitor):
            result = DollarRateService.refresh_rate()

        assert DollarRate.objects.count() == 1
        assert result.changed is True
        assert DollarRate.objects.get().base_value == Decimal("1000")
        assert provider.get_rate_data.call_count == 2

    @patch(PROVIDERS_PATH)
    def test_all_providers_fail_leaves_record_untouched(self, mock_providers, make_provider,
                                                         make_dollar_rate):
        make_dollar_rate(base_value="1000")
        mock_providers.return_value = [make_provider(None)]

        with pytest.raises(SourceUnavailable):
            DollarRateService.refresh_rate()

        assert DollarRate.objects.get().base_value == Decimal("1000")


@pytest.mark.django_db(transaction=True)
class TestGetCurrentRate:
    """Tests for DollarRateService.get_current_rate."""

    @patch(PROVIDERS_PATH)
    def test_returns_stored_rate_without_fetching(self, mock_providers, make_dollar_rate):
        make_dollar_rate(base_value="1000")

        rate = DollarRateService.get_current_rate()

        assert rate.base_value == Decimal("1000")
        mock_providers.assert_not_called()

    @patch(PROVIDERS_PATH)
    def test_bootstraps_when_absent(self, mock_providers, make_provider, make_fetched_rate):
        mock_providers.return_value = [make_provider(make_fetched_rate("980"))]

        rate = DollarRateService.get_current_rate()

        assert rate.base_value == Decimal("980")
        assert DollarRate.objects.count() == 1

    @patch(PROVIDERS_PATH)
    def test_bootstrap_failure_raises(self, mock_providers, make_provider):
        mock_providers.return_value = [make_provider(None)]

        with pytest.raises(SourceUnavailable):
            DollarRateService.get_current_rate()

        assert DollarRate.objects.count() == 0


@pytest.mark.django_db(transaction=True)
class TestUpdateMarkupConfig:
    """Tests for DollarRateService.update_markup_config."""

    @patch(PROVIDERS_PATH)
    def test_percentage_markup(self, mock_providers, make_dollar_rate):
        """Base 1000 with 10% gives 1100, without contacting any provider."""
        make_dollar_rate(base_value="1000")

        result = DollarRateService.update_markup_config(Decimal("10"), True)

        assert result.rate.effective_value == Decimal("1100")
        assert result.previous_effective_value == Decimal("1000")
        assert result.effective_value_changed is True
        assert DollarRate.objects.get().effective_value == Decimal("1100")
        mock_providers.assert_not_called()

    def test_flat_markup(self, make_dollar_rate):
        make_dollar_rate(base_value="1000")

        result = DollarRateService.update_markup_config("50", False)

        rate = DollarRate.objects.get()
        assert rate.effective_value == Decimal("1050")
        assert rate.markup_value == Decimal("50")
        assert rate.markup_is_percentage is False
        assert result.effective_value_changed is True

    def test_same_config_still_persists(self, make_dollar_rate):
        make_dollar_rate(base_value="1000", markup_value="10", markup_is_percentage=True)

        with patch.object(DollarRate, "save") as mock_save:
            result = DollarRateService.update_markup_config(Decimal("10"), True)

        assert result.effective_value_changed is False
        mock_save.assert_called_once()

    def test_negative_markup_rejected_before_write(self, make_dollar_rate):
        make_dollar_rate(base_value="1000", markup_value="5")

        with pytest.raises(MarkupValidationError):
            DollarRateService.update_markup_config(Decimal("-1"), False)

        assert DollarRate.objects.get().markup_value == Decimal("5")

    def test_non_boolean_flag_rejected(self, make_dollar_rate):
        make_dollar_rate(base_value="1000")

        with pytest.raises(MarkupValidationError):
            DollarRateService.update_markup_config(Decimal("10"), "yes")

    @patch(PROVIDERS_PATH)
    def test_requires_existing_record(self, mock_providers):
        with pytest.raises(RateNotInitialized):
            DollarRateService.update_markup_config(Decimal("10"), True)

        assert DollarRate.objects.count() == 0
        mock_providers.assert_not_called()


@pytest.mark.django_db(transaction=True)
class TestConvertToArs:
    """Tests for DollarRateService.convert_to_ars."""

    def test_converts_with_effective_value(self, make_dollar_rate):
        make_dollar_rate(base_value="1000", markup_value="10", markup_is_percentage=True)

        result = DollarRateService.convert_to_ars(Decimal("50"))

        assert result.amount_usd == Decimal("50")
        assert result.rate == Decimal("1100")
        assert result.amount_ars == Decimal("55000.00")
