import logging

import requests

from core.settings import BLUELYTICS_URL, DOLLAR_PROVIDER_TIMEOUT_SECONDS
from apps.pricing.domain.interfaces import BaseDollarRateProvider
from apps.pricing.domain.models import FetchedRate
from apps.pricing.infrastructure.persistence.models import ProviderName
from apps.pricing.infrastructure.providers.utils import parse_provider_timestamp, parse_rate_value

logger = logging.getLogger(__name__)


class BluelyticsProvider(BaseDollarRateProvider):
    """
    Bluelytics API provider (primary).
    Uses the /v2/latest endpoint and reads the blue dollar sell price.
    """

    name = ProviderName.BLUELYTICS

    def get_rate_data(self) -> FetchedRate | None:
        """
        Fetch the latest blue dollar rate from Bluelytics.

        Returns:
            FetchedRate, or None if the call fails or the payload is malformed
        """
        try:
            response = requests.get(BLUELYTICS_URL, timeout=DOLLAR_PROVIDER_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = response.json()

            # Response format: {"blue": {"value_sell": 1200.0, ...}, "last_update": "2024-05-21T14:03:00-03:00"}
            return FetchedRate(
                base_value=parse_rate_value(data["blue"]["value_sell"]),
                provider_name=self.name,
                source_fetched_at=parse_provider_timestamp(data["last_update"]),
            )

        except requests.exceptions.Timeout:
            logger.warning("Timeout calling Bluelytics after %ss", DOLLAR_PROVIDER_TIMEOUT_SECONDS)
            return None
        except requests.exceptions.HTTPError as e:
            logger.warning("HTTP error from Bluelytics: %s", e)
            return None
        except requests.exceptions.RequestException as e:
            logger.warning("Network error calling Bluelytics: %s", e)
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Invalid response from Bluelytics: %s", e)
            return None
        except Exception:
            logger.exception("Unexpected error calling Bluelytics")
            return None
