import logging

import requests

from core.settings import DOLARAPI_URL, DOLLAR_PROVIDER_TIMEOUT_SECONDS
from apps.pricing.domain.interfaces import BaseDollarRateProvider
from apps.pricing.domain.models import FetchedRate
from apps.pricing.infrastructure.persistence.models import ProviderName
from apps.pricing.infrastructure.providers.utils import parse_provider_timestamp, parse_rate_value

logger = logging.getLogger(__name__)


class DolarApiProvider(BaseDollarRateProvider):
    """
    DolarApi provider (fallback).
    Uses /v1/dolares/blue and reads the sell price.
    """

    name = ProviderName.DOLARAPI

    def get_rate_data(self) -> FetchedRate | None:
        try:
            response = requests.get(DOLARAPI_URL, timeout=DOLLAR_PROVIDER_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = response.json()

            # Response format: {"compra": 1180, "venta": 1200, "fechaActualizacion": "2024-05-21T17:01:00.000Z"}
            return FetchedRate(
                base_value=parse_rate_value(data["venta"]),
                provider_name=self.name,
                source_fetched_at=parse_provider_timestamp(data["fechaActualizacion"]),
            )

        except requests.exceptions.Timeout:
            logger.warning("Timeout calling DolarApi after %ss", DOLLAR_PROVIDER_TIMEOUT_SECONDS)
            return None
        except requests.exceptions.HTTPError as e:
            logger.warning("HTTP error from DolarApi: %s", e)
            return None
        except requests.exceptions.RequestException as e:
            logger.warning("Network error calling DolarApi: %s", e)
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Invalid response from DolarApi: %s", e)
            return None
        except Exception:
            logger.exception("Unexpected error calling DolarApi")
            return None
